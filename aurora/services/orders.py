"""
Order ledger.

Orders are free-form mappings (payment and fulfillment fields are owned by
the storefront); the ledger only owns `id`. Updates are a shallow merge:
patch keys overwrite, everything else is kept.
"""

from typing import Any, Dict, Mapping, Optional

from ..core.ids import IdGenerator
from ..stores.document_store import DocumentStore
from ..utils.exceptions import OrderNotFound
from ..utils.logger import get_logger

logger = get_logger(__name__)


class OrderLedger:
    def __init__(self, store: DocumentStore, ids: Optional[IdGenerator] = None):
        self.store = store
        self.ids = ids or IdGenerator()

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        order = dict(payload)
        order["id"] = self.ids.order_id()
        with self.store.transaction() as snapshot:
            snapshot["orders"].append(order)
        logger.info("Order created", order_id=order["id"], buyer_id=order.get("buyerId"))
        return order

    def update(self, order_id: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge `patch` into the stored order. The order id itself never changes."""
        changes = {k: v for k, v in patch.items() if k != "id"}
        with self.store.transaction() as snapshot:
            orders = snapshot["orders"]
            index = next((i for i, o in enumerate(orders) if o.get("id") == order_id), None)
            if index is None:
                raise OrderNotFound(order_id)
            merged = {**orders[index], **changes}
            orders[index] = merged
        logger.info("Order updated", order_id=order_id, fields=sorted(changes))
        return merged
