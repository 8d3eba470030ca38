"""Order create/update. Bodies are free-form JSON objects."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from aurora.app import AuroraApp
from .deps import get_aurora

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("")
def create_order(
    payload: Dict[str, Any] = Body(...),
    aurora: AuroraApp = Depends(get_aurora),
) -> Dict[str, Any]:
    order = aurora.orders.create(payload)
    return {"success": True, "order": order}


@router.put("/{order_id}")
def update_order(
    order_id: str,
    patch: Dict[str, Any] = Body(...),
    aurora: AuroraApp = Depends(get_aurora),
) -> Dict[str, Any]:
    """Shallow merge: keys in the body overwrite, other stored keys stay."""
    order = aurora.orders.update(order_id, patch)
    return {"success": True, "order": order}
