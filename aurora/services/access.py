"""
Role-filtered read view over orders and tickets.

Every caller sees their own orders plus tickets addressed to them or to
everyone ("all"). Admins additionally get the complete, unfiltered
orders/tickets/users collections under adminData; non-admins get no
adminData key at all.
"""

from typing import Any, Dict

from ..stores.document_store import DocumentStore
from ..utils.exceptions import UserNotFound

BROADCAST_RECIPIENT = "all"


def find_user(snapshot: Dict[str, Any], user_id: int) -> Dict[str, Any]:
    user = next((u for u in snapshot["users"] if u.get("id") == user_id), None)
    if user is None:
        raise UserNotFound(user_id)
    return user


def ticket_visible_to(ticket: Dict[str, Any], user_id: int) -> bool:
    recipient = ticket.get("userId")
    return recipient == BROADCAST_RECIPIENT or recipient == user_id


class AccessProjector:
    def __init__(self, store: DocumentStore):
        self.store = store

    def project(self, user_id: int) -> Dict[str, Any]:
        snapshot = self.store.read_all()
        user = find_user(snapshot, user_id)

        view: Dict[str, Any] = {
            "orders": [o for o in snapshot["orders"] if o.get("buyerId") == user_id],
            "tickets": [t for t in snapshot["tickets"] if ticket_visible_to(t, user_id)],
        }
        if user.get("role") == "admin":
            view["adminData"] = {
                "allOrders": snapshot["orders"],
                "allTickets": snapshot["tickets"],
                "allUsers": snapshot["users"],
            }
        return view
