"""
Support ticket threads.

- open(): a user starts a conversation (status "open").
- reply(): anyone appends to a thread; replying always reopens it, even
  when the reply comes from an admin or the ticket was closed.
- broadcast(): an admin announcement addressed to "all", created closed and
  with the announcement marker prefixed to the subject.
- direct_message(): an admin starts an open thread with one user.

Broadcast and direct messages require the sender to be a stored admin.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..core.clock import iso_now, utc_now
from ..core.ids import IdGenerator
from ..models.ticket import Message, Recipient, Ticket
from ..stores.document_store import DocumentStore, Snapshot
from ..utils.exceptions import PermissionDenied, TicketNotFound
from ..utils.logger import get_logger
from .access import BROADCAST_RECIPIENT, find_user

logger = get_logger(__name__)

DEFAULT_ANNOUNCEMENT_MARKER = "[សេចក្តីជូនដំណឹង]"


def _require_admin(snapshot: Snapshot, admin_id: int) -> None:
    admin = find_user(snapshot, admin_id)
    if admin.get("role") != "admin":
        raise PermissionDenied("Admin only")


class TicketThread:
    def __init__(
        self,
        store: DocumentStore,
        ids: Optional[IdGenerator] = None,
        announcement_marker: str = DEFAULT_ANNOUNCEMENT_MARKER,
        now: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.ids = ids or IdGenerator()
        self.announcement_marker = announcement_marker
        self._now = now

    def _new_ticket(self, recipient: Recipient, subject: str, sender_id: int, text: str, status: str) -> Dict[str, Any]:
        timestamp = iso_now(self._now)
        return Ticket(
            ticket_id=self.ids.ticket_id(),
            user_id=recipient,
            subject=subject,
            status=status,
            created_at=timestamp,
            messages=[Message(sender_id=sender_id, text=text, timestamp=timestamp)],
        ).to_record()

    def open(self, user_id: int, subject: str, message: str) -> Dict[str, Any]:
        ticket = self._new_ticket(user_id, subject, user_id, message, "open")
        with self.store.transaction() as snapshot:
            snapshot["tickets"].append(ticket)
        logger.info("Ticket opened", ticket_id=ticket["ticketId"], user_id=user_id)
        return ticket

    def reply(self, ticket_id: str, sender_id: int, text: str) -> Dict[str, Any]:
        message = Message(sender_id=sender_id, text=text, timestamp=iso_now(self._now))
        with self.store.transaction() as snapshot:
            ticket = next((t for t in snapshot["tickets"] if t.get("ticketId") == ticket_id), None)
            if ticket is None:
                raise TicketNotFound(ticket_id)
            ticket.setdefault("messages", []).append(message.model_dump(by_alias=True))
            ticket["status"] = "open"
        logger.info("Ticket reply", ticket_id=ticket_id, sender_id=sender_id, messages=len(ticket["messages"]))
        return ticket

    def broadcast(self, admin_id: int, subject: str, message: str) -> Dict[str, Any]:
        ticket = self._new_ticket(
            BROADCAST_RECIPIENT,
            f"{self.announcement_marker} {subject}",
            admin_id,
            message,
            "closed",
        )
        with self.store.transaction() as snapshot:
            _require_admin(snapshot, admin_id)
            snapshot["tickets"].append(ticket)
        logger.info("Broadcast sent", ticket_id=ticket["ticketId"], admin_id=admin_id)
        return ticket

    def direct_message(self, admin_id: int, target_user_id: int, subject: str, message: str) -> Dict[str, Any]:
        ticket = self._new_ticket(target_user_id, subject, admin_id, message, "open")
        with self.store.transaction() as snapshot:
            _require_admin(snapshot, admin_id)
            snapshot["tickets"].append(ticket)
        logger.info("Direct message sent", ticket_id=ticket["ticketId"], admin_id=admin_id, user_id=target_user_id)
        return ticket
