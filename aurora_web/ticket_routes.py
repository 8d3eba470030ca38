"""User-facing ticket routes"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from aurora.app import AuroraApp
from .deps import get_aurora

router = APIRouter(prefix="/api/tickets", tags=["tickets"])


class TicketCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    subject: str
    message: str


class TicketReplyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender_id: int = Field(alias="senderId")
    text: str


@router.post("")
def create_ticket(body: TicketCreateRequest, aurora: AuroraApp = Depends(get_aurora)) -> Dict[str, Any]:
    ticket = aurora.tickets.open(body.user_id, body.subject, body.message)
    return {"success": True, "ticket": ticket}


@router.post("/{ticket_id}/reply")
def reply_ticket(
    ticket_id: str,
    body: TicketReplyRequest,
    aurora: AuroraApp = Depends(get_aurora),
) -> Dict[str, Any]:
    """Append a message; the ticket is (re)opened."""
    ticket = aurora.tickets.reply(ticket_id, body.sender_id, body.text)
    return {"success": True, "ticket": ticket}
