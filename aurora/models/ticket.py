"""Support ticket data models (camelCase on the wire and in the store)"""

from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

TicketStatus = Literal["open", "closed"]
Recipient = Union[int, Literal["all"]]


class Message(BaseModel):
    """One entry of a ticket thread. Messages are only ever appended."""

    model_config = ConfigDict(populate_by_name=True)

    sender_id: int = Field(alias="senderId")
    text: str
    timestamp: str  # ISO-8601, UTC


class Ticket(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: str = Field(alias="ticketId")
    user_id: Recipient = Field(alias="userId")
    subject: str
    status: TicketStatus = "open"
    created_at: str = Field(alias="createdAt")
    messages: List[Message] = Field(default_factory=list)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)
