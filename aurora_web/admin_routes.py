"""
Admin messaging.

POST /api/admin/message with target "all" sends a broadcast announcement;
any other target must be a numeric user id and starts a direct thread.
The sender must be a stored admin.
"""

from typing import Dict, Literal, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from aurora.app import AuroraApp
from aurora.services.access import BROADCAST_RECIPIENT
from .deps import get_aurora

router = APIRouter(prefix="/api/admin", tags=["admin"])


class AdminMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin_id: int = Field(alias="adminId")
    target: Union[Literal["all"], int]
    subject: str
    message: str


@router.post("/message")
def admin_message(body: AdminMessageRequest, aurora: AuroraApp = Depends(get_aurora)) -> Dict[str, bool]:
    if body.target == BROADCAST_RECIPIENT:
        aurora.tickets.broadcast(body.admin_id, body.subject, body.message)
    else:
        aurora.tickets.direct_message(body.admin_id, body.target, body.subject, body.message)
    return {"success": True}
