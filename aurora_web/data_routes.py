"""Per-user data view (role filtered) and liveness."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from aurora.app import AuroraApp
from aurora.auth.verifier import parse_user_id
from aurora.utils.exceptions import UserNotFound
from .deps import get_aurora

router = APIRouter(prefix="/api", tags=["data"])


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/data/{user_id}")
def get_user_data(user_id: str, aurora: AuroraApp = Depends(get_aurora)) -> Dict[str, Any]:
    """
    Orders and tickets visible to `user_id`.

    Admins also receive adminData with every order, ticket and user.
    """
    try:
        uid = parse_user_id(user_id)
    except ValueError:
        raise UserNotFound(user_id)
    return aurora.projector.project(uid)
