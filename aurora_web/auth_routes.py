"""
Telegram login widget callback.

The widget opens this URL in a popup with the signed assertion as query
parameters. On success the popup hands the user record to its opener and
closes itself.
"""

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from aurora.app import AuroraApp
from aurora.auth.models import User
from aurora.utils.exceptions import InvalidSignature
from aurora.utils.logger import get_logger
from .deps import get_aurora

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

OPENER_CALLBACK = "handleTelegramLogin"


def _script_json(user: User) -> str:
    """JSON safe to embed inside a <script> element"""
    raw = json.dumps(user.to_record(), ensure_ascii=False)
    return raw.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def render_login_success(user: User) -> str:
    return (
        f"<script>window.opener.{OPENER_CALLBACK}({_script_json(user)}); "
        "window.close();</script>"
    )


@router.get("/provider/callback", response_class=HTMLResponse)
def provider_callback(request: Request, aurora: AuroraApp = Depends(get_aurora)) -> HTMLResponse:
    assertion = dict(request.query_params)
    try:
        user = aurora.login(assertion)
    except InvalidSignature:
        return HTMLResponse("<h1>Error: Invalid Data</h1>", status_code=400)
    except Exception as e:
        logger.exception("Login callback failed", error=str(e))
        return HTMLResponse("<h1>Internal Server Error</h1>", status_code=500)

    logger.info("User logged in", user_id=user.id, role=user.role)
    return HTMLResponse(render_login_success(user))
