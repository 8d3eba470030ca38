"""FastAPI application for the Aurora support desk"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aurora import __version__
from aurora.app import AuroraApp
from aurora.utils.exceptions import NotFoundError, PermissionDenied, StoreUnavailable
from aurora.utils.logger import get_logger
from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .data_routes import router as data_router
from .order_routes import router as order_router
from .ticket_routes import router as ticket_router

logger = get_logger(__name__)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _failure(404, str(exc))


async def _permission_handler(request: Request, exc: PermissionDenied) -> JSONResponse:
    logger.warning("Permission denied", path=request.url.path, error=str(exc))
    return _failure(403, str(exc))


async def _store_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Store unavailable", path=request.url.path, error=str(exc))
    return _failure(500, "Internal Server Error")


def create_app(aurora: Optional[AuroraApp] = None) -> FastAPI:
    """
    Build the web app around an AuroraApp.

    Without an argument, settings are loaded from the environment and the
    JSON file store is used. Usable as a uvicorn factory.
    """
    if aurora is None:
        aurora = AuroraApp()
    if aurora.binder is None:
        aurora.initialize()

    app = FastAPI(
        title="Aurora Support Desk",
        description="Orders and support tickets behind Telegram login",
        version=__version__,
    )
    app.state.aurora = aurora

    web = aurora.settings.web
    app.add_middleware(
        CORSMiddleware,
        allow_origins=web.cors_origins if web.environment.lower() == "production" else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(PermissionDenied, _permission_handler)
    app.add_exception_handler(StoreUnavailable, _store_handler)

    app.include_router(auth_router)
    app.include_router(data_router)
    app.include_router(order_router)
    app.include_router(ticket_router)
    app.include_router(admin_router)
    return app
