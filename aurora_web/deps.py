"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from aurora.app import AuroraApp


def get_aurora(request: Request) -> AuroraApp:
    """The AuroraApp instance attached by create_app()."""
    return request.app.state.aurora
