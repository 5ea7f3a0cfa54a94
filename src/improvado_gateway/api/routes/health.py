"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter, Request

from improvado_gateway import __version__


router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Liveness check. Does not contact Improvado or Notion."""
    dispatcher = request.app.state.dispatcher
    return {
        "status": "ok",
        "version": __version__,
        "tools": len(dispatcher.tools),
    }
