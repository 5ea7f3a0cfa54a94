"""Root route - landing page."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from improvado_gateway.core.constants import PAGE_TITLE_HOME
from improvado_gateway.ui.pages import home_content, layout


router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def root() -> HTMLResponse:
    """Root landing page with links to the tool list and health check."""
    return HTMLResponse(layout(home_content(), PAGE_TITLE_HOME))
