"""Health check and redirect routes."""

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

router = APIRouter()

# Where unknown hashes are sent
FALLBACK_LOCATION = "/"


@router.get("/health", response_class=PlainTextResponse, include_in_schema=False)
async def health():
    """Health endpoint for container platforms; any 200 means ready for traffic."""
    return "OK"


@router.get("/{hash}", include_in_schema=False)
async def visit_link(request: Request, hash: str):
    """Redirect to the destination of a link, or to the root if there is none."""
    service = request.app.state.service
    
    link = await service.resolve(hash)
    
    location = link.destination if link else FALLBACK_LOCATION
    return RedirectResponse(url=location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
