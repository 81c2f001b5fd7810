"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Request, status

from .schemas import NewLinkRequest, LinkResponse, ErrorResponse

router = APIRouter()


@router.post(
    "/link",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ErrorResponse, "description": "Malformed destination URL"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
    summary="Create link",
    description="Validate a destination URL, generate a short hash for it and store it.",
)
async def create_link(request: Request, body: NewLinkRequest):
    """Create a new link."""
    service = request.app.state.service
    
    link = await service.create_link(body.destination)
    
    return LinkResponse.from_link(link)


@router.get(
    "/links",
    response_model=List[LinkResponse],
    summary="List links",
    description="List every stored link ordered by destination. Returns an empty list if the read fails.",
)
async def list_links(request: Request):
    """List all links."""
    service = request.app.state.service
    
    links = await service.list_links()
    
    return [LinkResponse.from_link(link) for link in links]
