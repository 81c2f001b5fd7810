"""Pydantic schemas for API requests and responses."""

from uuid import UUID

from pydantic import BaseModel, Field

from ...lib.links import Link


class NewLinkRequest(BaseModel):
    """Request to create a link."""
    
    destination: str = Field(..., description="Fully resolved URL to redirect to")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"destination": "https://www.google.com"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A stored link."""
    
    id: UUID = Field(..., description="Unique link id")
    hash: str = Field(..., description="Short path segment that redirects to the destination")
    destination: str = Field(..., description="Normalized destination URL")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "6f1f5a3e-3c39-4a4b-9d0e-2d3c7f5a9b10",
                    "hash": "dXbZa",
                    "destination": "https://www.google.com/",
                }
            ]
        }
    }
    
    @classmethod
    def from_link(cls, link: Link) -> "LinkResponse":
        return cls(id=link.id, hash=link.hash, destination=link.destination)


class ErrorResponse(BaseModel):
    """Error response."""
    
    error: str = Field(..., description="Error message")
