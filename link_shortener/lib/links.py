"""The Link entity: construction, validation and serialization."""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .common.validators import normalize_url
from .exceptions import InvalidUrl
from .shortcode import ShortCodeGenerator


_DEFAULT_GENERATOR = ShortCodeGenerator()


@dataclass(frozen=True)
class Link:
    """A shortened URL that redirects to a full URL.
    
    Attributes:
        id: Random 128-bit identifier assigned at creation
        hash: Short, opaque path segment derived from ``id``
        destination: Normalized absolute URL to redirect to
    """
    
    id: uuid.UUID
    hash: str
    destination: str
    
    @classmethod
    def new(
        cls,
        destination: str,
        generator: Optional[ShortCodeGenerator] = None,
    ) -> "Link":
        """Build a new Link with a fresh id and a hash derived from it.
        
        No collision check happens here; the datastore's unique constraint
        on ``hash`` catches duplicates.
        
        Args:
            destination: Already-normalized destination URL
            generator: Optional short code generator (5-char codes by default)
            
        Returns:
            New Link
        """
        generator = generator or _DEFAULT_GENERATOR
        link_id = uuid.uuid4()
        return cls(
            id=link_id,
            hash=generator.generate_from_uuid(link_id),
            destination=destination,
        )
    
    @classmethod
    def from_destination(
        cls,
        candidate: str,
        generator: Optional[ShortCodeGenerator] = None,
    ) -> "Link":
        """Validate a candidate destination and build a Link from it.
        
        Args:
            candidate: Arbitrary caller-supplied string
            generator: Optional short code generator
            
        Returns:
            New Link with the normalized destination
            
        Raises:
            InvalidUrl: If the candidate is not a well-formed absolute URL
        """
        try:
            destination = normalize_url(candidate)
        except ValueError as e:
            raise InvalidUrl(str(e)) from e
        return cls.new(destination, generator=generator)
    
    @classmethod
    def from_new_link(cls, new_link: Any, generator: Optional[ShortCodeGenerator] = None) -> "Link":
        """Build a Link from a request object carrying a ``destination`` field."""
        return cls.from_destination(new_link.destination, generator=generator)
    
    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Link":
        """Create from a datastore row."""
        # asyncpg hands back its own UUID subclass
        return cls(
            id=uuid.UUID(str(record["id"])),
            hash=record["hash"],
            destination=record["destination"],
        )
    
    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {
            "id": str(self.id),
            "hash": self.hash,
            "destination": self.destination,
        }
