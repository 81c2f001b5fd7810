"""Validation utilities for link destinations."""

import re

from pydantic import AnyUrl, TypeAdapter, ValidationError


_URL_ADAPTER = TypeAdapter(AnyUrl)

# A '%' must always start a two-digit hex escape
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def normalize_url(url: str) -> str:
    """Parse an absolute URL and return its canonical string form.
    
    Parsing follows the WHATWG URL rules, so the canonical form may differ
    from the input (e.g. ``https://example.com`` becomes
    ``https://example.com/``). Feeding the result back in returns it unchanged.
    
    Args:
        url: The candidate URL
        
    Returns:
        Normalized URL string
        
    Raises:
        ValueError: If the URL is empty, relative, hostless or malformed
    """
    if not url or not isinstance(url, str):
        raise ValueError("URL is required")
    
    if _BAD_PERCENT_ESCAPE.search(url):
        raise ValueError("URL contains a malformed percent-encoding")
    
    try:
        parsed = _URL_ADAPTER.validate_python(url)
    except ValidationError as e:
        raise ValueError(f"Invalid URL format: {e.errors()[0]['msg']}") from e
    
    if not parsed.host:
        raise ValueError("URL must have a valid host")
    
    return str(parsed)

