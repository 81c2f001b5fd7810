"""Short code generation utilities."""

import string
import uuid
from typing import Optional


class ShortCodeGenerator:
    """Generate short codes for links."""
    
    # Base62 characters (alphanumeric, case-sensitive, lowercase first)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9
    
    def __init__(self, default_length: int = 5):
        """Initialize short code generator.
        
        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("Short code length must be positive")
        self.default_length = default_length
    
    def generate_from_uuid(self, link_id: uuid.UUID, length: Optional[int] = None) -> str:
        """Generate short code from the raw bytes of a UUID.
        
        Args:
            link_id: The UUID to derive the code from
            length: Length of the code (uses default if not specified)
            
        Returns:
            First N characters of the base62 encoding of the UUID bytes
        """
        length = length or self.default_length
        return self.encode_bytes(link_id.bytes)[:length]
    
    def encode_bytes(self, data: bytes) -> str:
        """Encode raw bytes as base62.
        
        The bytes are read as one big-endian number. Every leading zero byte
        is kept as a leading zero digit so the encoding stays reversible.
        
        Args:
            data: Bytes to encode
            
        Returns:
            Base62 string
        """
        zeros = len(data) - len(data.lstrip(b"\x00"))
        num = int.from_bytes(data, "big")
        
        prefix = self.BASE62_CHARS[0] * zeros
        if num == 0:
            return prefix
        return prefix + self._int_to_base62(num)
    
    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string.
        
        Args:
            num: Integer to convert
            
        Returns:
            Base62 string
        """
        if num == 0:
            return self.BASE62_CHARS[0]
        
        result = []
        base = len(self.BASE62_CHARS)
        
        while num > 0:
            remainder = num % base
            result.append(self.BASE62_CHARS[remainder])
            num = num // base
        
        return ''.join(reversed(result))
    
    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code has valid format (base62 only).
        
        Args:
            code: Code to validate
            
        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.BASE62_CHARS for c in code)
