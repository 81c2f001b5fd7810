"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable, Optional


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""
    
    def __init__(self, app, logger: Optional[logging.Logger] = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or logging.getLogger("link_shortener.web")
    
    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.perf_counter()
        
        client_ip = request.client.host if request.client else "unknown"
        self.logger.debug(f"Request: {request.method} {request.url.path} from {client_ip}")
        
        response = await call_next(request)
        
        duration_ms = (time.perf_counter() - start_time) * 1000
        
        self.logger.info(
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms",
            extra={
                "status_code": response.status_code,
                "request_duration_ms": round(duration_ms, 2),
            },
        )
        
        return response
