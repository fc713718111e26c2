"""Security headers + request body size limits."""

import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.update(_SECURITY_HEADERS)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject oversized bodies by their declared Content-Length.

    Bot updates get a tighter cap than admin calls; anything beyond either
    limit is answered with 413 before the body is read.
    """

    DEFAULT_LIMIT = 256 * 1024
    PATH_LIMITS = {"/telegram/webhook": 64 * 1024}

    def limit_for(self, path: str) -> int:
        return self.PATH_LIMITS.get(path, self.DEFAULT_LIMIT)

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return await call_next(request)

        limit = self.limit_for(request.url.path)
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > limit:
            logger.warning(
                "Rejected %s %s: body of %s bytes exceeds %s",
                request.method, request.url.path, declared, limit,
            )
            return JSONResponse(
                status_code=413,
                content={
                    "error": {
                        "code": 413,
                        "message": f"Request body too large. Max size is {limit // 1024} KB.",
                    }
                },
            )

        return await call_next(request)
