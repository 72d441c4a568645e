"""
Post Service: Permissive CORS Middleware
==========================================

What:  Stamps the same cross-origin headers on every response and answers
       every OPTIONS request with 204 before it reaches routing.
How:   Starlette BaseHTTPMiddleware; header values come from settings.
When:  Outermost middleware, so preflights skip logging and route lookup.

Headers (defaults):
    Access-Control-Allow-Origin:  *
    Access-Control-Allow-Methods: GET, POST, PATCH, PUT, DELETE, OPTIONS
    Access-Control-Allow-Headers: Content-Type, Authorization

Starlette's CORSMiddleware only adds the method/header lists to preflight
responses and only answers OPTIONS that carry the preflight headers, so it
does not fit a contract of identical headers on every response.
"""

import logging
from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from post_api.config import settings

logger = logging.getLogger(__name__)


def cors_headers() -> Dict[str, str]:
    """The header set applied to every response."""
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Methods": ", ".join(settings.cors_allow_methods_list),
        "Access-Control-Allow-Headers": settings.cors_allow_headers,
    }


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Adds CORS headers to all responses; short-circuits OPTIONS with 204."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            logger.debug(
                "Preflight %s from origin %s answered with 204",
                request.url.path,
                request.headers.get("Origin", "-"),
            )
            return Response(status_code=204, headers=cors_headers())

        response = await call_next(request)
        response.headers.update(cors_headers())
        return response
