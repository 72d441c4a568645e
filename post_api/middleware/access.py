"""
Post Service: Access Middleware
=================================

What:  Tags each request with an ID and writes one access-log line naming
       the post operation it hit.
How:   The request path is matched against the /api/posts routes to recover
       the operation name and, for item routes, the post_id. Both go into
       the log message and the record's `extra` fields.
When:  Inside the CORS middleware, so OPTIONS never reaches it.

Example line:
    PATCH /api/posts/9f1c... → 404 in 3.2ms op=update_post post_id=9f1c... [a1b2c3d4e5f6]

Bodies (post title/content) are never logged.
"""

import logging
import re
import time
import uuid
from contextvars import ContextVar
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("post_api.access")

# Read by the exception handlers to fill `request_id` in error bodies
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_POSTS_PATH = re.compile(r"^/api/posts(?:/(?P<post_id>[^/]+))?/?$")

_COLLECTION_OPERATIONS = {"GET": "list_posts", "POST": "create_post"}
_ITEM_OPERATIONS = {"GET": "get_post", "PATCH": "update_post", "DELETE": "delete_post"}


def describe_operation(method: str, path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Map a request onto (operation, post_id).

        >>> describe_operation("DELETE", "/api/posts/abc")
        ('delete_post', 'abc')
        >>> describe_operation("GET", "/health")
        (None, None)
    """
    match = _POSTS_PATH.match(path)
    if match is None:
        return None, None
    post_id = match.group("post_id")
    if post_id is None:
        return _COLLECTION_OPERATIONS.get(method), None
    return _ITEM_OPERATIONS.get(method), post_id


class PostAccessMiddleware(BaseHTTPMiddleware):
    """
    Request ID plus access log.

    The ID is the client's X-Request-ID when sent, otherwise 12 hex chars,
    and is echoed in the response header. Log level follows the status
    class: 5xx → ERROR, 4xx → WARNING, else INFO. /health is not logged.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        request_id_var.set(rid)
        request.state.request_id = rid

        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        path = request.url.path
        if path == "/health":
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        operation, post_id = describe_operation(request.method, path)
        status = response.status_code

        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(
            level,
            "%s %s → %d in %.1fms op=%s post_id=%s [%s]",
            request.method,
            path,
            status,
            duration_ms,
            operation or "-",
            post_id or "-",
            rid,
            extra={
                "request_id": rid,
                "operation": operation,
                "post_id": post_id,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
