"""Access logging middleware: one structured record per HTTP request."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from starlette.datastructures import Headers, MutableHeaders

REQUEST_ID_HEADER = "x-request-id"

logger = logging.getLogger("box_office_league.access")


class StructuredLoggingMiddleware:
    """Logs method, path, status, caller and latency; echoes a request id."""

    def __init__(self, app: Callable) -> None:
        self.app = app

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        headers = Headers(scope=scope)
        request_id = headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        status_code = 500

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            client = scope.get("client")
            level = logging.ERROR if status_code >= 500 else logging.INFO
            logger.log(
                level,
                "request",
                extra={
                    "request_id": request_id,
                    "method": scope["method"],
                    "path": scope["path"],
                    "query": scope.get("query_string", b"").decode("latin-1"),
                    "status_code": status_code,
                    "user_id": headers.get("x-user-id"),
                    "client_ip": client[0] if client else None,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
