# This file caps request body size on the bytes actually received.
# It exists because a chunked body carries no Content-Length for the header check to read.
# The ASGI receive channel is wrapped and counts each `http.request` chunk as it arrives.
# Crossing the cap raises a 413 HTTPException, which the registered handlers render as an error envelope.

from __future__ import annotations

from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.api.error_handlers import PAYLOAD_TOO_LARGE


class RequestBodyLimitMiddleware:
    """Pure ASGI middleware enforcing `max_body_bytes` on streamed request bodies."""

    def __init__(self, app: ASGIApp, *, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise StarletteHTTPException(status_code=413, detail=PAYLOAD_TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)
