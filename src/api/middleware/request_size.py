"""Request body size limiting middleware."""

import logging

from fastapi import status
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.api.middleware.error_handler import create_error_response
from src.core.config import get_settings

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware:
    """Reject request bodies larger than MAX_REQUEST_BODY_SIZE.

    Stripe webhook payloads and cart requests are small, so the default
    limit is 64 KiB. A declared Content-Length above the limit is refused
    before reading. Otherwise the body is read and counted as it arrives,
    which also covers chunked requests that declare no length, and then
    replayed to the application unchanged.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        max_size = get_settings().max_request_body_size
        headers = Headers(scope=scope)

        content_length = headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            await self._reject(scope, receive, send, headers, int(content_length), max_size)
            return

        messages: list[Message] = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > max_size:
                await self._reject(scope, receive, send, headers, received, max_size)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
        headers: Headers,
        size: int,
        max_size: int,
    ) -> None:
        logger.warning(
            "Request body too large on %s: %d bytes (max: %d)",
            scope.get("path"),
            size,
            max_size,
        )
        response = create_error_response(
            error_type="request_too_large",
            message=f"Request body exceeds maximum size of {max_size} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            request_id=headers.get("X-Request-ID"),
        )
        await response(scope, receive, send)
