"""Request body cap for upload routes.

Enforced while the body is received, before any multipart parsing spools it
to a temporary file.
"""

import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.config import get_settings
from app.core.errors import UploadTooLarge, error_response

logger = logging.getLogger(__name__)


class BodyTooLarge(Exception):
    pass


class UploadSizeLimitMiddleware:
    """Rejects request bodies above ``MAX_UPLOAD_BYTES`` with a 413.

    A declared ``Content-Length`` over the cap is refused without reading the
    body. Otherwise bytes are counted as they arrive and reading stops at the
    first chunk past the cap.
    """

    def __init__(self, app: ASGIApp, paths: tuple[str, ...] = ("/api/upload",)) -> None:
        self.app = app
        self.paths = paths

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] not in self.paths:
            await self.app(scope, receive, send)
            return

        max_bytes = get_settings().max_upload_bytes
        declared = _content_length(scope)
        if declared is not None and declared > max_bytes:
            await self._reject(scope, receive, send, max_bytes)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes:
                    exceeded = True
                    raise BodyTooLarge()
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            # Whatever the app answers to a truncated body is replaced by the 413.
            if exceeded:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except BodyTooLarge:
            pass
        if exceeded and not response_started:
            await self._reject(scope, receive, send, max_bytes)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send, max_bytes: int) -> None:
        exc = UploadTooLarge(f"Request body exceeds the {max_bytes} byte upload limit")
        logger.warning("Rejected %s: %s", scope["path"], exc.message)
        await error_response(exc.status_code, exc.message)(scope, receive, send)


def _content_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None
