"""Error types raised by the form decoding pipeline."""

from __future__ import annotations

from typing import Any

from .http import Status, ensure_status, is_client_error, reason_phrase
from .serialization import json_encode


class HermesError(Exception):
    """Base error type."""


class HTTPError(HermesError):
    """Structured HTTP error carrying a status code and a client-facing detail."""

    def __init__(self, status: int | Status, detail: Any, *, body: str | None = None) -> None:
        status_code = ensure_status(status)
        super().__init__(status_code, detail)
        self.status = status_code
        self.detail = detail
        self.reason = reason_phrase(status_code)
        self.body = body

    @property
    def message(self) -> str:
        if isinstance(self.detail, str):
            return self.detail
        return self.reason

    @property
    def expose(self) -> bool:
        """Whether the message is safe to show to the client."""

        return is_client_error(self.status)

    def to_response_body(self) -> bytes:
        return json_encode({"error": {"status": self.status, "reason": self.reason, "detail": self.detail}})


class BadRequest(HTTPError):
    """The body could not be parsed into a form structure."""

    def __init__(self, detail: Any = "Bad Request", *, body: str | None = None) -> None:
        super().__init__(Status.BAD_REQUEST, detail, body=body)


class PayloadTooLarge(HTTPError):
    def __init__(self, detail: Any = "request entity too large") -> None:
        super().__init__(Status.PAYLOAD_TOO_LARGE, detail)


class UnsupportedMediaType(HTTPError):
    """The declared encoding, content type or charset cannot be decoded."""

    def __init__(self, detail: Any = "Unsupported Media Type") -> None:
        super().__init__(Status.UNSUPPORTED_MEDIA_TYPE, detail)


class ClientDisconnect(BadRequest):
    """The client went away before the request body was fully received."""

    def __init__(self, detail: Any = "client disconnected before the body was received") -> None:
        super().__init__(detail)


__all__ = [
    "BadRequest",
    "ClientDisconnect",
    "HTTPError",
    "HermesError",
    "PayloadTooLarge",
    "UnsupportedMediaType",
]
