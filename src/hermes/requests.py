"""Request primitives."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Mapping

from .encoding import RawPayload
from .exceptions import BadRequest, ClientDisconnect, PayloadTooLarge

if TYPE_CHECKING:
    from .config import ParseOptions
    from .forms import FormResult

BodyLoader = Callable[[], Awaitable[bytes | bytearray | memoryview | None]]
Receive = Callable[[], Awaitable[Mapping[str, Any]]]


class Request:
    """Read-only view of an incoming request and its lazily loaded body."""

    __slots__ = (
        "_body",
        "_body_loader",
        "_body_lock",
        "headers",
        "method",
        "path",
    )

    def __init__(
        self,
        *,
        method: str = "POST",
        path: str = "/",
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        body_loader: BodyLoader | None = None,
    ) -> None:
        if body is not None and body_loader is not None:
            raise ValueError("Request body and body_loader are mutually exclusive")
        self.method = method.upper()
        self.path = path
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self._body: bytes | None = body if body is not None else None
        self._body_loader = body_loader
        self._body_lock = asyncio.Lock()

    @classmethod
    def from_asgi(
        cls,
        scope: Mapping[str, Any],
        receive: Receive,
        *,
        max_body_bytes: int | None = None,
    ) -> "Request":
        """Build a request from an ASGI HTTP ``scope`` and ``receive`` channel.

        The body is only read when first awaited. A disconnect before the final
        ``http.request`` message raises :class:`ClientDisconnect`; exceeding
        ``max_body_bytes`` while streaming raises :class:`PayloadTooLarge`.
        """

        if scope.get("type") != "http":
            raise ValueError("Request.from_asgi only supports HTTP scopes")
        headers = _decode_scope_headers(scope.get("headers") or [])
        return cls(
            method=scope.get("method", "GET"),
            path=scope.get("path", "/"),
            headers=headers,
            body_loader=_asgi_body_loader(receive, max_body_bytes),
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    @property
    def content_length(self) -> int | None:
        raw = self.header("content-length")
        if raw is None or not raw.strip():
            return None
        try:
            length = int(raw)
        except ValueError as exc:
            raise BadRequest("invalid content-length") from exc
        if length < 0:
            raise BadRequest("invalid content-length")
        return length

    async def _ensure_body(self) -> bytes:
        if self._body is None:
            loader = self._body_loader
            if loader is None:
                self._body = b""
            else:
                await self._body_lock.acquire()
                try:
                    if self._body is None:
                        raw = await loader()
                        if raw is None:
                            self._body = b""
                        elif isinstance(raw, bytes):
                            self._body = raw
                        else:
                            self._body = bytes(raw)
                        self._body_loader = None
                finally:
                    self._body_lock.release()
        body = self._body
        assert body is not None
        return body

    async def body(self) -> bytes:
        return await self._ensure_body()

    async def payload(self) -> RawPayload:
        """Buffer the body and return it with its declared metadata."""

        length = self.content_length
        content = await self._ensure_body()
        return RawPayload(
            content=content,
            content_type=self.header("content-type"),
            content_encoding=self.header("content-encoding"),
            content_length=length,
        )

    async def form(self, options: "ParseOptions | Mapping[str, Any] | None" = None) -> "dict[str, Any] | FormResult":
        """Decode the url-encoded body, see :func:`hermes.forms.parse_form`."""

        from .forms import parse_form

        return await parse_form(self, options)


def _decode_scope_headers(raw_headers: Iterable[tuple[bytes, bytes]]) -> dict[str, str]:
    return {name.decode("latin-1").lower(): value.decode("latin-1") for name, value in raw_headers}


def _asgi_body_loader(receive: Receive, max_body_bytes: int | None) -> BodyLoader:
    async def load_body() -> bytes:
        buffer = bytearray()
        while True:
            message = await receive()
            message_type = message.get("type")
            if message_type == "http.disconnect":
                raise ClientDisconnect()
            if message_type != "http.request":
                continue
            chunk = message.get("body", b"")
            if chunk:
                if max_body_bytes is not None and len(buffer) + len(chunk) > max_body_bytes:
                    raise PayloadTooLarge()
                buffer.extend(chunk)
            if not message.get("more_body", False):
                return bytes(buffer)

    return load_body


__all__ = ["BodyLoader", "Request"]
