"""Testing helpers."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from .config import FORM_CONTENT_TYPE
from .querystring import stringify
from .requests import Request


def encode_form(data: Mapping[str, Any] | str | bytes, *, allow_dots: bool = False) -> bytes:
    """Return ``data`` url-encoded; strings and bytes are used verbatim."""

    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode()
    return stringify(data, allow_dots=allow_dots).encode()


def form_request(
    data: Mapping[str, Any] | str | bytes = b"",
    *,
    headers: Mapping[str, str] | None = None,
    chunk_size: int | None = None,
    content_type: str | None = FORM_CONTENT_TYPE,
) -> Request:
    """Build a POST request carrying ``data`` as a url-encoded body.

    With ``chunk_size`` the body is delivered through an async loader that
    yields to the event loop between chunks, like a streamed upload.
    """

    body = encode_form(data)
    request_headers = {"content-length": str(len(body))}
    if content_type is not None:
        request_headers["content-type"] = content_type
    request_headers.update({k.lower(): v for k, v in (headers or {}).items()})
    if chunk_size is None:
        return Request(method="POST", path="/", headers=request_headers, body=body)

    async def loader() -> bytes:
        buffer = bytearray()
        for start in range(0, len(body), chunk_size):
            await asyncio.sleep(0)
            buffer.extend(body[start : start + chunk_size])
        return bytes(buffer)

    return Request(method="POST", path="/", headers=request_headers, body_loader=loader)


__all__ = ["encode_form", "form_request"]
