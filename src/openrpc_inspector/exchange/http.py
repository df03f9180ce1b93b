"""Captured HTTP exchanges.

The inspector only needs an exchange whose request body can be decoded
asynchronously (``HttpExchange``). ``CapturedExchange`` is the concrete
implementation used by the CLI and tests, loadable from a JSON/YAML file.
"""

import base64
import gzip
import json
import zlib
from pathlib import Path
from typing import Literal, Protocol

import yaml
from pydantic import BaseModel, ConfigDict


class UnsupportedEncodingError(Exception):
    """The body uses a Content-Encoding we cannot decode."""


class HttpBody(Protocol):
    async def decoded(self) -> bytes: ...


class HttpRequest(Protocol):
    body: HttpBody


class HttpExchange(Protocol):
    request: HttpRequest


class CapturedBody(BaseModel):
    """Raw body bytes as seen on the wire, plus their Content-Encoding."""

    model_config = ConfigDict(frozen=True)

    raw: bytes = b""
    content_encoding: str | None = None

    async def decoded(self) -> bytes:
        """Return the body with its content encoding removed."""
        encoding = (self.content_encoding or "identity").strip().lower()
        if encoding == "identity" or not self.raw:
            return self.raw
        if encoding in ("gzip", "x-gzip"):
            return gzip.decompress(self.raw)
        if encoding == "deflate":
            try:
                return zlib.decompress(self.raw)
            except zlib.error:
                # Some servers send raw deflate without the zlib wrapper
                return zlib.decompress(self.raw, -zlib.MAX_WBITS)
        raise UnsupportedEncodingError(f"Cannot decode body with content encoding '{encoding}'")


class CapturedRequest(BaseModel):
    method: str = "POST"
    url: str = ""
    headers: dict[str, str] = {}
    body: CapturedBody = CapturedBody()


class CapturedResponse(BaseModel):
    status_code: int
    status_message: str = ""
    headers: dict[str, str] = {}
    body: CapturedBody = CapturedBody()


class CapturedExchange(BaseModel):
    """One request and, once known, its response (or ``"aborted"``)."""

    request: CapturedRequest
    response: CapturedResponse | Literal["aborted"] | None = None


def load_exchange(file_path: Path) -> CapturedExchange:
    """Load a captured exchange from a JSON/YAML file.

    Bodies may be given as text, as structured JSON (re-serialised), or as
    ``body_base64`` for encoded payloads.
    """
    data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("request"), dict):
        raise ValueError(f"{file_path} has no 'request' section")

    request = _parse_message(data["request"])
    response = data.get("response")
    if isinstance(response, dict):
        response = CapturedResponse(**_parse_message(response))

    return CapturedExchange(request=CapturedRequest(**request), response=response)


def _parse_message(message: dict) -> dict:
    headers = {str(k).lower(): str(v) for k, v in (message.get("headers") or {}).items()}

    if "body_base64" in message:
        raw = base64.b64decode(message["body_base64"])
    else:
        body = message.get("body")
        if body is None:
            raw = b""
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        else:
            raw = json.dumps(body).encode("utf-8")

    parsed = {k: v for k, v in message.items() if k not in ("headers", "body", "body_base64")}
    parsed["headers"] = headers
    parsed["body"] = CapturedBody(raw=raw, content_encoding=headers.get("content-encoding"))
    return parsed
