import asyncio
import base64
import gzip
import zlib
from pathlib import Path

import pytest

from openrpc_inspector.exchange.http import (
    CapturedBody,
    CapturedResponse,
    UnsupportedEncodingError,
    load_exchange,
)

FIXTURES = Path(__file__).parent / "fixtures"

PAYLOAD = b'{"jsonrpc": "2.0", "method": "ping"}'


def _decode(body: CapturedBody) -> bytes:
    return asyncio.run(body.decoded())


class TestCapturedBody:
    def test_identity(self):
        assert _decode(CapturedBody(raw=PAYLOAD)) == PAYLOAD
        assert _decode(CapturedBody(raw=PAYLOAD, content_encoding="identity")) == PAYLOAD

    def test_gzip(self):
        assert _decode(CapturedBody(raw=gzip.compress(PAYLOAD), content_encoding="GZIP")) == PAYLOAD

    def test_zlib_deflate(self):
        assert _decode(CapturedBody(raw=zlib.compress(PAYLOAD), content_encoding="deflate")) == PAYLOAD

    def test_raw_deflate(self):
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(PAYLOAD) + compressor.flush()
        assert _decode(CapturedBody(raw=raw, content_encoding="deflate")) == PAYLOAD

    def test_empty_body_skips_decoding(self):
        assert _decode(CapturedBody(content_encoding="br")) == b""

    def test_unsupported_encoding(self):
        with pytest.raises(UnsupportedEncodingError, match="'br'"):
            _decode(CapturedBody(raw=b"\x00", content_encoding="br"))


class TestLoadExchange:
    def test_load_json_capture(self):
        exchange = load_exchange(FIXTURES / "get-balance.json")
        assert exchange.request.url == "https://mainnet.ledger.example.com/rpc"
        assert exchange.request.headers["content-type"] == "application/json"
        assert b'"getBalance"' in exchange.request.body.raw
        assert isinstance(exchange.response, CapturedResponse)
        assert exchange.response.status_code == 200

    def test_load_aborted_yaml_capture(self):
        exchange = load_exchange(FIXTURES / "aborted-unknown.yaml")
        assert exchange.response == "aborted"
        assert exchange.request.body.raw.startswith(b'{"jsonrpc"')

    def test_base64_body_with_encoding(self, tmp_path):
        f = tmp_path / "gzipped.yaml"
        f.write_text(
            "request:\n"
            "  headers:\n"
            "    Content-Encoding: gzip\n"
            f"  body_base64: {base64.b64encode(gzip.compress(PAYLOAD)).decode()}\n"
        )
        exchange = load_exchange(f)
        assert exchange.response is None
        assert exchange.request.body.content_encoding == "gzip"
        assert _decode(exchange.request.body) == PAYLOAD

    def test_missing_request(self, tmp_path):
        f = tmp_path / "empty.yaml"
        f.write_text("response: aborted\n")
        with pytest.raises(ValueError, match="no 'request' section"):
            load_exchange(f)
