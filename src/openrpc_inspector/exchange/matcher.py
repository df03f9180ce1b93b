"""Matches a captured request body to a method of a loaded OpenRPC API."""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from openrpc_inspector.exchange.http import HttpExchange
from openrpc_inspector.parser.base import Method, OpenRpcMetadata

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"


class ExchangeMatchError(Exception):
    """The exchange is not a recognisable call to the API."""


class EmptyBodyError(ExchangeMatchError):
    pass


class MalformedBodyError(ExchangeMatchError):
    pass


class BadEnvelopeError(ExchangeMatchError):
    pass


class UnknownMethodError(ExchangeMatchError):
    pass


class JsonRpcEnvelope(BaseModel):
    """The validated protocol fields of a JSON-RPC request body."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: str
    method: str
    params: tuple[Any, ...] = ()
    id: Any = None


class MatchedOperation(BaseModel):
    model_config = ConfigDict(frozen=True)

    method_spec: Method
    envelope: JsonRpcEnvelope


async def match_method(api: OpenRpcMetadata, exchange: HttpExchange) -> MatchedOperation:
    """Find the API method a request invokes.

    Raises:
        ExchangeMatchError: if the body is empty, unparseable, not a JSON-RPC
            2.0 request, or names a method the API does not declare.
    """
    body = await exchange.request.body.decoded()
    if not body:
        raise EmptyBodyError("No JSON-RPC request body")

    try:
        parsed = json.loads(body)
    except (ValueError, RecursionError) as e:
        logger.warning("Could not parse JSON-RPC request body: %s", e)
        raise MalformedBodyError("Could not parse JSON-RPC request body") from e

    envelope = parse_envelope(parsed)

    method_spec = api.request_matchers.get(envelope.method)
    if method_spec is None:
        raise UnknownMethodError(f"Unrecognized JSON-RPC method name: {envelope.method}")

    return MatchedOperation(method_spec=method_spec, envelope=envelope)


def parse_envelope(parsed: Any) -> JsonRpcEnvelope:
    """Validate the envelope fields of a parsed body, one field at a time."""
    fields = parsed if isinstance(parsed, dict) else {}

    jsonrpc = fields.get("jsonrpc")
    if jsonrpc != JSONRPC_VERSION:
        raise BadEnvelopeError(f"JSON-RPC request body had bad 'jsonrpc' field: {jsonrpc}")

    method = fields.get("method")
    if not isinstance(method, str):
        raise BadEnvelopeError(f"JSON-RPC request body had bad 'method' field: {method}")

    params = fields.get("params")
    if params is None:
        params = []
    elif not isinstance(params, list):
        raise BadEnvelopeError(f"JSON-RPC request body had bad 'params' field: {json.dumps(params)}")

    return JsonRpcEnvelope(jsonrpc=jsonrpc, method=method, params=tuple(params), id=fields.get("id"))
