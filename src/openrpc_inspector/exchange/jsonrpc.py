"""JSON-RPC exchange inspection against an OpenRPC API.

``parse_rpc_api_exchange`` is the entry point: it always returns a usable
``JsonRpcApiExchange``, degrading to an "unrecognized request" view when the
request cannot be matched to a declared method.
"""

import logging
from typing import Literal

from openrpc_inspector.exchange.http import HttpExchange
from openrpc_inspector.exchange.matcher import ExchangeMatchError, MatchedOperation, match_method
from openrpc_inspector.exchange.models import ApiOperation, ApiRequest, ApiResponse, ApiService
from openrpc_inspector.exchange.projection import (
    project_operation,
    project_request,
    project_response,
    project_service,
)
from openrpc_inspector.markdown import MarkdownRenderer, from_markdown
from openrpc_inspector.parser.base import OpenRpcMetadata

logger = logging.getLogger(__name__)

UNRECOGNIZED_OPERATION_NAME = "Unrecognized request to JSON-RPC API"


async def parse_rpc_api_exchange(
    api: OpenRpcMetadata,
    exchange: HttpExchange,
    render: MarkdownRenderer = from_markdown,
) -> "JsonRpcApiExchange":
    """Match an exchange against the API and project the result.

    Only failures to decode the request body propagate; anything wrong with
    the body itself produces an unmatched exchange.
    """
    try:
        rpc_method = await match_method(api, exchange)
    except ExchangeMatchError as e:
        logger.info("Unmatched request to %r: %s", api.spec.info.title, e)
        return JsonRpcApiExchange(api, e, render)

    logger.debug("Matched JSON-RPC method %r", rpc_method.method_spec.name)
    return JsonRpcApiExchange(api, rpc_method, render)


class JsonRpcApiExchange:
    """The displayable view of one exchange.

    Service, operation and request are fixed at construction. The response
    is attached later, via update_with_response(), once it has arrived.
    """

    def __init__(
        self,
        api: OpenRpcMetadata,
        rpc_method: MatchedOperation | ExchangeMatchError,
        render: MarkdownRenderer = from_markdown,
    ):
        self._rpc_method = rpc_method
        self._render = render

        self._service = project_service(api, render)

        if isinstance(rpc_method, ExchangeMatchError):
            self._operation = ApiOperation(
                name=UNRECOGNIZED_OPERATION_NAME,
                warnings=(str(rpc_method) or repr(rpc_method),),
            )
            self._request = ApiRequest()
        else:
            base_url = api.spec.external_docs.method_base_url if api.spec.external_docs else None
            self._operation = project_operation(rpc_method, base_url, render)
            self._request = project_request(rpc_method, render)

        self._response: ApiResponse | None = None

    @property
    def service(self) -> ApiService:
        return self._service

    @property
    def operation(self) -> ApiOperation:
        return self._operation

    @property
    def request(self) -> ApiRequest:
        return self._request

    @property
    def response(self) -> ApiResponse | None:
        return self._response

    def update_with_response(self, response: object | Literal["aborted"] | None) -> None:
        """Attach the response projection. Call at most once, when the response arrives."""
        if response == "aborted" or response is None or not self.matched_operation():
            return

        self._response = project_response(self._rpc_method, self._render)

    def matched_operation(self) -> bool:
        return isinstance(self._rpc_method, MatchedOperation)

    def as_serializable(self) -> dict:
        return {
            "service": self._service.as_serializable(),
            "operation": self._operation.as_serializable(),
            "request": self._request.as_serializable(),
            "response": self._response.as_serializable() if self._response else None,
        }
