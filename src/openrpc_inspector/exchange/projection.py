"""Projects OpenRPC method declarations onto a matched exchange.

Each projector is a pure function of its inputs; the display models it
returns are frozen.
"""

from typing import Any, Callable

from openrpc_inspector.exchange.matcher import MatchedOperation
from openrpc_inspector.exchange.models import (
    UNDEFINED,
    ApiOperation,
    ApiParameter,
    ApiRequest,
    ApiResponse,
    ApiService,
)
from openrpc_inspector.markdown import MarkdownRenderer, from_markdown, join_markdown
from openrpc_inspector.parser.base import ContentDescriptor, OpenRpcMetadata

# (applies?, message template) pairs, checked in order for every parameter.
ParameterRule = tuple[Callable[[ContentDescriptor, Any], bool], str]

PARAMETER_WARNING_RULES: tuple[ParameterRule, ...] = (
    (
        lambda param, value: param.deprecated,
        "The '{name}' parameter is deprecated.",
    ),
    (
        lambda param, value: (
            param.required
            and value is UNDEFINED
            and "default" not in param.schema_keywords
        ),
        "The '{name}' parameter is required.",
    ),
)


def project_service(api: OpenRpcMetadata, render: MarkdownRenderer = from_markdown) -> ApiService:
    """Summarise the API itself. Independent of any particular exchange."""
    spec = api.spec
    return ApiService(
        name=spec.info.title,
        logo_url=spec.info.logo_url,
        description=render(spec.info.description),
        docs_url=spec.external_docs.url if spec.external_docs else None,
    )


def project_operation(
    rpc_method: MatchedOperation,
    method_docs_base_url: str | None,
    render: MarkdownRenderer = from_markdown,
) -> ApiOperation:
    method = rpc_method.method_spec

    if method.external_docs:
        docs_url = method.external_docs.url
    elif method_docs_base_url:
        docs_url = method_docs_base_url + method.name.lower()
    else:
        docs_url = None

    warnings = []
    if method.deprecated:
        warnings.append(f"The '{method.name}' method is deprecated.")

    return ApiOperation(
        name=method.name,
        description=render(join_markdown(method.summary, method.description)),
        docs_url=docs_url,
        warnings=tuple(warnings),
    )


def project_parameter(
    param: ContentDescriptor,
    value: Any,
    render: MarkdownRenderer = from_markdown,
) -> ApiParameter:
    """Combine one declared parameter with its positional value (or UNDEFINED)."""
    return ApiParameter(
        name=param.name,
        description=render(join_markdown(param.summary, param.description, param.schema_keywords.get("title"))),
        required=param.required,
        deprecated=param.deprecated,
        value=value,
        default_value=param.schema_keywords.get("default", UNDEFINED),
        warnings=tuple(
            message.format(name=param.name)
            for applies, message in PARAMETER_WARNING_RULES
            if applies(param, value)
        ),
    )


def project_request(rpc_method: MatchedOperation, render: MarkdownRenderer = from_markdown) -> ApiRequest:
    """One parameter per declaration, in declared order, valued by position."""
    values = rpc_method.envelope.params
    return ApiRequest(
        parameters=tuple(
            project_parameter(param, values[i] if i < len(values) else UNDEFINED, render)
            for i, param in enumerate(rpc_method.method_spec.params)
        )
    )


def project_response(rpc_method: MatchedOperation, render: MarkdownRenderer = from_markdown) -> ApiResponse:
    """Describe the declared result. The actual response body is not inspected."""
    result = rpc_method.method_spec.result
    if result is None:
        return ApiResponse()
    return ApiResponse(
        description=render(result.description),
        body_schema=result.schema_,
    )
