"""OpenRPC document loader.

Parses OpenRPC 1.x documents (JSON or YAML) into OpenRpcMetadata, ready for
matching captured JSON-RPC traffic.
"""

import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import OpenRpcDocument, OpenRpcMetadata

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "localhost"


class OpenRpcDocumentError(Exception):
    """The document could not be read as an OpenRPC API description."""


def load_openrpc(file_path: Path) -> OpenRpcMetadata:
    """Load an OpenRPC file into OpenRpcMetadata."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise OpenRpcDocumentError(f"{file_path} is not valid JSON or YAML: {e}") from e

    return build_metadata(doc)


def build_metadata(doc: dict) -> OpenRpcMetadata:
    """Build the method index and server matcher for a raw OpenRPC document."""
    if not isinstance(doc, dict) or "openrpc" not in doc:
        raise OpenRpcDocumentError("Document has no 'openrpc' version field")

    methods = [_resolve_method(doc, m) for m in doc.get("methods", [])]
    try:
        spec = OpenRpcDocument.model_validate({**doc, "methods": methods})
    except ValidationError as e:
        raise OpenRpcDocumentError(f"Invalid OpenRPC document: {e}") from e

    request_matchers = {}
    for method in spec.methods:
        if method.name in request_matchers:
            logger.warning("Duplicate JSON-RPC method %r in %r, keeping the first", method.name, spec.info.title)
            continue
        request_matchers[method.name] = method

    logger.debug("Loaded %d methods for %r", len(request_matchers), spec.info.title)
    return OpenRpcMetadata(
        spec=spec,
        server_matcher=build_server_matcher([s.url for s in spec.servers]),
        request_matchers=request_matchers,
    )


def build_server_matcher(server_urls: list[str]) -> re.Pattern:
    """Compile a prefix matcher for scheme-less server addresses.

    Server variables (``{network}``) match any text within a path segment.
    """
    alternatives = []
    for url in server_urls or [DEFAULT_SERVER_URL]:
        address = re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", url)
        parts = re.split(r"\{[^}]*\}", address)
        alternatives.append("[^/]*".join(re.escape(p) for p in parts))
    return re.compile("^(?:" + "|".join(alternatives) + ")", re.IGNORECASE)


def _resolve_method(doc: dict, method: dict) -> dict:
    method = _resolve_ref(doc, method)
    resolved = dict(method)
    resolved["params"] = [_resolve_descriptor(doc, p) for p in method.get("params", [])]
    if method.get("result") is not None:
        resolved["result"] = _resolve_descriptor(doc, method["result"])
    return resolved


def _resolve_descriptor(doc: dict, descriptor: dict) -> dict:
    descriptor = _resolve_ref(doc, descriptor)
    if "schema" not in descriptor:
        return descriptor
    return {**descriptor, "schema": _resolve_ref(doc, descriptor["schema"])}


def _resolve_ref(doc: dict, node, seen: tuple[str, ...] = ()):
    """Follow local ``$ref`` pointers until reaching a concrete object."""
    if not isinstance(node, dict) or "$ref" not in node:
        return node

    ref = node["$ref"]
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise OpenRpcDocumentError(f"Only local $ref pointers are supported, got {ref!r}")
    if ref in seen:
        raise OpenRpcDocumentError(f"Circular $ref: {' -> '.join(seen + (ref,))}")

    target = doc
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(target, list) and token.isdigit() and int(token) < len(target):
            target = target[int(token)]
        elif isinstance(target, dict) and token in target:
            target = target[token]
        else:
            raise OpenRpcDocumentError(f"Unresolvable $ref: {ref}")

    return _resolve_ref(doc, target, seen + (ref,))
