"""Data models for parsed OpenRPC documents.

Only the parts of an OpenRPC document that exchange inspection reads are
modelled; unknown keys are kept so extensions (``x-logo``,
``x-method-base-url``) stay reachable.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExternalDocs(BaseModel):
    """An ``externalDocs`` object, including custom ``x-`` extensions."""

    model_config = ConfigDict(extra="allow", frozen=True)

    url: str
    description: str | None = None

    @property
    def method_base_url(self) -> str | None:
        """Base URL for per-method docs links (``x-method-base-url``)."""
        return (self.model_extra or {}).get("x-method-base-url")


class Info(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    title: str
    version: str = ""
    description: str | None = None
    logo: dict | None = Field(default=None, alias="x-logo")

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value):
        # YAML reads `version: 1.0` as a float
        return value if value is None else str(value)

    @property
    def logo_url(self) -> str | None:
        return (self.logo or {}).get("url")


class Server(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    url: str
    name: str | None = None
    variables: dict[str, dict] = {}


class ContentDescriptor(BaseModel):
    """A method parameter or result declaration."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    summary: str | None = None
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    schema_: dict | bool = Field(default={}, alias="schema")

    @property
    def schema_keywords(self) -> dict:
        """The schema as a keyword dict; boolean schemas have no keywords."""
        return self.schema_ if isinstance(self.schema_, dict) else {}


class Method(BaseModel):
    """A single JSON-RPC method declared by the document."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    name: str
    summary: str | None = None
    description: str | None = None
    deprecated: bool = False
    params: list[ContentDescriptor] = []
    result: ContentDescriptor | None = None
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")
    tags: list[dict] = []


class OpenRpcDocument(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    openrpc: str
    info: Info
    servers: list[Server] = []
    methods: list[Method]
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")
    components: dict = {}


class OpenRpcMetadata(BaseModel):
    """A loaded API: the document plus the indexes used to match traffic."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    spec: OpenRpcDocument
    server_matcher: re.Pattern
    request_matchers: dict[str, Method]  # JSON-RPC method name -> method

    def matches_server(self, url: str) -> bool:
        """Whether a request URL (scheme optional) targets one of the API's servers."""
        address = re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", url)
        return self.server_matcher.match(address) is not None
