"""Display-oriented projections of a JSON-RPC exchange.

All projections are immutable once built; ``as_serializable()`` gives a
JSON-ready dict for output.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class _Undefined:
    """Marks a value that is absent, as opposed to JSON ``null``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNDEFINED: Any = _Undefined()


class _Projection(BaseModel):
    model_config = ConfigDict(frozen=True)

    def as_serializable(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary, omitting absent values."""
        return _drop_undefined(self.model_dump())


class ApiService(_Projection):
    name: str
    logo_url: str | None = None
    description: str | None = None
    docs_url: str | None = None


class ApiOperation(_Projection):
    name: str
    description: str | None = None
    docs_url: str | None = None
    warnings: tuple[str, ...] = ()


class ApiParameter(_Projection):
    name: str
    description: str | None = None
    location: Literal["body"] = "body"  # JSON-RPC has no header/query/path params
    required: bool
    deprecated: bool
    value: Any = UNDEFINED
    default_value: Any = UNDEFINED
    warnings: tuple[str, ...] = ()


class ApiRequest(_Projection):
    parameters: tuple[ApiParameter, ...] = ()


class ApiResponse(_Projection):
    description: str | None = None
    body_schema: dict | bool | None = None


def _drop_undefined(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_undefined(v) for k, v in value.items() if v is not UNDEFINED}
    if isinstance(value, (list, tuple)):
        return [_drop_undefined(v) for v in value]
    return value
