"""Extension member payloads flattened into problem details objects.

An extension payload is anything that can expose its members as an ordered
name-to-value mapping and be rebuilt from one. Pydantic models and dataclasses
work out of the box; `NoExtensions` and `DynamicExtensions` cover the
"nothing extra" and "whatever is left over" cases.
"""

from __future__ import annotations

from collections.abc import Iterator
from collections.abc import Mapping
import copy
import dataclasses
from typing import Any
from typing import Protocol
from typing import TypeVar
from typing import runtime_checkable

from pydantic import BaseModel
from pydantic import TypeAdapter

ExtT = TypeVar("ExtT")


@runtime_checkable
class ExtensionFields(Protocol):
    """Payload that knows how to flatten itself into named members."""

    def to_fields(self) -> dict[str, Any]: ...

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> ExtensionFields: ...


@dataclasses.dataclass(frozen=True)
class NoExtensions:
    """Zero-field payload used when a problem carries no extension members."""

    def to_fields(self) -> dict[str, Any]:
        return {}

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> NoExtensions:
        return cls()


class DynamicExtensions(Mapping[str, Any]):
    """Immutable ordered key/value payload collecting arbitrary members."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None, /, **members: Any) -> None:
        merged: dict[str, Any] = {}
        for source in (fields or {}, members):
            for name, value in source.items():
                if not isinstance(name, str):
                    raise TypeError(f"Extension member names must be strings, got {name!r}")
                merged[name] = copy.deepcopy(value)
        self._fields = merged

    def __getitem__(self, name: str) -> Any:
        return copy.deepcopy(self._fields[name])

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"DynamicExtensions({self._fields!r})"

    def to_fields(self) -> dict[str, Any]:
        return copy.deepcopy(self._fields)

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> DynamicExtensions:
        return cls(fields)


def coerce_extensions(payload: Any) -> Any:
    """Return a private copy of a payload so problem values never share mutable state.

    Plain mappings become `DynamicExtensions`.
    """
    if isinstance(payload, DynamicExtensions):
        return payload
    if isinstance(payload, Mapping):
        return DynamicExtensions(payload)
    if isinstance(payload, BaseModel):
        return payload.model_copy(deep=True)
    return copy.deepcopy(payload)


def extension_fields(payload: Any) -> dict[str, Any]:
    """Return the ordered members an extension payload contributes."""
    if isinstance(payload, ExtensionFields):
        return payload.to_fields()
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return TypeAdapter(type(payload)).dump_python(payload, mode="json", by_alias=True)
    raise TypeError(f"Unsupported extension payload type `{type(payload).__name__}`")


def load_extensions(ext_type: type[ExtT], fields: Mapping[str, Any]) -> ExtT:
    """Rebuild an extension payload of `ext_type` from residual members.

    Raises whatever the payload's own validation raises, typically a
    pydantic `ValidationError`.
    """
    if isinstance(ext_type, type) and issubclass(ext_type, BaseModel):
        return ext_type.model_validate(dict(fields))
    if callable(getattr(ext_type, "from_fields", None)):
        return ext_type.from_fields(fields)  # type: ignore[attr-defined]
    if ext_type is dict or ext_type is Mapping:
        return DynamicExtensions(fields)  # type: ignore[return-value]
    if dataclasses.is_dataclass(ext_type):
        return TypeAdapter(ext_type).validate_python(dict(fields))
    raise TypeError(f"Unsupported extension payload type `{getattr(ext_type, '__name__', ext_type)}`")
