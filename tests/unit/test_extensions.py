"""Unit tests for extension payload flattening helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic import Field
import pytest

from problem_details.schemas.extensions import DynamicExtensions
from problem_details.schemas.extensions import NoExtensions
from problem_details.schemas.extensions import extension_fields
from problem_details.schemas.extensions import load_extensions


class _Aliased(BaseModel):
    retry_after: int = Field(alias="retryAfter")


@dataclass
class _Point:
    x: int
    y: int


class _Custom:
    def __init__(self, code: str) -> None:
        self.code = code

    def to_fields(self) -> dict[str, Any]:
        return {"code": self.code}

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> _Custom:
        return cls(str(fields["code"]))


def test_no_extensions_contribute_nothing() -> None:
    assert extension_fields(NoExtensions()) == {}
    assert load_extensions(NoExtensions, {"anything": 1}) == NoExtensions()


def test_pydantic_models_use_aliases() -> None:
    assert extension_fields(_Aliased(retryAfter=30)) == {"retryAfter": 30}
    assert load_extensions(_Aliased, {"retryAfter": "30"}).retry_after == 30


def test_dataclasses_are_supported() -> None:
    assert extension_fields(_Point(1, 2)) == {"x": 1, "y": 2}
    assert load_extensions(_Point, {"x": 1, "y": 2, "z": 3}) == _Point(1, 2)


def test_custom_field_sets_are_supported() -> None:
    assert extension_fields(_Custom("E42")) == {"code": "E42"}
    assert load_extensions(_Custom, {"code": "E42"}).code == "E42"


def test_dynamic_extensions_are_immutable_copies() -> None:
    source = {"accounts": ["/a"]}
    extensions = DynamicExtensions(source, balance=30)

    source["accounts"].append("/b")
    extensions["accounts"].append("/c")

    assert extensions == {"accounts": ["/a"], "balance": 30}
    assert list(extensions) == ["accounts", "balance"]
    assert load_extensions(dict, {"k": "v"}) == DynamicExtensions(k="v")


def test_dynamic_extensions_require_string_names() -> None:
    with pytest.raises(TypeError):
        DynamicExtensions({1: "one"})


def test_unsupported_payloads_are_rejected() -> None:
    with pytest.raises(TypeError):
        extension_fields(42)
    with pytest.raises(TypeError):
        load_extensions(int, {})
