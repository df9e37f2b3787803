"""Tests for LdMapper value dispatch."""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

import pytest

from hydrald.annotations import ld_field
from hydrald.config import SerializerConfig
from hydrald.errors import SerializationError
from hydrald.mapper import LdMapper


class Color(Enum):
    RED = "red"
    GREEN = "green"


@dataclass
class Sample:
    label: str
    count: int = 0
    ratio: float = 0.5
    active: bool = True
    color: Color = Color.RED
    created: date = date(2024, 1, 2)
    tags: frozenset = frozenset({"b", "a"})
    extra: dict | None = None
    _private: str = "hidden"
    secret: str = ld_field(ignore=True, default="s3cret")


class Legacy:
    """Plain class without dataclass machinery."""

    def __init__(self):
        self.title = "Old"
        self.year = 1999
        self._cache = {}

    def describe(self):
        return self.title


@dataclass
class Holder:
    label: str
    payload: Any = None


@dataclass
class Link:
    name: str
    next: Link | None = None


class TestValueDispatch:
    def test_scalars_and_containers(self):
        """Scalars, enums, dates, sets and mappings use their JSON forms."""
        result = LdMapper().to_dict(Sample("s", extra={"k": [1, (2, 3)]}))
        assert result == {
            "@context": {"@vocab": "http://schema.org/"},
            "@type": "Sample",
            "label": "s",
            "count": 0,
            "ratio": 0.5,
            "active": True,
            "color": "RED",
            "created": "2024-01-02",
            "tags": ["a", "b"],
            "extra": {"k": [1, [2, 3]]},
        }

    def test_none_skipped_when_configured(self):
        """include_none=False drops None-valued fields."""
        result = LdMapper(SerializerConfig(include_none=False)).to_dict(Sample("s"))
        assert "extra" not in result

    def test_datetime(self):
        """Datetimes are written in ISO format."""
        mapper = LdMapper()
        assert mapper.dumps(datetime(2024, 1, 2, 3, 4, 5)) == '"2024-01-02T03:04:05"'

    def test_plain_object(self):
        """Plain objects are nodes built from their public instance attributes."""
        result = LdMapper().to_dict(Legacy())
        assert result == {
            "@context": {"@vocab": "http://schema.org/"},
            "@type": "Legacy",
            "title": "Old",
            "year": 1999,
        }

    def test_mapping_is_not_a_node(self):
        """Mappings are written as plain JSON objects."""
        assert LdMapper().to_dict({"a": 1}) == {"a": 1}

    def test_mapping_values_may_be_nodes(self):
        """Objects inside a mapping are still written as nodes."""
        result = LdMapper().to_dict({"item": Legacy()})
        assert result["item"]["@type"] == "Legacy"

    def test_unsupported_type(self):
        """Objects without fields cannot be serialized."""
        with pytest.raises(SerializationError, match="object"):
            LdMapper().dumps([object()])

    @pytest.mark.parametrize(
        "payload",
        [lambda: 1, len, Legacy().describe, Legacy.describe, json],
        ids=["lambda", "builtin", "bound-method", "function", "module"],
    )
    def test_callables_and_modules_are_not_nodes(self, payload):
        """Functions, methods and modules raise instead of becoming nodes."""
        with pytest.raises(SerializationError, match="Cannot serialize type"):
            LdMapper().dumps(Holder("x", payload=payload))

    def test_unorderable_set(self):
        """Sets that cannot be sorted raise."""
        with pytest.raises(SerializationError, match="unorderable"):
            LdMapper().dumps({1, "a"})

    def test_classes_are_not_nodes(self):
        """Classes are not serialized as nodes."""
        with pytest.raises(SerializationError):
            LdMapper().dumps(Legacy)


class TestCycles:
    def test_self_reference_raises(self):
        """An object that refers to itself raises SerializationError."""
        node = Link("loop")
        node.next = node
        with pytest.raises(SerializationError, match="Cycle"):
            LdMapper().dumps(node)

    def test_indirect_cycle_raises(self):
        """A cycle through another object is detected too."""
        a = Link("a")
        a.next = Link("b", next=a)
        with pytest.raises(SerializationError, match="Cycle"):
            LdMapper().dumps(a)

    def test_shared_object_is_not_a_cycle(self):
        """The same object may appear several times outside its own subtree."""
        shared = Link("shared")
        result = LdMapper().to_dict([shared, Holder("h", payload=shared)])
        assert result[0]["name"] == "shared"
        assert result[1]["payload"]["name"] == "shared"

    def test_mapper_reusable_after_cycle(self):
        """A failed run leaves no state behind for the next run."""
        mapper = LdMapper()
        node = Link("loop")
        node.next = node
        with pytest.raises(SerializationError):
            mapper.dumps(node)
        assert mapper.to_dict(Link("ok"))["name"] == "ok"


class TestDump:
    def test_dump_to_stream(self):
        """dump writes to a text stream."""
        buffer = io.StringIO()
        LdMapper().dump(Legacy(), buffer)
        assert buffer.getvalue().startswith('{"@context":')

    def test_indent_from_config(self):
        """The configured indent is used for output."""
        text = LdMapper(SerializerConfig(indent=4)).dumps({"a": 1})
        assert text == '{\n    "a": 1\n}'

    def test_ensure_ascii_from_config(self):
        """ensure_ascii escapes non-ASCII characters."""
        assert LdMapper(SerializerConfig(ensure_ascii=True)).dumps("é") == '"\\u00e9"'
