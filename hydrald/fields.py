"""
Field discovery and field writing.

The field writer emits the declared properties of an object into an object
that is already open on the generator. Nested values are handed back to the
serialization context, which re-enters the object emitter for nested nodes.

Properties are:
- dataclass fields, in declaration order, or
- for other objects, ``vars(obj)`` in insertion order.

Names starting with an underscore and fields declared with
``ld_field(ignore=True)`` are skipped.
"""

from __future__ import annotations

import dataclasses
import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, Protocol

from hydrald.annotations import FieldInfo

if TYPE_CHECKING:
    from hydrald.mapper import SerializationContext
    from hydrald.writer import JsonGenerator

_NO_INFO = FieldInfo()


@dataclass(frozen=True)
class BeanProperty:
    """One serializable property of an object."""

    name: str
    value: Any
    info: FieldInfo = _NO_INFO


class FieldWriter(Protocol):
    """Protocol for writing the declared fields of an object."""

    def write_fields(
        self, bean: Any, gen: JsonGenerator, ctx: SerializationContext
    ) -> None: ...


class ProxyUnwrapper(Protocol):
    """Protocol for replacing proxy objects with the objects they stand for."""

    def unwrap_proxy(self, obj: Any) -> Any: ...


def is_bean(value: Any) -> bool:
    """True for objects written as JSON-LD nodes (dataclasses, plain objects)."""
    # Callables and modules carry a __dict__ but hold no data
    if isinstance(value, type) or inspect.isroutine(value) or inspect.ismodule(value):
        return False
    return dataclasses.is_dataclass(value) or hasattr(value, "__dict__")


def property_names(bean: Any) -> list[str]:
    """Names of the properties declared by *bean*, in declaration order."""
    if dataclasses.is_dataclass(bean):
        return [f.name for f in dataclasses.fields(bean)]
    return list(vars(bean))


def bean_properties(bean: Any, infos: dict[str, FieldInfo] | None = None) -> Iterator[BeanProperty]:
    """
    Yield the serializable properties of *bean*.

    Args:
        bean: A dataclass instance or plain object.
        infos: Per-field metadata keyed by field name (mixin-aware).
    """
    infos = infos or {}
    for name in property_names(bean):
        if name.startswith("_"):
            continue
        info = infos.get(name, _NO_INFO)
        if info.ignore:
            continue
        yield BeanProperty(name=name, value=getattr(bean, name), info=info)


class BeanFieldWriter:
    """
    Default field writer.

    Args:
        include_none: Write ``None`` values as ``null`` instead of skipping.
    """

    def __init__(self, include_none: bool = True) -> None:
        self._include_none = include_none

    def write_fields(
        self, bean: Any, gen: JsonGenerator, ctx: SerializationContext
    ) -> None:
        for prop in bean_properties(bean, ctx.resolver.field_infos(bean)):
            if prop.value is None and not self._include_none:
                continue
            if prop.info.unwrapped and is_bean(prop.value):
                ctx.serialize_bean(prop.value, gen, unwrapping=True)
                continue
            gen.write_field_name(prop.name)
            ctx.serialize_value(prop.value, gen)
