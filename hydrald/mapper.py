"""
LdMapper: top-level facade for JSON-LD serialization.

Each call to :meth:`LdMapper.dump` or :meth:`LdMapper.dumps` is one
serialization run with its own :class:`SerializationContext`. The context
carries the run's attribute map (which holds the context stack), so a mapper
can be shared between threads as long as each run stays on one thread.

Example:
    mapper = LdMapper()
    mapper.add_mixin(Person, PersonMixin)
    text = mapper.dumps(Person(name="Ada"))
"""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any, TextIO

from hydrald.config import SerializerConfig
from hydrald.errors import SerializationError
from hydrald.fields import BeanFieldWriter, FieldWriter, ProxyUnwrapper, is_bean
from hydrald.mixins import MixinRegistry
from hydrald.resolver import MetadataResolver
from hydrald.serializer import HydraSerializer
from hydrald.writer import JsonGenerator

logger = logging.getLogger(__name__)


class SerializationContext:
    """
    State of one serialization run.

    Holds the run's attribute map and dispatches values to the right writer:
    scalars and containers are written directly, objects go through the
    :class:`HydraSerializer`.
    """

    def __init__(self, serializer: HydraSerializer) -> None:
        self._serializer = serializer
        self._attributes: dict[str, Any] = {}
        self._active: set[int] = set()

    @property
    def resolver(self) -> MetadataResolver:
        return self._serializer.resolver

    def get_attribute(self, key: str) -> Any:
        return self._attributes.get(key)

    def set_attribute(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def serialize_bean(self, bean: Any, gen: JsonGenerator, unwrapping: bool = False) -> None:
        """
        Emit *bean* as a JSON-LD node, inlined into the open object if *unwrapping*.

        Raises:
            SerializationError: If *bean* is already being emitted (a cycle).
        """
        key = id(bean)
        if key in self._active:
            raise SerializationError(
                f"Cycle detected: {type(bean).__name__} refers back to itself"
            )
        serializer = self._serializer
        if unwrapping:
            serializer = serializer.unwrapping_serializer()
        self._active.add(key)
        try:
            serializer.serialize(bean, gen, self)
        finally:
            self._active.discard(key)

    def serialize_value(self, value: Any, gen: JsonGenerator) -> None:
        """
        Write any supported value.

        Raises:
            SerializationError: If the value's type is not supported.
        """
        if value is None:
            gen.write_null()
        elif isinstance(value, Enum):
            gen.write_string(value.name)
        elif isinstance(value, bool):
            gen.write_boolean(value)
        elif isinstance(value, (int, float)):
            gen.write_number(value)
        elif isinstance(value, str):
            gen.write_string(value)
        elif isinstance(value, (datetime, date, time)):
            gen.write_string(value.isoformat())
        elif isinstance(value, Mapping):
            gen.write_start_object()
            for key, item in value.items():
                gen.write_field_name(str(key))
                self.serialize_value(item, gen)
            gen.write_end_object()
        elif isinstance(value, (list, tuple)):
            self._write_array(value, gen)
        elif isinstance(value, (set, frozenset)):
            try:
                items = sorted(value)
            except TypeError as e:
                raise SerializationError(
                    f"Cannot serialize set with unorderable items: {e}"
                ) from e
            self._write_array(items, gen)
        elif is_bean(value):
            self.serialize_bean(value, gen)
        else:
            raise SerializationError(f"Cannot serialize type: {type(value).__name__}")

    def _write_array(self, items: Any, gen: JsonGenerator) -> None:
        gen.write_start_array()
        for item in items:
            self.serialize_value(item, gen)
        gen.write_end_array()


class LdMapper:
    """
    Serializes object graphs to JSON-LD.

    Args:
        config: Serializer settings. Defaults to ``SerializerConfig()``.
        mixins: Registry of overlay metadata. A new one is created if omitted.
        proxy_unwrapper: Optional hook replacing proxies by their targets.
        field_writer: Custom field writer. Defaults to ``BeanFieldWriter``.
    """

    def __init__(
        self,
        config: SerializerConfig | None = None,
        mixins: MixinRegistry | None = None,
        proxy_unwrapper: ProxyUnwrapper | None = None,
        field_writer: FieldWriter | None = None,
    ) -> None:
        self.config = config or SerializerConfig()
        self.mixins = mixins if mixins is not None else MixinRegistry()
        self.resolver = MetadataResolver(self.mixins, default_vocab=self.config.default_vocab)
        self.serializer = HydraSerializer(
            self.resolver,
            field_writer or BeanFieldWriter(include_none=self.config.include_none),
            proxy_unwrapper=proxy_unwrapper,
        )

    def add_mixin(self, target: type, mixin: type) -> LdMapper:
        """Register *mixin* as overlay metadata for *target*. Returns self."""
        self.mixins.add_mixin(target, mixin)
        return self

    def new_context(self) -> SerializationContext:
        """Create the context for a new serialization run."""
        return SerializationContext(self.serializer)

    def dump(self, obj: Any, fp: TextIO) -> None:
        """
        Serialize *obj* to the text stream *fp*.

        Output already written is not rolled back if serialization fails.
        """
        logger.debug(f"Serializing {type(obj).__name__}")
        gen = JsonGenerator(
            fp, indent=self.config.indent, ensure_ascii=self.config.ensure_ascii
        )
        self.new_context().serialize_value(obj, gen)
        gen.flush()

    def dumps(self, obj: Any) -> str:
        """Serialize *obj* to a JSON-LD string."""
        buffer = io.StringIO()
        self.dump(obj, buffer)
        return buffer.getvalue()

    def to_dict(self, obj: Any) -> Any:
        """Serialize *obj* and parse the result back into Python data."""
        return json.loads(self.dumps(obj))
