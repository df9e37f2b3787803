"""
HydraSerializer: emits one object as a JSON-LD node.

For each object the serializer:

1. unwraps proxies (if a proxy unwrapper is configured),
2. opens the object (skipped when unwrapping into an enclosing object),
3. pushes a frame for the object on the run's context stack,
4. writes ``@context`` if the enclosing frame does not already cover it,
5. writes ``@type``,
6. delegates the object's own fields to the field writer, which re-enters
   this serializer for nested objects,
7. closes the object and pops its frame.

The frame is popped on every exit path, so a failed emission leaves the
stack as it found it. Errors from the writer or the metadata lookups are
not caught.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from hydrald.context import LdContext, TermDefinition
from hydrald.diff import ContextBlock, diff_context
from hydrald.errors import ContextStackError
from hydrald.keywords import AT_CONTEXT, AT_TYPE, AT_VOCAB
from hydrald.stack import ContextStack, context_stack

if TYPE_CHECKING:
    from hydrald.fields import FieldWriter, ProxyUnwrapper
    from hydrald.mapper import SerializationContext
    from hydrald.resolver import MetadataResolver
    from hydrald.writer import JsonGenerator

logger = logging.getLogger(__name__)


class HydraSerializer:
    """
    Object emitter with JSON-LD ``@context`` and ``@type`` support.

    Args:
        resolver: Resolves type name, vocab and terms for objects.
        field_writer: Writes an object's own fields.
        proxy_unwrapper: Optional hook replacing proxies by their targets.
        unwrapping: Write into an already open object (no braces).
    """

    def __init__(
        self,
        resolver: MetadataResolver,
        field_writer: FieldWriter,
        proxy_unwrapper: ProxyUnwrapper | None = None,
        unwrapping: bool = False,
    ) -> None:
        self.resolver = resolver
        self.field_writer = field_writer
        self.proxy_unwrapper = proxy_unwrapper
        self._unwrapping = unwrapping

    @property
    def is_unwrapping(self) -> bool:
        return self._unwrapping

    def unwrapping_serializer(self) -> HydraSerializer:
        """Return a serializer sharing this one's collaborators that writes no braces."""
        if self._unwrapping:
            return self
        return HydraSerializer(
            self.resolver,
            self.field_writer,
            proxy_unwrapper=self.proxy_unwrapper,
            unwrapping=True,
        )

    def serialize(self, bean: Any, gen: JsonGenerator, ctx: SerializationContext) -> None:
        """
        Emit *bean* to *gen*.

        Args:
            bean: The object to emit.
            gen: The generator to write to.
            ctx: The current run's serialization context.
        """
        if self.proxy_unwrapper is not None:
            bean = self.proxy_unwrapper.unwrap_proxy(bean)

        if not self._unwrapping:
            gen.write_start_object()

        stack = context_stack(ctx)
        frame = self._push_context(bean, stack)
        try:
            self.serialize_context(frame, gen)
            self.serialize_type(bean, gen)
            self.field_writer.write_fields(bean, gen, ctx)
            if not self._unwrapping:
                gen.write_end_object()
        finally:
            self._pop_context(frame, stack)

    def serialize_context(self, frame: LdContext, gen: JsonGenerator) -> bool:
        """
        Write ``@context`` for *frame* if its parent does not cover it.

        Returns:
            True if a ``@context`` field was written.
        """
        block = diff_context(frame.parent, frame)
        if block is None:
            logger.debug("Context inherited from enclosing node, no @context written")
            return False
        self._write_block(block, gen)
        return True

    def serialize_type(self, bean: Any, gen: JsonGenerator) -> None:
        gen.write_string_field(AT_TYPE, self.resolver.resolve_type(bean))

    def _push_context(self, bean: Any, stack: ContextStack) -> LdContext:
        frame = LdContext(
            stack.peek(),
            self.resolver.resolve_vocab(bean),
            self.resolver.resolve_terms(bean),
        )
        stack.push(frame)
        logger.debug(
            f"Pushed context frame for {type(bean).__name__} (depth {stack.depth})"
        )
        return frame

    def _pop_context(self, frame: LdContext, stack: ContextStack) -> None:
        if not stack:
            raise ContextStackError("Context stack is empty, expected the current frame")
        if stack.peek() is not frame:
            raise ContextStackError("Context stack top does not belong to the current object")
        stack.pop()
        logger.debug(f"Popped context frame (depth {stack.depth})")

    @staticmethod
    def _write_block(block: ContextBlock, gen: JsonGenerator) -> None:
        gen.write_object_field_start(AT_CONTEXT)
        if block.write_vocab:
            gen.write_string_field(AT_VOCAB, block.vocab)
        for name, value in block.terms.items():
            if isinstance(value, TermDefinition):
                gen.write_object_field(name, value.to_json())
            else:
                gen.write_string_field(name, value)
        gen.write_end_object()
