"""
JsonGenerator: a small streaming JSON writer.

Tokens are written to a text stream as they are produced; nothing is
buffered beyond what the stream itself buffers. The generator tracks the
open objects/arrays so separators are inserted automatically and misuse is
reported as ``WriterError``.

Output is compact by default (``{"a":1,"b":[1,2]}``). With ``indent`` set,
each field and array item goes on its own line.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, TextIO

from hydrald.context import TermDefinition
from hydrald.errors import WriterError

_OBJECT = "object"
_ARRAY = "array"


class _Scope:
    __slots__ = ("kind", "count", "pending_name")

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.count = 0
        self.pending_name = False


class JsonGenerator:
    """
    Streaming JSON writer.

    Args:
        stream: Text stream to write to.
        indent: Spaces per nesting level; None or 0 for compact output.
        ensure_ascii: Escape non-ASCII characters in strings.
    """

    def __init__(
        self,
        stream: TextIO,
        indent: int | None = None,
        ensure_ascii: bool = False,
    ) -> None:
        self._stream = stream
        self._indent = indent or 0
        self._ensure_ascii = ensure_ascii
        self._colon = ": " if self._indent else ":"
        self._scopes: list[_Scope] = []
        self._root_written = False

    @property
    def depth(self) -> int:
        """Number of currently open objects and arrays."""
        return len(self._scopes)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def write_start_object(self) -> None:
        self._begin_value()
        self._stream.write("{")
        self._scopes.append(_Scope(_OBJECT))

    def write_end_object(self) -> None:
        self._close(_OBJECT, "}")

    def write_start_array(self) -> None:
        self._begin_value()
        self._stream.write("[")
        self._scopes.append(_Scope(_ARRAY))

    def write_end_array(self) -> None:
        self._close(_ARRAY, "]")

    def write_field_name(self, name: str) -> None:
        """
        Write a field name inside the current object.

        Raises:
            WriterError: If no object is open or a previous field has no value.
        """
        scope = self._scopes[-1] if self._scopes else None
        if scope is None or scope.kind != _OBJECT:
            raise WriterError(f"Field {name!r} written outside of an object")
        if scope.pending_name:
            raise WriterError(f"Field {name!r} follows a field name without a value")
        if scope.count:
            self._stream.write(",")
        self._newline(len(self._scopes))
        self._stream.write(self._encode(name))
        self._stream.write(self._colon)
        scope.count += 1
        scope.pending_name = True

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def write_string(self, value: str) -> None:
        self._write_scalar(self._encode(value))

    def write_number(self, value: int | float) -> None:
        if isinstance(value, bool):
            raise WriterError("Booleans must be written with write_boolean")
        try:
            text = json.dumps(value, allow_nan=False)
        except ValueError as e:
            raise WriterError(f"Cannot write non-finite number {value!r}") from e
        self._write_scalar(text)

    def write_boolean(self, value: bool) -> None:
        self._write_scalar("true" if value else "false")

    def write_null(self) -> None:
        self._write_scalar("null")

    def write_value(self, value: Any) -> None:
        """
        Write plain JSON data: mappings, lists, tuples, scalars and term
        definitions.

        Raises:
            WriterError: If the value is not plain JSON data.
        """
        if value is None:
            self.write_null()
        elif isinstance(value, bool):
            self.write_boolean(value)
        elif isinstance(value, (int, float)):
            self.write_number(value)
        elif isinstance(value, str):
            self.write_string(value)
        elif isinstance(value, TermDefinition):
            self.write_value(value.to_json())
        elif isinstance(value, Mapping):
            self.write_start_object()
            for key, item in value.items():
                self.write_field_name(str(key))
                self.write_value(item)
            self.write_end_object()
        elif isinstance(value, (list, tuple)):
            self.write_start_array()
            for item in value:
                self.write_value(item)
            self.write_end_array()
        else:
            raise WriterError(f"Cannot write value of type {type(value).__name__}")

    # ------------------------------------------------------------------
    # Field shortcuts
    # ------------------------------------------------------------------

    def write_object_field_start(self, name: str) -> None:
        """Write a field name followed by the start of an object."""
        self.write_field_name(name)
        self.write_start_object()

    def write_string_field(self, name: str, value: str | None) -> None:
        self.write_field_name(name)
        if value is None:
            self.write_null()
        else:
            self.write_string(value)

    def write_object_field(self, name: str, value: Any) -> None:
        """Write a field whose value is plain JSON data."""
        self.write_field_name(name)
        self.write_value(value)

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _encode(self, text: str) -> str:
        return json.dumps(text, ensure_ascii=self._ensure_ascii)

    def _write_scalar(self, text: str) -> None:
        self._begin_value()
        self._stream.write(text)
        self._end_value()

    def _begin_value(self) -> None:
        if not self._scopes:
            if self._root_written:
                raise WriterError("A root value has already been written")
            return
        scope = self._scopes[-1]
        if scope.kind == _OBJECT:
            if not scope.pending_name:
                raise WriterError("Value written inside an object without a field name")
            return
        if scope.count:
            self._stream.write(",")
        self._newline(len(self._scopes))
        scope.count += 1

    def _end_value(self) -> None:
        if not self._scopes:
            self._root_written = True
        elif self._scopes[-1].kind == _OBJECT:
            self._scopes[-1].pending_name = False

    def _close(self, kind: str, token: str) -> None:
        if not self._scopes or self._scopes[-1].kind != kind:
            found = self._scopes[-1].kind if self._scopes else "nothing"
            raise WriterError(f"Cannot close {kind}: {found} is open")
        if self._scopes[-1].pending_name:
            raise WriterError("Object closed after a field name without a value")
        scope = self._scopes.pop()
        if scope.count:
            self._newline(len(self._scopes))
        self._stream.write(token)
        self._end_value()

    def _newline(self, level: int) -> None:
        if self._indent:
            self._stream.write("\n" + " " * (self._indent * level))
