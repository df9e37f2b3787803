"""
ContextStack: the per-run stack of LdContext frames.

One stack exists per serialization run. It lives in the run's attribute map
under ``KEY_LD_CONTEXT`` and is created on first access, so independent runs
never share frames.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Iterator, Protocol

from hydrald.context import LdContext
from hydrald.errors import ContextStackError
from hydrald.keywords import KEY_LD_CONTEXT


class AttributeMap(Protocol):
    """Per-run attribute storage provided by the serialization context."""

    def get_attribute(self, key: str) -> Any: ...

    def set_attribute(self, key: str, value: Any) -> None: ...


class ContextStack:
    """LIFO stack of frames, one per object currently being emitted."""

    def __init__(self) -> None:
        self._frames: deque[LdContext] = deque()

    def peek(self) -> LdContext | None:
        """Return the top frame without removing it, or None if empty."""
        return self._frames[-1] if self._frames else None

    def push(self, frame: LdContext) -> None:
        self._frames.append(frame)

    def pop(self) -> LdContext:
        """
        Remove and return the top frame.

        Raises:
            ContextStackError: If the stack is empty.
        """
        if not self._frames:
            raise ContextStackError("Cannot pop from an empty context stack")
        return self._frames.pop()

    @property
    def depth(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    def __iter__(self) -> Iterator[LdContext]:
        """Iterate from the innermost frame outwards."""
        return reversed(self._frames)


def context_stack(attributes: AttributeMap) -> ContextStack:
    """
    Return the context stack stored in *attributes*, creating it if absent.

    Raises:
        ContextStackError: If the key holds something other than a stack.
    """
    stack = attributes.get_attribute(KEY_LD_CONTEXT)
    if stack is None:
        stack = ContextStack()
        attributes.set_attribute(KEY_LD_CONTEXT, stack)
    elif not isinstance(stack, ContextStack):
        raise ContextStackError(
            f"Attribute {KEY_LD_CONTEXT!r} holds {type(stack).__name__}, "
            "expected ContextStack"
        )
    return stack
