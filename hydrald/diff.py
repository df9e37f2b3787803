"""
Context diffing: decides what ``@context`` an object must carry.

Given the frame of the enclosing object (if any) and the frame of the object
being emitted, :func:`diff_context` returns the block to write, or None when
everything the object declares is already in force.

Rules:
- A block is written iff there is no parent frame or the parent frame does
  not contain the current one.
- ``@vocab`` is written iff there is no parent frame, the parent has no
  vocab, or the current vocab is set and differs from the parent's.
- All terms of the current frame are written.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hydrald.context import LdContext, TermValue


@dataclass(frozen=True)
class ContextBlock:
    """
    The ``@context`` object to emit for one node.

    Attributes:
        write_vocab: Whether ``@vocab`` is part of the block.
        vocab: The vocab value to write (may be None, written as null).
        terms: Term aliases to write, in order.
    """

    write_vocab: bool
    vocab: str | None
    terms: dict[str, TermValue] = field(default_factory=dict)


def must_write_context(parent: LdContext | None, current: LdContext) -> bool:
    """True when *current* declares something not visible from *parent*."""
    return parent is None or not parent.contains(current)


def must_write_vocab(parent: LdContext | None, current: LdContext) -> bool:
    """True when ``@vocab`` cannot be inherited from *parent*."""
    if parent is None or parent.vocab is None:
        return True
    return current.vocab is not None and current.vocab != parent.vocab


def diff_context(parent: LdContext | None, current: LdContext) -> ContextBlock | None:
    """
    Compute the ``@context`` block for *current* under *parent*.

    Returns:
        The block to write, or None if no ``@context`` is needed.
    """
    if not must_write_context(parent, current):
        return None
    return ContextBlock(
        write_vocab=must_write_vocab(parent, current),
        vocab=current.vocab,
        terms=dict(current.terms),
    )
