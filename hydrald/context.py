"""
LdContext frames and term definitions.

A frame describes the vocabulary and term aliases in force for exactly one
object while it is being emitted. Frames are chained to the frame of the
enclosing object through a weak ``parent`` reference. The chain is a lookup
relation only; the context stack owns the frames.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass
from typing import Any, Mapping, Union

from hydrald.keywords import AT_CONTAINER, AT_ID, AT_LANGUAGE, AT_TYPE


@dataclass(frozen=True)
class TermDefinition:
    """
    Expanded term definition, written as a nested object in ``@context``.

    Attributes:
        id: IRI (or compact IRI) the term expands to.
        type: Optional type coercion, e.g. ``"@id"`` or ``"xsd:dateTime"``.
        container: Optional container hint, e.g. ``"@set"`` or ``"@list"``.
        language: Optional default language for string values.
    """

    id: str
    type: str | None = None
    container: str | None = None
    language: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TermDefinition:
        """
        Build a definition from a JSON-LD style mapping.

        Raises:
            ValueError: If ``@id`` is missing or an unsupported key is present.
        """
        allowed = {AT_ID, AT_TYPE, AT_CONTAINER, AT_LANGUAGE}
        unknown = set(data) - allowed
        if unknown:
            raise ValueError(
                f"Unsupported keys in term definition: {', '.join(sorted(unknown))}"
            )
        if not data.get(AT_ID):
            raise ValueError("Term definition requires a non-empty '@id'")
        return cls(
            id=data[AT_ID],
            type=data.get(AT_TYPE),
            container=data.get(AT_CONTAINER),
            language=data.get(AT_LANGUAGE),
        )

    def to_json(self) -> dict[str, str]:
        """Return the definition as a JSON object, omitting absent hints."""
        result = {AT_ID: self.id}
        if self.type is not None:
            result[AT_TYPE] = self.type
        if self.container is not None:
            result[AT_CONTAINER] = self.container
        if self.language is not None:
            result[AT_LANGUAGE] = self.language
        return result


# A term is either a plain IRI or an expanded definition
TermValue = Union[str, TermDefinition]


def as_term_value(value: str | TermDefinition | Mapping[str, Any]) -> TermValue:
    """
    Normalize a user-supplied term value.

    Strings and ``TermDefinition`` instances pass through; mappings are
    converted with :meth:`TermDefinition.from_mapping`.
    """
    if isinstance(value, (str, TermDefinition)):
        return value
    if isinstance(value, Mapping):
        return TermDefinition.from_mapping(value)
    raise TypeError(
        f"Term value must be a string or mapping, got {type(value).__name__}"
    )


class LdContext:
    """
    One frame of the context stack.

    Attributes:
        vocab: The ``@vocab`` IRI in force for the object, or None.
        terms: Term aliases contributed by the object, in a stable order.
    """

    __slots__ = ("vocab", "terms", "_parent", "__weakref__")

    def __init__(
        self,
        parent: LdContext | None,
        vocab: str | None,
        terms: Mapping[str, TermValue] | None = None,
    ) -> None:
        self.vocab = vocab
        self.terms: dict[str, TermValue] = dict(terms or {})
        self._parent = weakref.ref(parent) if parent is not None else None

    @property
    def parent(self) -> LdContext | None:
        """The frame of the enclosing object, if it is still alive."""
        if self._parent is None:
            return None
        return self._parent()

    def contains(self, other: LdContext) -> bool:
        """
        Check whether *other* adds nothing to this frame.

        True when both frames share the same vocab (both absent counts as
        equal) and every term of *other* is defined here with an equal value.
        """
        if other.vocab != self.vocab:
            return False
        for name, value in other.terms.items():
            if name not in self.terms or self.terms[name] != value:
                return False
        return True

    def __repr__(self) -> str:
        return f"LdContext(vocab={self.vocab!r}, terms={self.terms!r})"
