"""
Class, package and field annotations for JSON-LD metadata.

Annotations are attached with decorators and looked up along the MRO, so a
subclass inherits the annotations of its bases:

    @vocab("http://example.org/")
    @expose("ex:Person")
    @term("homepage", {"@id": "http://schema.org/url", "@type": "@id"})
    @dataclass
    class Person:
        name: str
        email: str = ld_field(expose="http://xmlns.com/foaf/0.1/mbox")

A vocabulary for every class of a package or module is declared with a
module attribute ``__ld_vocab__`` in the module or any enclosing package.
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass
from typing import Any, Callable, Mapping, TypeVar

from hydrald.context import TermDefinition, TermValue, as_term_value

T = TypeVar("T", bound=type)

ANNOTATIONS_ATTR = "__ld_annotations__"
PACKAGE_VOCAB_ATTR = "__ld_vocab__"

# Key of hydrald settings in dataclass field metadata
FIELD_METADATA_KEY = "hydrald"


@dataclass(frozen=True)
class Expose:
    """Exposes a class under a different ``@type`` name."""

    value: str


@dataclass(frozen=True)
class Vocab:
    """Declares the ``@vocab`` of a class."""

    value: str


@dataclass(frozen=True)
class Term:
    """Declares a term alias: ``define`` expands to ``as_``."""

    define: str
    as_: TermValue


@dataclass(frozen=True)
class Terms:
    """A group of term aliases declared on one class."""

    value: tuple[Term, ...]


@dataclass(frozen=True)
class FieldInfo:
    """
    Per-field serialization metadata.

    Attributes:
        expose: IRI, compact IRI or vocab term the field maps to.
        type: Type coercion for the field's term, e.g. ``"@id"``.
        unwrapped: Inline the nested object's fields into the parent.
        ignore: Leave the field out of the output.
    """

    expose: str | None = None
    type: str | None = None
    unwrapped: bool = False
    ignore: bool = False


def _annotate(cls: type, annotation: Any) -> None:
    # Stored in the class's own __dict__ so bases are not mutated
    own = cls.__dict__.get(ANNOTATIONS_ATTR)
    if own is None:
        own = {}
        setattr(cls, ANNOTATIONS_ATTR, own)
    own[type(annotation)] = annotation


def expose(value: str) -> Callable[[T], T]:
    """Class decorator: write *value* as the ``@type`` of instances."""

    def decorator(cls: T) -> T:
        _annotate(cls, Expose(value))
        return cls

    return decorator


def vocab(value: str) -> Callable[[T], T]:
    """Class decorator: declare the ``@vocab`` for instances."""

    def decorator(cls: T) -> T:
        _annotate(cls, Vocab(value))
        return cls

    return decorator


def term(define: str, as_: str | Mapping[str, Any] | TermDefinition) -> Callable[[T], T]:
    """
    Class decorator: declare a term alias. May be stacked.

    Args:
        define: The alias used in the output.
        as_: An IRI string, or a mapping with ``@id`` and optional
            ``@type``/``@container``/``@language``.
    """
    return terms({define: as_})


def terms(definitions: Mapping[str, Any]) -> Callable[[T], T]:
    """Class decorator: declare several term aliases at once."""
    new_terms = tuple(Term(name, as_term_value(value)) for name, value in definitions.items())

    def decorator(cls: T) -> T:
        existing = cls.__dict__.get(ANNOTATIONS_ATTR, {}).get(Terms)
        combined = new_terms
        if existing is not None:
            # Decorators apply bottom-up; keep source order
            combined = new_terms + existing.value
        _annotate(cls, Terms(combined))
        return cls

    return decorator


def find_annotation(cls: type | None, kind: type[Any]) -> Any | None:
    """
    Find an annotation of *kind* on *cls* or its bases.

    Args:
        cls: The class to search, may be None.
        kind: The annotation type, e.g. ``Expose``.

    Returns:
        The nearest annotation along the MRO, or None.
    """
    if cls is None:
        return None
    for klass in cls.__mro__:
        found = klass.__dict__.get(ANNOTATIONS_ATTR, {}).get(kind)
        if found is not None:
            return found
    return None


def find_all_annotations(cls: type | None, kind: type[Any]) -> list[Any]:
    """Return every annotation of *kind* along the MRO, base classes first."""
    if cls is None:
        return []
    found = []
    for klass in reversed(cls.__mro__):
        annotation = klass.__dict__.get(ANNOTATIONS_ATTR, {}).get(kind)
        if annotation is not None:
            found.append(annotation)
    return found


def find_package_vocab(cls: type | None) -> str | None:
    """
    Look up ``__ld_vocab__`` on the module defining *cls*, then its packages.

    The nearest non-empty value wins.
    """
    if cls is None:
        return None
    module_name = cls.__module__
    while module_name:
        module = sys.modules.get(module_name)
        value = getattr(module, PACKAGE_VOCAB_ATTR, None) if module else None
        if value:
            return value
        module_name = module_name.rpartition(".")[0]
    return None


def ld_field(
    *,
    expose: str | None = None,
    type: str | None = None,
    unwrapped: bool = False,
    ignore: bool = False,
    **kwargs: Any,
) -> Any:
    """
    Declare a dataclass field with JSON-LD metadata.

    Remaining keyword arguments are passed to :func:`dataclasses.field`.

    Args:
        expose: IRI or term the field is exposed as.
        type: ``@type`` coercion for the field's values (e.g. ``"@id"``).
        unwrapped: Inline a nested object's fields into the enclosing node.
            The inlined object still writes its own ``@type`` (and a
            ``@context`` when its vocabulary or terms differ), so the
            enclosing object ends up with repeated keys. JSON parsers keep
            the last one, which replaces the enclosing node's ``@type`` and
            ``@context``. Only unwrap objects whose type and vocabulary may
            stand for the parent's.
        ignore: Leave the field out of the output.

    Example:
        @dataclass
        class Person:
            homepage: str = ld_field(expose="http://schema.org/url", type="@id", default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[FIELD_METADATA_KEY] = FieldInfo(
        expose=expose, type=type, unwrapped=unwrapped, ignore=ignore
    )
    return dataclasses.field(metadata=metadata, **kwargs)


def field_infos(cls: type | None) -> dict[str, FieldInfo]:
    """Return the ``FieldInfo`` of each annotated dataclass field of *cls*."""
    if cls is None or not dataclasses.is_dataclass(cls):
        return {}
    return {
        f.name: f.metadata[FIELD_METADATA_KEY]
        for f in dataclasses.fields(cls)
        if FIELD_METADATA_KEY in f.metadata
    }
