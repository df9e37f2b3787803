"""
MetadataResolver: resolves an object to its ``@type``, ``@vocab`` and terms.

Lookup precedence for every piece of metadata is:

    mixin (overlay) → class (along the MRO) → package → default

The resolver never fails on missing metadata; absent sources yield empty or
None results. Exceptions raised while inspecting user objects propagate
unchanged.
"""

from __future__ import annotations

from typing import Any

from hydrald.annotations import (
    Expose,
    FieldInfo,
    Terms,
    Vocab,
    field_infos,
    find_all_annotations,
    find_annotation,
    find_package_vocab,
)
from hydrald.context import TermDefinition, TermValue
from hydrald.fields import property_names
from hydrald.keywords import DEFAULT_VOCAB
from hydrald.mixins import MixinSource


class MetadataResolver:
    """
    Resolves JSON-LD metadata for objects.

    Args:
        mixins: Source of overlay metadata, may be None.
        default_vocab: Vocabulary used when no annotation provides one.
            Pass None (or "") to disable the default.
    """

    def __init__(
        self,
        mixins: MixinSource | None = None,
        default_vocab: str | None = DEFAULT_VOCAB,
    ) -> None:
        self._mixins = mixins
        self._default_vocab = default_vocab or None

    def mixin_for(self, obj: Any) -> type | None:
        """Return the mixin registered for the class of *obj*, if any."""
        if self._mixins is None:
            return None
        return self._mixins.find_mixin_class_for(type(obj))

    def resolve_type(self, obj: Any) -> str:
        """
        Return the ``@type`` name for *obj*.

        Mixin ``Expose`` wins over class ``Expose``, which wins over the
        class's simple name. Empty values are ignored.
        """
        cls = type(obj)
        for source in (self.mixin_for(obj), cls):
            annotation = find_annotation(source, Expose)
            if annotation is not None and annotation.value:
                return annotation.value
        return cls.__name__

    def resolve_vocab(self, obj: Any) -> str | None:
        """Return the ``@vocab`` IRI effective for *obj*, or None."""
        cls = type(obj)
        for source in (self.mixin_for(obj), cls):
            annotation = find_annotation(source, Vocab)
            if annotation is not None and annotation.value:
                return annotation.value
        return find_package_vocab(cls) or self._default_vocab

    def resolve_terms(self, obj: Any) -> dict[str, TermValue]:
        """
        Return the term aliases contributed by *obj*.

        Class-level terms come first (base classes before subclasses, then
        the mixin), followed by aliases derived from exposed fields. A later
        definition of the same alias replaces an earlier one.
        """
        cls = type(obj)
        mixin = self.mixin_for(obj)
        result: dict[str, TermValue] = {}

        declared = find_all_annotations(cls, Terms)
        if mixin is not None:
            declared += find_all_annotations(mixin, Terms)
        for group in declared:
            for entry in group.value:
                result[entry.define] = entry.as_

        vocab = self.resolve_vocab(obj)
        for name, info in self.field_infos(obj).items():
            if info.ignore or info.expose is None:
                continue
            value = _field_term(name, info, vocab)
            if value is not None:
                result[name] = value
        return result

    def field_infos(self, obj: Any) -> dict[str, FieldInfo]:
        """
        Per-field metadata of *obj*, with mixin fields overriding the class.

        Mixin fields that *obj* does not have are ignored.
        """
        infos = field_infos(type(obj))
        mixin = self.mixin_for(obj)
        if mixin is not None:
            names = set(property_names(obj))
            infos.update(
                {name: info for name, info in field_infos(mixin).items() if name in names}
            )
        return infos


def _field_term(name: str, info: FieldInfo, vocab: str | None) -> TermValue | None:
    iri = info.expose
    if info.type is not None:
        return TermDefinition(id=iri, type=info.type)
    if ":" in iri:
        # Already reachable through @vocab
        if vocab is not None and iri == vocab + name:
            return None
        return iri
    if iri == name:
        return None
    return iri

