"""Tests for LdContext frames and term definitions."""

from __future__ import annotations

import gc

import pytest

from hydrald.context import LdContext, TermDefinition, as_term_value


class TestTermDefinition:
    """Tests for TermDefinition."""

    def test_from_mapping(self):
        """Mappings with @id/@type become definitions."""
        term = TermDefinition.from_mapping(
            {"@id": "http://schema.org/url", "@type": "@id"}
        )
        assert term == TermDefinition(id="http://schema.org/url", type="@id")

    def test_from_mapping_requires_id(self):
        """A mapping without @id is rejected."""
        with pytest.raises(ValueError, match="@id"):
            TermDefinition.from_mapping({"@type": "@id"})

    def test_from_mapping_rejects_unknown_keys(self):
        """Unsupported keywords are rejected."""
        with pytest.raises(ValueError, match="@reverse"):
            TermDefinition.from_mapping({"@id": "http://x/", "@reverse": "y"})

    def test_to_json_omits_absent_hints(self):
        """Unset hints are left out of the JSON form."""
        term = TermDefinition(id="http://www.w3.org/ns/dcat#keyword", container="@set")
        assert term.to_json() == {
            "@id": "http://www.w3.org/ns/dcat#keyword",
            "@container": "@set",
        }

    def test_to_json_key_order(self):
        """@id comes first so output is stable."""
        term = TermDefinition(id="http://x/", type="@id", container="@list", language="en")
        assert list(term.to_json()) == ["@id", "@type", "@container", "@language"]

    def test_as_term_value(self):
        """Strings and mappings are accepted, other types are not."""
        assert as_term_value("http://x/") == "http://x/"
        assert as_term_value({"@id": "http://x/"}) == TermDefinition(id="http://x/")
        with pytest.raises(TypeError):
            as_term_value(42)


class TestContains:
    """Tests for LdContext.contains()."""

    def test_same_vocab_no_terms(self):
        """Same vocab and no terms is contained."""
        parent = LdContext(None, "http://schema.org/")
        current = LdContext(parent, "http://schema.org/")
        assert parent.contains(current)

    def test_both_vocabs_absent(self):
        """Two frames without vocab match."""
        parent = LdContext(None, None)
        assert parent.contains(LdContext(parent, None))

    def test_different_vocab(self):
        """A different vocab is not contained."""
        parent = LdContext(None, "http://schema.org/")
        current = LdContext(parent, "http://example.org/")
        assert not parent.contains(current)

    def test_vocab_absent_on_one_side(self):
        """A vocab set on only one side is not contained."""
        parent = LdContext(None, "http://schema.org/")
        assert not parent.contains(LdContext(parent, None))
        assert not LdContext(None, None).contains(LdContext(None, "http://schema.org/"))

    def test_terms_subset(self):
        """Every current term must be present in the parent with an equal value."""
        parent = LdContext(
            None,
            "http://schema.org/",
            {"mbox": "http://xmlns.com/foaf/0.1/mbox", "homepage": "http://schema.org/url"},
        )
        current = LdContext(parent, "http://schema.org/", {"mbox": "http://xmlns.com/foaf/0.1/mbox"})
        assert parent.contains(current)

    def test_new_term(self):
        """A term missing from the parent is not contained."""
        parent = LdContext(None, "http://schema.org/")
        current = LdContext(parent, "http://schema.org/", {"mbox": "http://xmlns.com/foaf/0.1/mbox"})
        assert not parent.contains(current)

    def test_term_with_different_value(self):
        """A term bound to another value is not contained."""
        parent = LdContext(None, None, {"homepage": "http://schema.org/url"})
        current = LdContext(
            parent, None, {"homepage": TermDefinition(id="http://schema.org/url", type="@id")}
        )
        assert not parent.contains(current)

    def test_structured_terms_compare_structurally(self):
        """Equal structured definitions match."""
        parent = LdContext(None, None, {"homepage": TermDefinition(id="http://schema.org/url", type="@id")})
        current = LdContext(
            parent, None, {"homepage": TermDefinition.from_mapping({"@id": "http://schema.org/url", "@type": "@id"})}
        )
        assert parent.contains(current)


class TestParent:
    """Tests for the parent back-reference."""

    def test_parent_link(self):
        """parent returns the enclosing frame, or None at the root."""
        parent = LdContext(None, "http://schema.org/")
        current = LdContext(parent, None)
        assert current.parent is parent
        assert parent.parent is None

    def test_parent_is_not_owned(self):
        """A frame does not keep its parent alive."""
        parent = LdContext(None, "http://schema.org/")
        current = LdContext(parent, None)
        del parent
        gc.collect()
        assert current.parent is None

    def test_terms_are_copied(self):
        """Later changes to the source mapping do not leak in."""
        source = {"a": "http://x/a"}
        frame = LdContext(None, None, source)
        source["b"] = "http://x/b"
        assert frame.terms == {"a": "http://x/a"}
