"""
Example: a small DCAT dataset catalog as JSON-LD.

Usage:
    python examples/catalog/run.py

This demonstrates:
- A vocabulary per class with @vocab
- Term aliases for properties outside the vocabulary
- Overlay metadata (a mixin) for a class we do not own
- Nested nodes that only repeat what changed in their @context
"""

from __future__ import annotations

from dataclasses import dataclass, field

import hydrald


# A class from "somewhere else" that we cannot annotate
@dataclass
class Contact:
    name: str
    email: str


# The mixin carries the metadata instead
@hydrald.vocab("http://www.w3.org/2006/vcard/ns#")
@hydrald.expose("Organization")
@dataclass
class ContactMixin:
    name: str = hydrald.ld_field(expose="fn", default="")
    email: str = hydrald.ld_field(expose="hasEmail", default="")


@hydrald.vocab("http://www.w3.org/ns/dcat#")
@hydrald.term("title", "http://purl.org/dc/terms/title")
@hydrald.term("keyword", {"@id": "http://www.w3.org/ns/dcat#keyword", "@container": "@set"})
@dataclass
class Dataset:
    title: str
    keyword: list[str] = field(default_factory=list)
    downloadURL: str = hydrald.ld_field(
        expose="http://www.w3.org/ns/dcat#downloadURL", type="@id", default=""
    )
    contactPoint: Contact | None = None


@hydrald.vocab("http://www.w3.org/ns/dcat#")
@hydrald.term("title", "http://purl.org/dc/terms/title")
@dataclass
class Catalog:
    title: str
    dataset: list[Dataset] = field(default_factory=list)


def build_catalog() -> Catalog:
    contact = Contact("Open Data Team", "mailto:data@example.org")
    return Catalog(
        title="City Open Data",
        dataset=[
            Dataset(
                "Bike counters",
                keyword=["mobility", "bicycles"],
                downloadURL="https://data.example.org/bikes.csv",
                contactPoint=contact,
            ),
            Dataset("Air quality", keyword=["environment"], contactPoint=contact),
        ],
    )


if __name__ == "__main__":
    mapper = hydrald.LdMapper(hydrald.SerializerConfig(indent=2, include_none=False))
    mapper.add_mixin(Contact, ContactMixin)
    print(mapper.dumps(build_catalog()))
