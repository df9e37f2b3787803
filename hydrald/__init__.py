"""
hydrald: JSON-LD serialization for Python objects.

Objects are written as JSON-LD nodes with a ``@type`` and, where needed, a
``@context`` declaring the ``@vocab`` and term aliases in force. Nested
objects only repeat the parts of the context that differ from their
enclosing node, so documents stay small while expanding to the same graph.

Example:
    from dataclasses import dataclass

    import hydrald

    @hydrald.vocab("http://schema.org/")
    @dataclass
    class Person:
        name: str
        knows: "Person | None" = None

    mapper = hydrald.LdMapper()
    print(mapper.dumps(Person("Ada", knows=Person("Bob"))))
    # {"@context":{"@vocab":"http://schema.org/"},"@type":"Person","name":"Ada",
    #  "knows":{"@type":"Person","name":"Bob","knows":null}}
"""

__version__ = "0.1.0"

# Annotations
from hydrald.annotations import (
    Expose,
    FieldInfo,
    Term,
    Terms,
    Vocab,
    expose,
    find_annotation,
    ld_field,
    term,
    terms,
    vocab,
)

# Configuration
from hydrald.config import ProjectConfig, SerializerConfig

# Frames and context diffing
from hydrald.context import LdContext, TermDefinition
from hydrald.diff import ContextBlock, diff_context

# Errors
from hydrald.errors import (
    ConfigError,
    ContextStackError,
    HydraError,
    SerializationError,
    WriterError,
)

# Field writing
from hydrald.fields import BeanFieldWriter, FieldWriter, ProxyUnwrapper

# Facade
from hydrald.mapper import LdMapper, SerializationContext
from hydrald.mixins import MixinRegistry
from hydrald.resolver import MetadataResolver
from hydrald.serializer import HydraSerializer
from hydrald.stack import ContextStack, context_stack
from hydrald.writer import JsonGenerator

__all__ = [
    # Version
    "__version__",
    # Annotations
    "Expose",
    "Vocab",
    "Term",
    "Terms",
    "FieldInfo",
    "expose",
    "vocab",
    "term",
    "terms",
    "ld_field",
    "find_annotation",
    # Configuration
    "SerializerConfig",
    "ProjectConfig",
    # Frames
    "LdContext",
    "TermDefinition",
    "ContextBlock",
    "diff_context",
    "ContextStack",
    "context_stack",
    # Serialization
    "LdMapper",
    "SerializationContext",
    "HydraSerializer",
    "MetadataResolver",
    "MixinRegistry",
    "JsonGenerator",
    "BeanFieldWriter",
    "FieldWriter",
    "ProxyUnwrapper",
    # Errors
    "HydraError",
    "WriterError",
    "ContextStackError",
    "SerializationError",
    "ConfigError",
]
