"""
JSON-LD keywords and attribute keys used by the serializer.
"""

from __future__ import annotations

AT_CONTEXT = "@context"
AT_VOCAB = "@vocab"
AT_TYPE = "@type"
AT_ID = "@id"
AT_CONTAINER = "@container"
AT_LANGUAGE = "@language"

# Key of the context stack in a run's attribute map
KEY_LD_CONTEXT = "hydrald.ld-context"

DEFAULT_VOCAB = "http://schema.org/"
