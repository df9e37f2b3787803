"""
MixinRegistry: overlay metadata for classes.

A mixin is a class carrying hydrald annotations on behalf of another class
that cannot (or should not) be annotated directly. Annotations found on the
mixin take precedence over those on the target class.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)


class MixinSource(Protocol):
    """Protocol for looking up the mixin registered for a class."""

    def find_mixin_class_for(self, cls: type) -> type | None:
        """Return the mixin registered for *cls*, or None."""
        ...


class MixinRegistry:
    """
    Thread-safe registry mapping target classes to mixin classes.

    Lookups are by exact class; a mixin registered for a base class does not
    apply to its subclasses.
    """

    def __init__(self, mixins: dict[type, type] | None = None) -> None:
        self._mixins: dict[type, type] = dict(mixins or {})
        self._lock = threading.Lock()

    def add_mixin(self, target: type, mixin: type) -> None:
        """
        Register *mixin* as overlay metadata for *target*.

        Replaces any mixin previously registered for *target*.
        """
        with self._lock:
            previous = self._mixins.get(target)
            self._mixins[target] = mixin
        if previous is not None and previous is not mixin:
            logger.debug(
                f"Replaced mixin {previous.__name__} with {mixin.__name__} "
                f"for {target.__name__}"
            )

    def find_mixin_class_for(self, cls: type) -> type | None:
        with self._lock:
            return self._mixins.get(cls)

    def __len__(self) -> int:
        with self._lock:
            return len(self._mixins)
