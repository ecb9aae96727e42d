"""Name-to-factory registry for expander backends.

The registry is an explicitly constructed object, built once at start-up
and handed to the migration driver; there is no module-level registry.

Registrations are serialised by a lock. Lookups take no lock: all
registrations must complete before the first lookup.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from .autokey import AutoKey
from .base import Expander
from .errors import AlreadyRegisteredError, NotFoundError
from .textexpander import TextExpander

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)

ExpanderFactory = Callable[[], Expander]


class ExpanderRegistry:
    """Registry of zero-argument expander factories keyed by name."""

    def __init__(self) -> None:
        self._factories: dict[str, ExpanderFactory] = {}
        self._mu = threading.Lock()

    def register(self, name: str, factory: ExpanderFactory) -> None:
        """Add *factory* under *name*.

        Raises:
            AlreadyRegisteredError: If *name* is already taken.
        """
        with self._mu:
            if name in self._factories:
                raise AlreadyRegisteredError(f"{name} already registered")
            self._factories[name] = factory
        logger.debug("Registered expander %s", name)

    def lookup(self, name: str) -> Expander:
        """Return a fresh backend instance for *name*.

        Raises:
            NotFoundError: If no backend is registered under *name*.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise NotFoundError(f"invalid expander: {name}")
        return factory()

    def names(self) -> list[str]:
        """Return the registered backend names, sorted."""
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def build_registry(config: Config) -> ExpanderRegistry:
    """Construct a registry with every built-in backend bound to *config* paths."""
    registry = ExpanderRegistry()
    registry.register(
        AutoKey.name, functools.partial(AutoKey, config.autokey_dir)
    )
    registry.register(
        TextExpander.name,
        functools.partial(TextExpander, config.textexpander_file),
    )
    return registry
