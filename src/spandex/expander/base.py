"""Abstract text expansion backend.

Every backend moves through the same states:

* ``Unloaded -> Loaded`` via ``load()``; loading again replaces all
  in-memory state and invalidates previously returned groups.
* ``(Unloaded | Loaded) -> Populated`` via ``set_group()``, repeatable.
* ``Populated -> Persisted`` via ``write()``, where supported.

Each instance guards its group table with a reader/writer lock:
``load``, ``set_group`` and ``write`` are exclusive, ``groups`` and
``group`` are shared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .locking import RWLock
from .models import Group


class Expander(ABC):
    """Base class for all expander backends."""

    #: Registry name of the backend.
    name: str = ""

    def __init__(self) -> None:
        self._lock = RWLock()

    @abstractmethod
    def load(self) -> None:
        """Initialize the backend from its on-disk settings."""

    @abstractmethod
    def groups(self) -> list[Group]:
        """Return all top-level groups."""

    @abstractmethod
    def group(self, name: str) -> Group | None:
        """Return the top-level group called *name*, or ``None``."""

    @abstractmethod
    def set_group(self, group: Group) -> None:
        """Upsert a top-level group by name."""

    @abstractmethod
    def write(self) -> None:
        """Persist the backend to disk."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
