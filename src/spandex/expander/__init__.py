"""Generic text expansion model and backends.

Modules:

- ``models``       -- ``Group`` and ``Snippet``: the in-memory snippet tree.
- ``merger``       -- ``merge`` / ``merge_all``: name-keyed tree upsert.
- ``base``         -- ``Expander``: abstract backend state machine.
- ``registry``     -- ``ExpanderRegistry``: name-to-factory lookup.
- ``autokey``      -- ``AutoKey``: read/write directory-tree backend.
- ``textexpander`` -- ``TextExpander``: read-only plist backend.
- ``errors``       -- exception hierarchy.

Usage example
-------------
::

    from spandex.expander import ExpanderRegistry, AutoKey, Group, merge_all

    registry = ExpanderRegistry()
    registry.register("AutoKey", lambda: AutoKey("~/.config/autokey"))

    dst = registry.lookup("AutoKey")
    root = Group("Imported")
    merge_all(root, [Group("Work")])
    dst.set_group(root)
    dst.write()
"""

from .autokey import AutoKey
from .base import Expander
from .errors import (
    AlreadyRegisteredError,
    ExpanderError,
    InvalidNameError,
    NotFoundError,
    ParseError,
    UnsupportedOperationError,
)
from .merger import merge, merge_all, merge_snippets
from .models import Group, Snippet
from .registry import ExpanderRegistry, build_registry
from .textexpander import TextExpander

__all__ = [
    "AlreadyRegisteredError",
    "AutoKey",
    "Expander",
    "ExpanderError",
    "ExpanderRegistry",
    "Group",
    "InvalidNameError",
    "NotFoundError",
    "ParseError",
    "Snippet",
    "TextExpander",
    "UnsupportedOperationError",
    "build_registry",
    "merge",
    "merge_all",
    "merge_snippets",
]
