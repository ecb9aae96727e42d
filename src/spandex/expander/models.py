"""In-memory snippet tree shared by every expander backend.

A ``Group`` owns its child snippets and child groups through plain lists.
The link back to the parent is a ``weakref`` and is only used to compute
``path``; it never keeps a parent alive and is never used for traversal.
"""

from __future__ import annotations

import posixpath
import weakref
from collections.abc import Iterator
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _Node:
    """Common parent-link handling for groups and snippets."""

    def __init__(self, parent: Group | None = None) -> None:
        self._parent_ref: weakref.ref[Group] | None = None
        self.parent = parent

    @property
    def parent(self) -> Group | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, group: Group | None) -> None:
        self._parent_ref = None if group is None else weakref.ref(group)


class Group(_Node):
    """Named container of snippets and sub-groups.

    Attributes:
        name: Unique among sibling groups.
        snippets: Ordered child snippets.
        groups: Ordered child groups.
    """

    def __init__(
        self,
        name: str,
        snippets: list[Snippet] | None = None,
        groups: list[Group] | None = None,
        parent: Group | None = None,
    ) -> None:
        super().__init__(parent)
        self.name = name
        self.snippets: list[Snippet] = []
        self.groups: list[Group] = []
        for snippet in snippets or []:
            self.add_snippet(snippet)
        for group in groups or []:
            self.add_group(group)

    @property
    def path(self) -> str:
        """Path relative to the backend root; a root group's path is its name."""
        parent = self.parent
        if parent is None:
            return self.name
        return posixpath.join(parent.path, self.name)

    def add_group(self, group: Group) -> Group:
        """Append *group* as a child and point its parent here."""
        group.parent = self
        self.groups.append(group)
        return group

    def add_snippet(self, snippet: Snippet) -> Snippet:
        """Append *snippet* as a child and point its parent here."""
        snippet.parent = self
        self.snippets.append(snippet)
        return snippet

    def find_group(self, name: str) -> Group | None:
        """Return the first child group named *name*, or ``None``."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def find_snippet(self, name: str) -> Snippet | None:
        """Return the first child snippet named *name*, or ``None``."""
        for snippet in self.snippets:
            if snippet.name == name:
                return snippet
        return None

    def walk(self) -> Iterator[Group]:
        """Yield this group and every descendant group, depth first."""
        yield self
        for group in self.groups:
            yield from group.walk()

    def count_snippets(self) -> int:
        return sum(len(group.snippets) for group in self.walk())

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return (
            f"Group(name={self.name!r}, snippets={len(self.snippets)}, "
            f"groups={len(self.groups)})"
        )


class Snippet(_Node):
    """A single abbreviation/body pair.

    Attributes:
        name: Identity key within the parent's snippet list.
        abbr: Trigger abbreviation; may be empty.
        text: Expanded body text.
        mod_time: Last modification time (aware, UTC).
    """

    def __init__(
        self,
        name: str,
        abbr: str = "",
        text: str = "",
        mod_time: datetime | None = None,
        parent: Group | None = None,
    ) -> None:
        super().__init__(parent)
        self.name = name
        self.abbr = abbr
        self.text = text
        self.mod_time = EPOCH if mod_time is None else to_utc(mod_time)

    @property
    def path(self) -> str:
        parent = self.parent
        if parent is None:
            return self.name
        return posixpath.join(parent.path, self.name)

    def overwrite(self, other: Snippet) -> None:
        """Replace every field except the parent link with *other*'s values."""
        self.name = other.name
        self.abbr = other.abbr
        self.text = other.text
        self.mod_time = other.mod_time

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Snippet(name={self.name!r}, abbr={self.abbr!r})"
