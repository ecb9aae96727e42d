"""Name-keyed tree merge for snippet groups.

Key design choices:

* Matching is by exact, case-sensitive name; the first match wins.
* Matched groups are merged recursively, never replaced.
* Matched snippets are overwritten field by field, so they keep their
  position in the target list and their parent link.
* Unmatched groups and snippets are appended in incoming order and
  re-parented to the target.
* No index is built and no I/O is performed.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Group, Snippet


def merge(target: Group, incoming: Group) -> Group:
    """Recursively merge *incoming*'s children into *target*.

    Args:
        target: Group receiving the content; mutated in place.
        incoming: Group whose child groups and snippets are merged.

    Returns:
        *target*, for chaining.
    """
    merge_all(target, incoming.groups)
    merge_snippets(target, incoming.snippets)
    return target


def merge_all(target: Group, groups: Iterable[Group]) -> Group:
    """Merge each group in *groups* into the same-named child of *target*.

    Groups without a same-named child are adopted as-is, subtree included.
    """
    # Snapshot so adopting a group out of incoming.groups cannot skip items.
    for right in list(groups):
        left = target.find_group(right.name)
        if left is None:
            target.add_group(right)
        else:
            merge(left, right)
    return target


def merge_snippets(target: Group, snippets: Iterable[Snippet]) -> Group:
    """Upsert *snippets* into *target* by name."""
    for snippet in list(snippets):
        existing = target.find_snippet(snippet.name)
        if existing is None:
            target.add_snippet(snippet)
        else:
            existing.overwrite(snippet)
    return target
