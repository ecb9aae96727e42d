"""Tests for expander/models.py — Group and Snippet tree nodes.

Covers:
- path computation for root, nested and detached nodes
- weak parent links
- add/find helpers and walk()
- timestamp normalisation
"""

import gc
from datetime import datetime, timedelta, timezone

from spandex.expander.models import EPOCH, Group, Snippet, to_utc


class TestGroupPath:
    """Tests for Group.path."""

    def test_root_path_is_name(self):
        assert Group("Work").path == "Work"

    def test_child_path_joins_parent(self):
        root = Group("Imported")
        work = root.add_group(Group("Work"))
        mail = work.add_group(Group("Mail"))

        assert work.path == "Imported/Work"
        assert mail.path == "Imported/Work/Mail"

    def test_path_follows_reparenting(self):
        a = Group("A")
        b = Group("B")
        child = a.add_group(Group("child"))
        child.parent = b

        assert child.path == "B/child"

    def test_constructor_sets_parent_of_children(self):
        snippet = Snippet("s1")
        sub = Group("Sub")
        group = Group("Top", snippets=[snippet], groups=[sub])

        assert snippet.parent is group
        assert sub.parent is group
        assert snippet.path == "Top/s1"


class TestSnippetPath:
    """Tests for Snippet.path."""

    def test_snippet_path_joins_parent(self):
        group = Group("Work", groups=[])
        inner = group.add_group(Group("Mail"))
        snippet = inner.add_snippet(Snippet("sig", abbr="sg"))

        assert snippet.path == "Work/Mail/sig"

    def test_detached_snippet_path_is_name(self):
        assert Snippet("lonely").path == "lonely"


class TestParentLink:
    """The parent link never keeps a group alive."""

    def test_parent_is_weak(self):
        parent = Group("Parent")
        child = parent.add_group(Group("Child"))
        assert child.parent is parent

        del parent
        gc.collect()

        assert child.parent is None
        assert child.path == "Child"

    def test_clearing_parent(self):
        parent = Group("Parent")
        child = parent.add_group(Group("Child"))
        child.parent = None

        assert child.parent is None
        assert child.path == "Child"


class TestGroupHelpers:
    """Tests for find_group, find_snippet, walk, count_snippets."""

    def test_find_group_first_match(self):
        root = Group("root")
        first = root.add_group(Group("dup"))
        root.add_group(Group("dup"))

        assert root.find_group("dup") is first
        assert root.find_group("missing") is None

    def test_find_is_case_sensitive(self):
        root = Group("root")
        root.add_group(Group("Work"))
        root.add_snippet(Snippet("Sig"))

        assert root.find_group("work") is None
        assert root.find_snippet("sig") is None

    def test_walk_depth_first(self):
        root = Group("root")
        a = root.add_group(Group("a"))
        a.add_group(Group("a1"))
        root.add_group(Group("b"))

        assert [g.name for g in root.walk()] == ["root", "a", "a1", "b"]

    def test_count_snippets(self):
        root = Group("root")
        root.add_snippet(Snippet("s1"))
        sub = root.add_group(Group("sub"))
        sub.add_snippet(Snippet("s2"))
        sub.add_snippet(Snippet("s3"))

        assert root.count_snippets() == 3

    def test_str_is_name(self):
        assert str(Group("Work")) == "Work"
        assert str(Snippet("sig")) == "sig"


class TestTimestamps:
    """Tests for mod_time normalisation."""

    def test_default_mod_time_is_epoch(self):
        assert Snippet("s").mod_time == EPOCH

    def test_naive_mod_time_taken_as_utc(self):
        snippet = Snippet("s", mod_time=datetime(2021, 1, 2, 3, 4, 5))
        assert snippet.mod_time == datetime(
            2021, 1, 2, 3, 4, 5, tzinfo=timezone.utc
        )
        assert snippet.mod_time.tzinfo is timezone.utc

    def test_aware_mod_time_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2021, 1, 2, 5, 0, 0, tzinfo=plus_two)
        assert to_utc(value) == datetime(
            2021, 1, 2, 3, 0, 0, tzinfo=timezone.utc
        )

    def test_overwrite_keeps_parent(self):
        group = Group("g")
        existing = group.add_snippet(Snippet("s", abbr="a", text="old"))
        incoming = Snippet(
            "s",
            abbr="b",
            text="new",
            mod_time=datetime(2022, 1, 1, tzinfo=timezone.utc),
        )

        existing.overwrite(incoming)

        assert existing.parent is group
        assert existing.abbr == "b"
        assert existing.text == "new"
        assert existing.mod_time == datetime(2022, 1, 1, tzinfo=timezone.utc)
