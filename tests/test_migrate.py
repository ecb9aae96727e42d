"""Tests for migrate.py — end-to-end migration sequence."""

import pytest

from spandex.expander.autokey import AutoKey
from spandex.expander.errors import NotFoundError, UnsupportedOperationError
from spandex.expander.models import Group, Snippet
from spandex.expander.registry import ExpanderRegistry, build_registry
from spandex.expander.textexpander import TextExpander
from spandex.migrate import default_import_name, run_migration


@pytest.fixture
def work_settings(write_te_file, te_snippet):
    """TextExpander file with group Work holding one snippet."""
    return write_te_file(
        groups=[{"name": "Work", "snippetUUIDs": ["u1"]}],
        snippets=[te_snippet("u1", "ty", "Thank you!")],
    )


class TestRunMigration:
    """Tests for run_migration()."""

    def test_end_to_end(self, config, work_settings, autokey_dir):
        root = run_migration(
            build_registry(config), "TextExpander", "AutoKey", "Imported"
        )

        assert root.name == "Imported"
        reader = AutoKey(autokey_dir)
        reader.load()
        imported = reader.group("Imported")
        assert imported is not None
        work = imported.find_group("Work")
        assert work is not None
        assert [(s.abbr, s.text) for s in work.snippets] == [
            ("ty", "Thank you!")
        ]

    def test_default_import_name(self, config, work_settings, autokey_dir):
        root = run_migration(build_registry(config), "TextExpander", "AutoKey")

        assert root.name == "Imported from TextExpander"
        assert (autokey_dir / "data" / "Imported from TextExpander" / "Work" / "u1.txt").exists()

    def test_source_groups_reparented_under_root(self, config, work_settings):
        root = run_migration(
            build_registry(config), "TextExpander", "AutoKey", "Imported"
        )

        work = root.groups[0]
        assert work.parent is root
        assert work.snippets[0].path == "Imported/Work/u1"

    def test_dry_run_writes_nothing(self, config, work_settings, autokey_dir):
        run_migration(
            build_registry(config),
            "TextExpander",
            "AutoKey",
            "Imported",
            dry_run=True,
        )

        assert list((autokey_dir / "data").iterdir()) == []

    def test_rerun_is_idempotent(self, config, work_settings, autokey_dir):
        registry = build_registry(config)
        run_migration(registry, "TextExpander", "AutoKey", "Imported")
        body = autokey_dir / "data" / "Imported" / "Work" / "u1.txt"
        first = body.stat().st_mtime_ns

        run_migration(registry, "TextExpander", "AutoKey", "Imported")

        assert body.stat().st_mtime_ns == first
        assert len(list(body.parent.glob("*.txt"))) == 1

    def test_snippet_in_two_groups_written_to_both(
        self, config, write_te_file, te_snippet, autokey_dir
    ):
        write_te_file(
            groups=[
                {"name": "A", "snippetUUIDs": ["x"]},
                {"name": "B", "snippetUUIDs": ["x"]},
            ],
            snippets=[te_snippet("x", "sig", "Regards")],
        )

        run_migration(build_registry(config), "TextExpander", "AutoKey", "Imp")

        data = autokey_dir / "data" / "Imp"
        assert (data / "A" / "x.txt").read_text() == "Regards"
        assert (data / "B" / "x.txt").read_text() == "Regards"
        assert (data / "A" / ".x.json").exists()

    def test_unknown_source_raises(self, config):
        with pytest.raises(NotFoundError):
            run_migration(build_registry(config), "Nope", "AutoKey")

    def test_read_only_destination_raises(self, config, work_settings):
        with pytest.raises(UnsupportedOperationError):
            run_migration(
                build_registry(config), "TextExpander", "TextExpander", "X"
            )

    def test_merges_into_existing_destination_group(self, work_settings, tmp_path):
        existing = Group("Imported")
        existing.add_group(Group("Personal")).add_snippet(Snippet("addr"))
        captured = {}

        class _Dest(AutoKey):
            def __init__(self):
                super().__init__(tmp_path / "ak")
                self.set_group(existing)

            def write(self):
                captured["groups"] = self.groups()

        registry = ExpanderRegistry()
        registry.register("TextExpander", lambda: TextExpander(work_settings))
        registry.register("Dest", _Dest)

        root = run_migration(registry, "TextExpander", "Dest", "Imported")

        assert root is existing
        assert [g.name for g in root.groups] == ["Personal", "Work"]
        assert captured["groups"] == [existing]


def test_default_import_name_format():
    assert default_import_name("TextExpander") == "Imported from TextExpander"
