"""Shared pytest fixtures for spandex tests."""

import json
import plistlib
from datetime import datetime, timezone
from pathlib import Path

import pytest

from spandex.config import Config

MOD_TIME = datetime(2020, 5, 17, 9, 30, 15, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep real user config and env vars out of every test."""
    for key in (
        "SPANDEX_CONFIG",
        "SPANDEX_SOURCE",
        "SPANDEX_DEST",
        "SPANDEX_IMPORT_NAME",
        "SPANDEX_DEBUG",
        "AUTOKEY_DIR",
        "TEXTEXPANDER_FILE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def mod_time():
    return MOD_TIME


@pytest.fixture
def autokey_dir(tmp_path) -> Path:
    """AutoKey settings directory with an empty ``data`` folder."""
    settings = tmp_path / "autokey"
    (settings / "data").mkdir(parents=True)
    return settings


@pytest.fixture
def make_autokey_snippet():
    """Factory writing a body file and its sidecar into a directory."""

    def _make(
        directory: Path,
        base: str,
        text: str,
        abbr: str | None = None,
        description: str | None = None,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        body = directory / f"{base}.txt"
        body.write_text(text, encoding="utf-8")
        metadata = {
            "usageCount": 0,
            "description": description if description is not None else base,
            "abbreviation": {
                "wordChars": "[\\w]",
                "abbreviations": [abbr] if abbr else [],
                "immediate": False,
                "ignoreCase": False,
                "backspace": True,
                "triggerInside": False,
            },
            "modes": [1],
            "type": "phrase",
            "sendMode": "kb",
        }
        (directory / f".{base}.json").write_text(
            json.dumps(metadata), encoding="utf-8"
        )
        return body

    return _make


@pytest.fixture
def write_te_file(tmp_path):
    """Factory writing a TextExpander plist and returning its path."""

    def _write(groups: list[dict], snippets: list[dict], name: str = "Settings.textexpander") -> Path:
        path = tmp_path / name
        with open(path, "wb") as fh:
            plistlib.dump(
                {"groupsTE2": groups, "snippetsTE2": snippets}, fh
            )
        return path

    return _write


@pytest.fixture
def te_snippet():
    """Factory for one ``snippetsTE2`` record."""

    def _snippet(uuid: str, abbr: str, text: str, label: str = "", mod_date=None) -> dict:
        return {
            "uuidString": uuid,
            "abbreviation": abbr,
            "label": label,
            "plainText": text,
            # plistlib stores naive datetimes (UTC)
            "modificationDate": (mod_date or MOD_TIME).replace(tzinfo=None),
        }

    return _snippet


@pytest.fixture
def config(tmp_path, autokey_dir):
    """Runtime Config pointing both backends into tmp_path."""
    return Config(
        source="TextExpander",
        dest="AutoKey",
        autokey_dir=str(autokey_dir),
        textexpander_file=str(tmp_path / "Settings.textexpander"),
    )
