"""Read/write expander for AutoKey settings directories.

Layout under ``<settings dir>/data``:

* every directory is a group named after the directory;
* every non-hidden regular file ``<base>.<ext>`` is a snippet body;
* each body has a hidden JSON sidecar ``.<base>.json`` holding the
  snippet's AutoKey settings.

Key design choices:

* **Timestamps as freshness oracle** -- a loaded snippet's ``mod_time`` is
  the sidecar's on-disk mtime.  ``write()`` skips any snippet whose sidecar
  is not older than the in-memory ``mod_time`` and forces both files' times
  to ``mod_time`` after writing, so re-running against unchanged data
  writes nothing.
* **Managed groups** -- only groups passed to ``set_group()`` are written;
  groups that were merely loaded are left alone.
* **No rollback** -- a failed ``write()`` leaves already-written snippets in
  place.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ..file_handler import (
    datetime_to_ns,
    get_mtime,
    read_file_with_encoding,
    set_times,
    write_file,
)
from ..validators import validate_entry_name
from .base import Expander
from .errors import InvalidNameError, ParseError
from .models import Group, Snippet

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
DATA_DIR = "data"
METADATA_EXT = "json"
SNIPPET_EXT = "txt"
HIDDEN_PREFIX = "."

DEFAULT_WORD_CHARS = r"[\w]"
DEFAULT_MODES = [1]


# ---------------------------------------------------------------------------
# Sidecar metadata
# ---------------------------------------------------------------------------


class MetadataAbbreviation(BaseModel):
    word_chars: str = Field(default=DEFAULT_WORD_CHARS, alias="wordChars")
    abbreviations: list[str] = Field(default_factory=list)
    immediate: bool = False
    ignore_case: bool = Field(default=False, alias="ignoreCase")
    backspace: bool = False
    trigger_inside: bool = Field(default=False, alias="triggerInside")

    model_config = {"populate_by_name": True}


class MetadataHotkey(BaseModel):
    hot_key: str | None = Field(default=None, alias="hotKey")
    modifiers: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class MetadataFilter(BaseModel):
    regex: str | None = None
    is_recursive: bool = Field(default=False, alias="isRecursive")

    model_config = {"populate_by_name": True}


class Metadata(BaseModel):
    """AutoKey phrase settings stored in a snippet's sidecar file.

    Attributes:
        usage_count: Number of times the phrase was expanded.
        description: Display name; becomes the snippet name on load.
        abbreviation: Trigger settings; the first abbreviation becomes the
            snippet's ``abbr``.
        modes: AutoKey trigger modes (1 = abbreviation).
        type: Item type, ``"phrase"`` for text snippets.
        send_mode: How AutoKey types the phrase, ``"kb"`` for keyboard.
    """

    usage_count: int = Field(default=0, alias="usageCount")
    omit_trigger: bool = Field(default=False, alias="omitTrigger")
    prompt: bool = False
    description: str = ""
    abbreviation: MetadataAbbreviation = Field(
        default_factory=MetadataAbbreviation
    )
    hotkey: MetadataHotkey = Field(default_factory=MetadataHotkey)
    modes: list[int] = Field(default_factory=list)
    show_in_tray_menu: bool = Field(default=False, alias="showInTrayMenu")
    match_case: bool = Field(default=False, alias="matchCase")
    filter: MetadataFilter = Field(default_factory=MetadataFilter)
    type: str = ""
    send_mode: str = Field(default="", alias="sendMode")

    model_config = {"populate_by_name": True}

    @classmethod
    def for_snippet(cls, snippet: Snippet) -> Metadata:
        """Return default phrase settings for *snippet*."""
        return cls(
            description=snippet.abbr or snippet.name,
            abbreviation=MetadataAbbreviation(
                abbreviations=[snippet.abbr] if snippet.abbr else [],
                immediate=True,
                backspace=True,
            ),
            modes=list(DEFAULT_MODES),
            type="phrase",
            send_mode="kb",
        )

    def first_abbreviation(self) -> str:
        if self.abbreviation.abbreviations:
            return self.abbreviation.abbreviations[0]
        return ""


def metadata_path(file: Path) -> Path:
    """Return the sidecar path for the snippet body *file*.

    Only the final extension is split off: ``a.b.txt`` maps to
    ``.a.b.json``.

    Raises:
        InvalidNameError: If *file* has no extension.
    """
    if not file.suffix or not file.stem:
        raise InvalidNameError(f"invalid file name: {file}")
    return file.with_name(
        f"{HIDDEN_PREFIX}{file.stem}.{METADATA_EXT}"
    )


def parse_metadata(file: Path) -> Metadata:
    """Read a sidecar file.

    Raises:
        OSError: If the file cannot be read.
        ParseError: If the file is not a valid metadata document.
    """
    raw = file.read_bytes()
    try:
        return Metadata.model_validate_json(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValidationError) as exc:
        raise ParseError(f"invalid metadata {file}: {exc}") from exc


def write_metadata(file: Path, metadata: Metadata) -> None:
    write_file(file, metadata.model_dump_json(by_alias=True) + "\n")


# ---------------------------------------------------------------------------
# Expander
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class GroupEntry:
    """A top-level group and whether ``write()`` should persist it."""

    group: Group
    managed: bool = False


class AutoKey(Expander):
    """Directory-tree expander.

    Args:
        settings_dir: AutoKey settings directory (``~/.config/autokey``);
            snippets live in its ``data`` subdirectory.
    """

    name = "AutoKey"

    def __init__(self, settings_dir: str | Path) -> None:
        super().__init__()
        self.dir = Path(settings_dir).expanduser() / DATA_DIR
        self._groups: dict[str, GroupEntry] = {}

    # ------------------------------------------------------------------
    # Expander API
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load every group below the data directory, replacing prior state.

        Raises:
            OSError: If a directory or file cannot be read, or a sidecar is
                missing.
            ParseError: If a sidecar is malformed.
        """
        with self._lock.exclusive():
            logger.info("Loading AutoKey settings from %s", self.dir)
            groups: dict[str, GroupEntry] = {}
            # Files directly under the data directory belong to no group.
            for entry in _sorted_entries(self.dir):
                if entry.is_dir(follow_symlinks=False):
                    group = self._load_dir(Path(entry.path), None)
                    groups[group.name] = GroupEntry(group=group)
            self._groups = groups
            logger.info("Loaded %d groups", len(groups))

    def groups(self) -> list[Group]:
        with self._lock.shared():
            return [entry.group for entry in self._groups.values()]

    def group(self, name: str) -> Group | None:
        with self._lock.shared():
            entry = self._groups.get(name)
            return None if entry is None else entry.group

    def set_group(self, group: Group) -> None:
        """Upsert *group* and mark it for writing."""
        with self._lock.exclusive():
            self._groups[group.name] = GroupEntry(group=group, managed=True)

    def is_managed(self, name: str) -> bool:
        with self._lock.shared():
            entry = self._groups.get(name)
            return entry is not None and entry.managed

    def write(self) -> None:
        """Write every managed group to disk.

        Raises:
            OSError: On any filesystem failure.
            InvalidNameError: If a name cannot be used as a file name.
        """
        with self._lock.exclusive():
            for entry in self._groups.values():
                if not entry.managed:
                    continue
                self._write_group(entry.group)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _write_group(self, group: Group) -> None:
        logger.info("Writing group %s", group)
        _check_name(group.name, "Group name")
        os.makedirs(self.dir / group.path, mode=DIR_MODE, exist_ok=True)
        for child in group.groups:
            self._write_group(child)
        for snippet in group.snippets:
            self._write_snippet(snippet)

    def _write_snippet(self, snippet: Snippet) -> None:
        _check_name(snippet.name, "Snippet name")
        body = self.dir / f"{snippet.path}.{SNIPPET_EXT}"
        md_path = metadata_path(body)
        try:
            on_disk_ns = md_path.stat().st_mtime_ns
        except FileNotFoundError:
            on_disk_ns = None
        if on_disk_ns is not None and on_disk_ns >= datetime_to_ns(
            snippet.mod_time
        ):
            logger.info("Snippet %s up to date", snippet)
            return

        logger.info("Writing snippet %s", snippet)
        write_metadata(md_path, Metadata.for_snippet(snippet))
        set_times(md_path, snippet.mod_time)
        write_file(body, snippet.text)
        set_times(body, snippet.mod_time)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_dir(self, directory: Path, parent: Group | None) -> Group:
        group = Group(directory.name, parent=parent)
        for entry in _sorted_entries(directory):
            path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                group.groups.append(self._load_dir(path, group))
            elif entry.is_file(follow_symlinks=False) and not entry.name.startswith(
                HIDDEN_PREFIX
            ):
                group.add_snippet(_load_snippet(path))
        return group


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def _load_snippet(file: Path) -> Snippet:
    md_path = metadata_path(file)
    metadata = parse_metadata(md_path)
    text, _ = read_file_with_encoding(file)
    return Snippet(
        name=metadata.description,
        abbr=metadata.first_abbreviation(),
        text=text,
        mod_time=get_mtime(md_path),
    )


def _check_name(name: str, field_name: str) -> None:
    ok, reason = validate_entry_name(name, field_name)
    if not ok:
        raise InvalidNameError(reason)
