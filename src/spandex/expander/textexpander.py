"""Read-only expander for TextExpander settings files.

A TextExpander settings file is a property list with two flat lists:
``groupsTE2`` (group name plus the UUIDs of its snippets) and
``snippetsTE2`` (one record per snippet, keyed by UUID). Groups are
single-level; the format carries no nested sub-groups.

Snippets are named after their UUID, which is stable across exports, so
repeated imports upsert rather than duplicate.
"""

from __future__ import annotations

import logging
import plistlib
from datetime import datetime
from pathlib import Path
from xml.parsers.expat import ExpatError

from pydantic import BaseModel, Field, ValidationError

from .base import Expander
from .errors import NotFoundError, ParseError, UnsupportedOperationError
from .models import EPOCH, Group, Snippet

logger = logging.getLogger(__name__)


class RawGroup(BaseModel):
    """A ``groupsTE2`` record."""

    name: str
    uuids: list[str] = Field(default_factory=list, alias="snippetUUIDs")

    model_config = {"frozen": True, "populate_by_name": True}


class RawSnippet(BaseModel):
    """A ``snippetsTE2`` record."""

    abbr: str = Field(default="", alias="abbreviation")
    label: str = ""
    text: str = Field(default="", alias="plainText")
    uuid: str = Field(alias="uuidString")
    mod_date: datetime = Field(default=EPOCH, alias="modificationDate")

    model_config = {"frozen": True, "populate_by_name": True}


class RawData(BaseModel):
    """Top-level settings document."""

    groups: list[RawGroup] = Field(default_factory=list, alias="groupsTE2")
    snippets: list[RawSnippet] = Field(
        default_factory=list, alias="snippetsTE2"
    )

    model_config = {"frozen": True, "populate_by_name": True}


class TextExpander(Expander):
    """Plist-based expander.

    Args:
        file: Path to the ``Settings.textexpander`` property list.
    """

    name = "TextExpander"

    def __init__(self, file: str | Path) -> None:
        super().__init__()
        self.file = Path(file).expanduser()
        self._data: RawData | None = None
        self._groups: list[Group] = []

    def load(self) -> None:
        """Parse the settings file, replacing all in-memory groups.

        Raises:
            OSError: If the file cannot be read.
            ParseError: If the file is not a valid settings document.
            NotFoundError: If a group references an unknown snippet UUID.
        """
        with self._lock.exclusive():
            logger.info("Loading TextExpander settings from %s", self.file)
            with open(self.file, "rb") as fh:
                try:
                    raw = plistlib.load(fh)
                except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
                    raise ParseError(
                        f"invalid settings file {self.file}: {exc}"
                    ) from exc
            if not isinstance(raw, dict):
                raise ParseError(
                    f"invalid settings file {self.file}: root is "
                    f"{type(raw).__name__}, expected dict"
                )
            try:
                data = RawData.model_validate(raw)
            except ValidationError as exc:
                raise ParseError(
                    f"invalid settings file {self.file}: {exc}"
                ) from exc
            groups = self._parse(data)
            self._data = data
            self._groups = groups
            logger.info(
                "Loaded %d groups, %d snippets",
                len(groups),
                len(data.snippets),
            )

    def groups(self) -> list[Group]:
        with self._lock.shared():
            return list(self._groups)

    def group(self, name: str) -> Group | None:
        with self._lock.shared():
            for group in self._groups:
                if group.name == name:
                    return group
            return None

    def set_group(self, group: Group) -> None:
        """Upsert *group* in memory; nothing is ever written back."""
        with self._lock.exclusive():
            for i, existing in enumerate(self._groups):
                if existing.name == group.name:
                    self._groups[i] = group
                    return
            self._groups.append(group)

    def write(self) -> None:
        raise UnsupportedOperationError(
            "TextExpander: write not implemented"
        )

    @staticmethod
    def _parse(data: RawData) -> list[Group]:
        """Build the group list from raw records; all-or-nothing."""
        by_uuid = {raw.uuid: raw for raw in data.snippets}
        groups: list[Group] = []
        for raw_group in data.groups:
            group = Group(raw_group.name)
            for uuid in raw_group.uuids:
                raw = by_uuid.get(uuid)
                if raw is None:
                    raise NotFoundError(
                        f"invalid snippet UUID {uuid} in group {raw_group.name}"
                    )
                # One Snippet per reference: a UUID may be listed by several groups.
                group.add_snippet(
                    Snippet(
                        name=raw.uuid,
                        abbr=raw.abbr,
                        text=raw.text,
                        mod_time=raw.mod_date,
                    )
                )
            groups.append(group)
        return groups
