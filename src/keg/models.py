"""Dex data model: index entries and the collection that renders them."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import SupportsIndex, overload

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .choose import Chooser, choose_from
from .encoding import escape_json_string
from .errors import ChooseError
from .style import ANSI, Style

log = logging.getLogger(__name__)

# strptime form of the dex timestamp, e.g. 2023-06-01 14:05:09Z
ISO_DATE_FMT = "%Y-%m-%d %H:%M:%SZ"
ISO_DATE_PATTERN = r"\d\d\d\d-\d\d-\d\d \d\d:\d\d:\d\dZ"
PRETTY_DATE_FMT = "%Y-%m-%d %H:%MZ"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as YYYY-MM-DD HH:MM:SSZ."""
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}Z"
    )


def format_pretty_timestamp(value: datetime) -> str:
    """Render a timestamp as YYYY-MM-DD HH:MMZ."""
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}Z"
    )


class DexEntry(BaseModel):
    """A single line of the index (nodes.tsv, latest.md, ...).

    All three fields are always required. The timestamp is kept in UTC
    with second precision whatever the caller passed in.
    """

    model_config = ConfigDict(frozen=True)

    updated: datetime  # Last change of any file in the node directory
    title: str  # First line of the node README
    id: int = Field(ge=0)  # Node identifier

    @field_validator("updated")
    @classmethod
    def _normalize_updated(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return value.replace(microsecond=0)

    def id_string(self) -> str:
        """Return the node identifier as text."""
        return str(self.id)

    def to_json(self) -> bytes:
        """Serialize as a JSON object with keys U, N, T in that order.

        The title is escaped for JSON only, never HTML-escaped.
        """
        return (
            '{"U":"%s","N":%d,"T":"%s"}'
            % (format_timestamp(self.updated), self.id, escape_json_string(self.title))
        ).encode("utf-8")

    def tsv(self) -> str:
        return f"{self.id}\t{format_timestamp(self.updated)}\t{self.title}"

    def md(self) -> str:
        """Render as a Markdown list item for dex/latest.md.

        The item links to the node by id-as-path:

            * 2023-06-01 14:05:09Z [Some Title](/42)
        """
        return f"* {format_timestamp(self.updated)} [{self.title}](/{self.id})"

    def as_include(self) -> str:
        """Render as an include link without the time, for include blocks in nodes."""
        return f"* [{self.title}](/{self.id})"

    def __str__(self) -> str:
        return self.md()


class Dex(list[DexEntry]):
    """Ordered collection of DexEntry values.

    Order is whatever the caller built. Ids are expected to be unique but
    that is never checked here. Use by_id() for numeric order.
    """

    @overload
    def __getitem__(self, index: SupportsIndex) -> DexEntry: ...

    @overload
    def __getitem__(self, index: slice) -> Dex: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Dex(super().__getitem__(index))
        return super().__getitem__(index)

    def __add__(self, other: Iterable[DexEntry]) -> Dex:
        return Dex([*self, *other])

    def __radd__(self, other: Iterable[DexEntry]) -> Dex:
        return Dex([*other, *self])

    def copy(self) -> Dex:
        return Dex(self)

    def to_json(self) -> bytes:
        """Serialize as a JSON array, one entry per line, not HTML-escaped."""
        return b"[" + b",\n".join(entry.to_json() for entry in self) + b"]"

    def tsv(self) -> str:
        """Render as a loadable tab-separated values file."""
        return "".join(entry.tsv() + "\n" for entry in self)

    def md(self) -> str:
        """Render as a Markdown list for dex/latest.md."""
        return "".join(entry.md() + "\n" for entry in self)

    def as_includes(self) -> str:
        """Render as an include list (Markdown bullets without timestamps).

        Handy from inside an editor to pull references in without leaving
        the terminal.
        """
        return "".join(entry.as_include() + "\n" for entry in self)

    def __str__(self) -> str:
        return self.tsv()

    def highest(self) -> int:
        """Return the highest node id, or 0 when there are no entries."""
        return max((entry.id for entry in self), default=0)

    def highest_string(self) -> str:
        return str(self.highest())

    def highest_width(self) -> int:
        """Number of digits of the highest id, used to align id columns."""
        return len(self.highest_string())

    def pretty_lines(self, style: Style = ANSI) -> list[str]:
        """Render each entry as a styled line without a line ending."""
        width = self.highest_width()
        return [
            f"{style.muted}{format_pretty_timestamp(entry.updated)} "
            f"{style.accent}{entry.id:<{width}} "
            f"{style.default}{entry.title}{style.reset}"
            for entry in self
        ]

    def pretty(self, style: Style = ANSI) -> str:
        """Render for humans: minute timestamps, aligned ids, then titles."""
        return "\n".join(self.pretty_lines(style))

    def by_id(self) -> Dex:
        """Return a copy ordered from lowest to highest node id."""
        return Dex(sorted(self, key=lambda entry: entry.id))

    def with_title_text(self, text: str) -> Dex:
        """Return the entries whose title contains text, ignoring case."""
        needle = text.casefold()
        return Dex(entry for entry in self if needle in entry.title.casefold())

    def choose_with_title_text(
        self,
        text: str,
        chooser: Chooser | None = None,
        style: Style = ANSI,
    ) -> DexEntry | None:
        """Resolve text to a single entry.

        A single match is returned as is. With several matches the user is
        asked to pick one of their pretty lines. Returns None when nothing
        matches, the chooser fails, or nothing was picked.
        """
        hits = self.with_title_text(text)
        if not hits:
            log.debug("No entries with title text %r", text)
            return None
        if len(hits) == 1:
            return hits[0]

        chooser = chooser or choose_from
        try:
            index = chooser(hits.pretty_lines(style))
        except ChooseError as e:
            log.debug("Chooser failed for %r: %s", text, e)
            return None

        if index < 0 or index >= len(hits):
            log.debug("Nothing selected for %r (index %d)", text, index)
            return None
        return hits[index]
