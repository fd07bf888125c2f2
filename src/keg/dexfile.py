"""Reading and writing the dex TSV file (dex/nodes.tsv).

The file holds one `Dex.tsv()` line per node: id, timestamp, title.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from .errors import ErrorCode, IdentifierParseError, KegError
from .models import ISO_DATE_FMT, ISO_DATE_PATTERN, Dex, DexEntry

log = logging.getLogger(__name__)

_ID_RE = re.compile(r"[0-9]+")
_TIMESTAMP_RE = re.compile(ISO_DATE_PATTERN)


def parse_id(text: str) -> int:
    """Parse a stored node id.

    Raises:
        IdentifierParseError: If text is not a non-negative decimal integer.
    """
    value = text.strip()
    if not _ID_RE.fullmatch(value):
        raise IdentifierParseError(text)
    return int(value)


def parse_timestamp(text: str) -> datetime:
    """Parse a YYYY-MM-DD HH:MM:SSZ timestamp into an aware UTC datetime."""
    value = text.strip()
    if not _TIMESTAMP_RE.fullmatch(value):
        raise KegError(ErrorCode.PARSE_ERROR, f"invalid timestamp: {text!r}", {"value": text})
    try:
        parsed = datetime.strptime(value, ISO_DATE_FMT)
    except ValueError as e:
        raise KegError(ErrorCode.PARSE_ERROR, f"invalid timestamp: {text!r}", {"value": text}) from e
    return parsed.replace(tzinfo=timezone.utc)


def loads_tsv(text: str) -> Dex:
    """Build a Dex from TSV text, keeping the order of the lines.

    Records end at a line feed only, since titles may hold any other line
    separator. Blank lines are skipped. Titles may themselves contain tabs,
    so only the first two tabs separate columns.
    """
    dex = Dex()
    for lineno, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue

        columns = line.split("\t", 2)
        if len(columns) != 3:
            raise KegError(
                ErrorCode.PARSE_ERROR,
                f"line {lineno}: expected 3 tab-separated columns, got {len(columns)}",
                {"line": lineno},
            )

        raw_id, raw_updated, title = columns
        try:
            node_id = parse_id(raw_id)
            updated = parse_timestamp(raw_updated)
        except KegError as e:
            e.details["line"] = lineno
            raise

        dex.append(DexEntry(updated=updated, title=title, id=node_id))

    return dex


def load_dex(path: Path) -> Dex:
    """Load a Dex from a nodes.tsv file.

    Raises:
        KegError: DEX_NOT_FOUND if the file does not exist, PARSE_ERROR or
            INVALID_IDENTIFIER if a line is malformed.
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            text = f.read()
    except FileNotFoundError as e:
        raise KegError(
            ErrorCode.DEX_NOT_FOUND,
            f"Dex file not found: {path}",
            {"path": str(path)},
        ) from e

    dex = loads_tsv(text)
    log.debug("Loaded %d entries from %s", len(dex), path)
    return dex


def dump_dex(dex: Dex, path: Path) -> None:
    """Write the Dex to path as TSV, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(dex.tsv())
    log.debug("Wrote %d entries to %s", len(dex), path)
