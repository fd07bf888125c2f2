"""Shared test fixtures for keg test suite.

Design:
- sample_dex: The two-entry index used across model tests
- keg_root: Isolated keg in a temp directory with a seeded dex/nodes.tsv
- runner: CliRunner with proper isolation
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from click.testing import CliRunner

from keg.models import Dex, DexEntry

# ─────────────────────────────────────────────────────────────────────────────
# Data Helpers
# ─────────────────────────────────────────────────────────────────────────────


def utc(*args: int) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


SEED_TSV = (
    "3\t2023-01-01 00:00:00Z\tAlpha\n"
    "1\t2023-06-01 00:00:00Z\tBeta\n"
    "12\t2024-02-29 13:45:07Z\tGo <b>Generics</b> & Alphabets\n"
)


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_dex() -> Dex:
    """Two entries, deliberately out of id order."""
    return Dex(
        [
            DexEntry(updated=utc(2023, 1, 1), title="Alpha", id=3),
            DexEntry(updated=utc(2023, 6, 1), title="Beta", id=1),
        ]
    )


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def keg_root(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated keg directory with a seeded index.

    Sets KEG_ROOT to the temp keg and points KEG_CONFIG at a file that does
    not exist, so the user's own config never leaks into tests.
    """
    root = tmp_path / "keg-root"
    root.mkdir()
    (root / "keg").write_text("title: Test Keg\n")
    (root / "dex").mkdir()
    (root / "dex" / "nodes.tsv").write_text(SEED_TSV, encoding="utf-8")

    monkeypatch.setenv("KEG_ROOT", str(root))
    monkeypatch.setenv("KEG_CONFIG", str(tmp_path / "no-config.yaml"))
    monkeypatch.delenv("KEG_NAME", raising=False)
    return root
