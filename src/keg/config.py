"""Configuration management for keg.

Locating kegs on disk and the constants that describe their layout.
Magic numbers are documented here rather than scattered throughout the codebase.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError, ErrorCode

log = logging.getLogger(__name__)


# =============================================================================
# Keg Layout
# =============================================================================

# A directory is a keg when it holds this file (YAML keg metadata).
KEG_MARKER_FILE = "keg"

# Index of all nodes, one Dex.tsv() line per node, relative to the keg root.
DEX_TSV_PATH = Path("dex") / "nodes.tsv"

# Maximum directory traversal depth when walking up from cwd looking for a keg.
# Prevents endless walking on unusual filesystems; real kegs sit a few levels up.
MAX_KEG_SEARCH_DEPTH = 50


class Local(BaseModel):
    """A keg stored locally, referenced by a short name."""

    name: str
    path: Path


def get_config_path() -> Path:
    """Get the user config file path.

    KEG_CONFIG overrides the default ~/.config/keg/config.yaml.
    """
    override = os.environ.get("KEG_CONFIG")
    if override:
        return Path(override)
    return Path.home() / ".config" / "keg" / "config.yaml"


def get_local_kegs(config_path: Path | None = None) -> list[Local]:
    """Read the locally stored kegs from the user config.

    The config lists them under `local`:

        local:
          - name: notes
            path: ~/kegs/notes

    Returns:
        Configured kegs in file order. Empty list if there is no config file.

    Raises:
        ConfigurationError: If the file is not valid YAML or an entry is malformed.
    """
    path = config_path or get_config_path()
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug("No keg config at %s", path)
        return []

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", {"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {path}", {"path": str(path)})

    locals_: list[Local] = []
    for item in data.get("local") or []:
        try:
            local = Local.model_validate(item)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid local keg entry in {path}: {item!r}",
                {"path": str(path)},
            ) from e
        locals_.append(local.model_copy(update={"path": local.path.expanduser()}))
    return locals_


def _discover_keg_root(start_dir: Path | None = None, max_depth: int = MAX_KEG_SEARCH_DEPTH) -> Path | None:
    """Walk up from start_dir looking for a directory holding the keg marker file."""
    current = Path(start_dir or os.getcwd()).resolve()

    for _ in range(max_depth):
        if (current / KEG_MARKER_FILE).is_file():
            return current

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None


def get_keg_root(name: str | None = None, start_dir: Path | None = None) -> Path:
    """Get the root directory of the keg to work with.

    Discovery order:
    1. A named local keg from the user config (when name is given)
    2. KEG_ROOT environment variable (explicit override)
    3. Walk up from cwd looking for a `keg` file
    4. Error with helpful message

    Raises:
        ConfigurationError: If no keg can be found.
    """
    if name:
        for local in get_local_kegs():
            if local.name == name:
                return local.path
        raise ConfigurationError(
            f"No local keg named '{name}' in {get_config_path()}",
            {"name": name},
            code=ErrorCode.KEG_NOT_FOUND,
        )

    root = os.environ.get("KEG_ROOT")
    if root:
        return Path(root)

    discovered = _discover_keg_root(start_dir)
    if discovered:
        return discovered

    raise ConfigurationError(
        "No keg found. Options:\n"
        "  1. Run keg from inside a keg directory (one holding a 'keg' file)\n"
        "  2. Set KEG_ROOT to an existing keg directory\n"
        f"  3. Add a named keg under 'local' in {get_config_path()} and pass --keg NAME",
        code=ErrorCode.KEG_NOT_FOUND,
    )


def get_dex_path(keg_root: Path) -> Path:
    """Return the nodes.tsv path for a keg root."""
    return keg_root / DEX_TSV_PATH
