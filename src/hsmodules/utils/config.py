"""
Configuration constants and the workspace configuration snapshot.
"""

import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern

import yaml

from ..shared.errors import ConfigError

logger = logging.getLogger(__name__)

# Haskell source constants
HASKELL_FILE_EXTENSION = ".hs"
HASKELL_FILE_GLOB = "*.hs"
MODULE_SEPARATOR = "."
MAIN_MODULE_NAME = "Main"

# Hydration defaults
DEFAULT_HYDRATE_PREFIX = "Q"
HYDRATED_ALIAS_SEPARATOR = "_"

# Build output directories are never part of the namespace
DEFAULT_EXCLUDES = [r"(^|/)(dist-newstyle|\.stack-work|dist)/"]

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "hsmodules_import_line.cache")

# Workspace configuration file, looked up at the workspace root
CONFIG_FILE_NAME = ".hsmodules.yml"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"


_PREFIX_RE = re.compile(r"^[A-Z][A-Za-z0-9_']*$")


@dataclass(frozen=True)
class Config:
    """
    Read-only configuration snapshot.

    Reloaded wholesale (see load_config); never mutated in place.
    """
    hydrate_prefix: str = DEFAULT_HYDRATE_PREFIX
    excludes: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    reveal_focused: bool = True

    @property
    def excludes_regexp(self) -> Optional[Pattern[str]]:
        if not self.excludes:
            return None
        return re.compile("|".join(f"(?:{pattern})" for pattern in self.excludes))

    def is_excluded(self, path: Path) -> bool:
        regexp = self.excludes_regexp
        return bool(regexp and regexp.search(path.as_posix()))


def _validate(raw: Dict[str, Any], source: Path) -> Config:
    known = {"hydrate_prefix", "excludes", "reveal_focused"}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {source}: {', '.join(unknown)}")

    prefix = raw.get("hydrate_prefix", DEFAULT_HYDRATE_PREFIX)
    if not isinstance(prefix, str) or not _PREFIX_RE.match(prefix):
        raise ConfigError(
            f"hydrate_prefix must be a capitalized Haskell identifier, got {prefix!r} in {source}"
        )

    excludes = raw.get("excludes", DEFAULT_EXCLUDES)
    if isinstance(excludes, str):
        excludes = [excludes]
    if not isinstance(excludes, list) or not all(isinstance(e, str) for e in excludes):
        raise ConfigError(f"excludes must be a list of regular expressions in {source}")
    for pattern in excludes:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Invalid exclude pattern {pattern!r} in {source}: {e}") from e

    reveal_focused = raw.get("reveal_focused", True)
    if not isinstance(reveal_focused, bool):
        raise ConfigError(f"reveal_focused must be true or false in {source}")

    return Config(hydrate_prefix=prefix, excludes=list(excludes), reveal_focused=reveal_focused)


def load_config(root: Path, config_file: Optional[Path] = None) -> Config:
    """
    Load the configuration snapshot for a workspace.

    Reads ``.hsmodules.yml`` at ``root`` (or ``config_file`` when given).
    A missing file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    path = config_file if config_file is not None else Path(root) / CONFIG_FILE_NAME
    if not path.is_file():
        if config_file is not None:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug(f"No config file at {path}, using defaults")
        return Config()

    logger.debug(f"Loading config from {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding=DEFAULT_FILE_ENCODING))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a mapping at the top level of {path}")
    return _validate(raw, path)
