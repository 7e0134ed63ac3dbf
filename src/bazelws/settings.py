"""Writer settings — reads .env + an optional TOML file to produce WriterSettings.

Marker file names, their default contents, the sentinel modification time
and the location of fresh workspaces are all configurable so the same
writer can target WORKSPACE- or MODULE-style layouts.

Key entities:
  - WriterSettings: frozen dataclass with all resolved writer config.
  - load_settings(): parse .env + [writer] table → WriterSettings.
  - get_settings(): load_settings() once per process; used when writers get none.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Env var naming the TOML file read when no explicit path is given
CONFIG_ENV = "BAZELWS_CONFIG"

# Env var overriding the parent directory of fresh workspaces
TMPDIR_ENV = "BAZELWS_TMPDIR"

# ---------------------------------------------------------------------------
# WriterSettings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WriterSettings:
    """Resolved configuration shared by every writer in a session."""

    # Markers
    workspace_marker: str = "WORKSPACE"
    build_marker: str = "BUILD.bazel"
    workspace_marker_content: str = "# Workspace Marker\n"
    build_marker_content: str = "# default package marker\n"

    # Sentinel mtime (Unix seconds) stamped on every written file
    fixed_mtime: float = 0.0

    # Fresh workspaces
    temp_dir: Path | None = None  # None → system temp dir
    temp_prefix: str = "bazelws-"


DEFAULT_SETTINGS = WriterSettings()

# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------

_FIELD_NAMES = {f.name for f in fields(WriterSettings)}


def load_settings(config_path: Path | None = None) -> WriterSettings:
    """Read .env + the ``[writer]`` table of a TOML file and return WriterSettings.

    Args:
        config_path: TOML file to read. Defaults to ``$BAZELWS_CONFIG``;
                     when neither is set only defaults and env vars apply.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the ``[writer]`` table contains unknown keys.
    """
    local_env = Path(".env")
    if local_env.is_file():
        load_dotenv(local_env)

    if config_path is None:
        env_path = os.getenv(CONFIG_ENV, "")
        config_path = Path(env_path) if env_path else None

    overrides: dict = {}
    if config_path is not None:
        if not config_path.is_file():
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
        overrides = _parse_writer_section(raw.get("writer", {}))
        logger.debug("Loaded writer settings from %s", config_path)

    tmpdir = os.getenv(TMPDIR_ENV, "")
    if tmpdir:
        overrides["temp_dir"] = Path(tmpdir).expanduser()

    return replace(DEFAULT_SETTINGS, **overrides)


def _parse_writer_section(section: dict) -> dict:
    """Validate the [writer] table and coerce values to field types."""
    unknown = sorted(set(section) - _FIELD_NAMES)
    if unknown:
        raise ValueError(f"Unknown [writer] settings: {', '.join(unknown)}")

    parsed: dict = {}
    for key, value in section.items():
        if key == "temp_dir":
            parsed[key] = Path(value).expanduser()
        elif key == "fixed_mtime":
            parsed[key] = float(value)
        else:
            parsed[key] = str(value)
    return parsed


@lru_cache(maxsize=1)
def get_settings() -> WriterSettings:
    """Process-wide settings from load_settings(); call ``cache_clear()`` to reload."""
    return load_settings()
