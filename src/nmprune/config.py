"""Configuration loading and validation for nmprune."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional

from nmprune.errors import ConfigError, RootNotFoundError
from nmprune.matcher import normalize_path
from nmprune.models import DEFAULT_TARGET_NAME, ScanConfig

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NMPRUNE_CONFIG"
CONFIG_DIR = Path("~/.nmprune").expanduser()
CONFIG_FILE = CONFIG_DIR / "config.json"


def get_config_file() -> Path:
    """Settings file location, overridable with $NMPRUNE_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else CONFIG_FILE


def load_settings(path: Optional[Path] = None) -> dict[str, Any]:
    """
    Load user defaults from the JSON settings file.

    Recognized keys: ``exclude`` (list of paths), ``target_name`` and
    ``jobs``. A missing file gives empty settings; an unreadable or
    malformed one is logged and ignored.
    """
    path = path or get_config_file()
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring settings file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        log.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}

    settings: dict[str, Any] = {}

    exclude = data.get("exclude", [])
    if isinstance(exclude, list) and all(isinstance(p, str) for p in exclude):
        settings["exclude"] = exclude
    else:
        log.warning("Ignoring 'exclude' in %s: expected a list of paths", path)

    if isinstance(data.get("target_name"), str):
        settings["target_name"] = data["target_name"]
    if isinstance(data.get("jobs"), int) and not isinstance(data.get("jobs"), bool):
        settings["jobs"] = data["jobs"]

    return settings


def split_exclude(values: Iterable[str]) -> list[str]:
    """Flatten comma-separated exclude values, dropping empty items."""
    paths: list[str] = []
    for value in values:
        paths.extend(part.strip() for part in value.split(",") if part.strip())
    return paths


def validate_target_name(name: str) -> str:
    """Reject names that could never equal a single path component."""
    if not name:
        raise ConfigError("Target name must not be empty")
    if name in (".", "..") or "/" in name or os.sep in name:
        raise ConfigError(f"Target name must be a single directory name, got {name!r}")
    return name


def build_config(
    root: str | Path = ".",
    target_name: Optional[str] = None,
    max_depth: Optional[int] = None,
    exclude: Iterable[str] = (),
    dry_run: bool = False,
    verbose: bool = False,
    jobs: Optional[int] = None,
    settings: Optional[dict[str, Any]] = None,
) -> ScanConfig:
    """
    Resolve and validate everything a scan needs.

    Explicit arguments win over the settings file; settings excludes are
    added to the explicit ones.

    Args:
        root: Directory to scan
        target_name: Directory name to match (default: node_modules)
        max_depth: Maximum traversal depth, None for unbounded
        exclude: Paths to skip, each value may be comma-separated
        dry_run: Report without deleting
        verbose: Verbose output
        jobs: Worker pool size
        settings: Pre-loaded settings, loaded from disk when None

    Returns:
        Frozen ScanConfig

    Raises:
        ConfigError: If any value is invalid or the root is not a directory
    """
    if settings is None:
        settings = load_settings()

    if target_name is None:
        target_name = settings.get("target_name") or DEFAULT_TARGET_NAME
    name = validate_target_name(target_name)

    if max_depth is not None and max_depth < 0:
        raise ConfigError(f"Depth must be 0 or greater, got {max_depth}")

    jobs = jobs if jobs is not None else settings.get("jobs")
    if jobs is not None and jobs < 1:
        raise ConfigError(f"Jobs must be 1 or greater, got {jobs}")

    root_path = normalize_path(root)
    if not root_path.exists():
        raise RootNotFoundError(root_path)
    if not root_path.is_dir():
        raise RootNotFoundError(root_path, "is not a directory")

    exclude_paths = frozenset(
        normalize_path(p) for p in split_exclude([*exclude, *settings.get("exclude", [])])
    )
    for path in exclude_paths:
        if not path.exists():
            log.info("Exclude path %s does not exist", path)

    return ScanConfig(
        root=root_path,
        target_name=name,
        max_depth=max_depth,
        exclude_paths=exclude_paths,
        dry_run=dry_run,
        verbose=verbose,
        jobs=jobs,
    )
