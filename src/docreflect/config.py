"""Project root detection and per-project configuration (.docreflect/config.json)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)

CONFIG_DIR = ".docreflect"
CONFIG_NAME = "config.json"


def find_project_root(start: str = ".") -> Path:
    """Find the project root by looking for .git directory."""
    current = Path(start).resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent
    return Path(start).resolve()


def get_config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR / CONFIG_NAME


def load_project_config(project_root: Path) -> dict:
    """Load .docreflect/config.json if it exists.

    Returns an empty dict if the file is missing or malformed.
    """
    config_path = get_config_path(project_root)
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring config %s: top level must be an object", config_path)
        return {}
    return data


def write_project_config(config: dict, project_root: Path | None = None) -> Path:
    """Write (or update) .docreflect/config.json.

    Merges *config* into the existing config so existing keys are preserved.
    Returns the path of the written file.
    """
    if project_root is None:
        project_root = find_project_root()
    config_dir = project_root / CONFIG_DIR
    config_dir.mkdir(exist_ok=True)
    config_path = config_dir / CONFIG_NAME
    existing = load_project_config(project_root)
    existing.update(config)
    config_path.write_text(json.dumps(existing, indent=2), encoding="utf-8")
    return config_path


def get_exclude_patterns(project_root: Path) -> list[str]:
    patterns = load_project_config(project_root).get("exclude", [])
    return [p for p in patterns if isinstance(p, str) and p.strip()]
