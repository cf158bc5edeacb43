"""Source file discovery using git ls-files with fallback to os.walk."""

from __future__ import annotations

import fnmatch
import os
import subprocess
from pathlib import Path

from docreflect.languages.registry import get_language_for_file

# Directories to skip during os.walk fallback
SKIP_DIRS = frozenset({
    ".git", ".hg", ".svn", "node_modules", "__pycache__",
    "venv", ".venv", "dist", "build", "out", "coverage",
    ".docreflect",
})

MAX_FILE_SIZE = 2_000_000  # 2MB


def _git_ls_files(root: Path) -> list[str] | None:
    """Try to list files using git ls-files. Returns None if git unavailable."""
    try:
        result = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard"],
            cwd=str(root),
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode != 0:
            return None
        return [p.strip() for p in result.stdout.splitlines() if p.strip()]
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def _walk_files(root: Path) -> list[str]:
    """Fallback file discovery using os.walk, respecting common ignore dirs."""
    result = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS and not d.startswith(".")]
        for fname in filenames:
            full = os.path.join(dirpath, fname)
            try:
                rel = os.path.relpath(full, root).replace("\\", "/")
            except (ValueError, OSError):
                continue
            result.append(rel)
    return result


def is_excluded(rel_path: str, patterns: list[str]) -> bool:
    name = rel_path.rsplit("/", 1)[-1]
    return any(fnmatch.fnmatch(rel_path, p) or fnmatch.fnmatch(name, p) for p in patterns)


def _keep(rel_path: str, root: Path, patterns: list[str]) -> bool:
    if get_language_for_file(rel_path) is None:
        return False
    if set(rel_path.split("/")) & SKIP_DIRS:
        return False
    if is_excluded(rel_path, patterns):
        return False
    try:
        return (root / rel_path).stat().st_size <= MAX_FILE_SIZE
    except OSError:
        return False


def discover_files(root: Path, exclude: list[str] | None = None) -> list[str]:
    """Discover TypeScript sources below *root*.

    Uses git ls-files when available, falls back to os.walk.
    Returns a sorted list of relative paths using forward slashes.
    """
    root = Path(root).resolve()
    raw = _git_ls_files(root)
    if raw is None:
        raw = _walk_files(root)
    raw = [p.replace("\\", "/") for p in raw]
    patterns = exclude or []
    return sorted(p for p in raw if _keep(p, root, patterns))


def expand_paths(paths: list[str], exclude: list[str] | None = None) -> list[Path]:
    """Expand CLI path arguments: files are kept as given, directories are discovered."""
    result: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            result.extend(path / rel for rel in discover_files(path, exclude))
        elif path.is_file() and get_language_for_file(str(path)) is not None:
            result.append(path)
    return result
