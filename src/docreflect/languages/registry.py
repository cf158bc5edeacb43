"""Language detection, grammar loading, and walker registry."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import SourceWalker

EXTENSION_MAP: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

SUPPORTED_LANGUAGES = frozenset(EXTENSION_MAP.values())


def get_language_for_file(path: str) -> str | None:
    """Determine the language for a file based on its extension.

    Returns the language name string, or None if unsupported.
    """
    _, ext = os.path.splitext(path)
    return EXTENSION_MAP.get(ext.lower())


@lru_cache(maxsize=None)
def get_parser(language: str):
    """Get a cached tree-sitter Parser for *language*."""
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {language}")

    from tree_sitter_language_pack import get_parser as _get_parser

    return _get_parser(language)


@lru_cache(maxsize=None)
def get_walker(language: str) -> SourceWalker | None:
    """Get the source walker instance for a language (cached)."""
    if language in ("typescript", "tsx"):
        from .typescript_lang import TypeScriptWalker

        return TypeScriptWalker(language)
    return None
