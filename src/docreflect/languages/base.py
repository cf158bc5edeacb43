from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docreflect.converter.context import ConversionContext
    from docreflect.converter.converter import Converter
    from docreflect.models.reflections import Reflection


class SourceWalker(ABC):
    """Base class for language-specific reflection builders."""

    @property
    @abstractmethod
    def language_name(self) -> str: ...

    @property
    @abstractmethod
    def file_extensions(self) -> list[str]: ...

    @abstractmethod
    def walk(self, tree, source: bytes, file_name: str, converter: Converter, context: ConversionContext) -> Reflection:
        """Build reflections for one parsed file through *converter*'s factories.

        Returns the file-level reflection.
        """
        ...

    @abstractmethod
    def get_comment(self, node, source: bytes) -> str | None:
        """Raw doc comment text documenting *node*, or None."""
        ...

    def node_text(self, node, source: bytes) -> str:
        if node is None:
            return ""
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
