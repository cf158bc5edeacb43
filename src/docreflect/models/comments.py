"""Parsed documentation comments and their tags."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class CommentTag:
    """A single ``@tag`` found in a doc comment.

    ``tag_name`` is lowercased (``return`` is stored as ``returns``);
    ``param_name`` is only filled for ``@param`` tags.
    """

    tag_name: str
    param_name: str = ""
    text: str = ""

    def to_dict(self) -> dict:
        return {
            "tag": self.tag_name,
            "param": self.param_name,
            "text": self.text,
        }


@dataclass(eq=False)
class Comment:
    """Structured form of a doc comment attached to a reflection."""

    short_text: str = ""
    text: str = ""
    returns: str = ""
    tags: list[CommentTag] = field(default_factory=list)

    def has_tag(self, tag_name: str) -> bool:
        return any(tag.tag_name == tag_name for tag in self.tags)

    def get_tag(self, tag_name: str, param_name: str | None = None) -> CommentTag | None:
        """Return the first tag named *tag_name*.

        When *param_name* is given the tag must also document that parameter.
        """
        for tag in self.tags:
            if tag.tag_name != tag_name:
                continue
            if param_name is None or tag.param_name == param_name:
                return tag
        return None

    def remove_tags(self, tag_name: str) -> int:
        """Drop every tag named *tag_name*; return how many were removed."""
        kept = [tag for tag in self.tags if tag.tag_name != tag_name]
        removed = len(self.tags) - len(kept)
        self.tags[:] = kept
        return removed

    def remove_tag(self, tag: CommentTag) -> None:
        """Drop exactly *tag* (by identity), leaving same-named siblings alone."""
        for i, candidate in enumerate(self.tags):
            if candidate is tag:
                del self.tags[i]
                return

    def is_empty(self) -> bool:
        return not (self.short_text or self.text or self.returns or self.tags)

    def to_dict(self) -> dict:
        return {
            "short_text": self.short_text,
            "text": self.text,
            "returns": self.returns,
            "tags": [tag.to_dict() for tag in self.tags],
        }
