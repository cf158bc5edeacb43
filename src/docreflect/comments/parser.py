"""Doc comment tokenizer.

Turns the raw text of a ``/** ... */`` block into a :class:`Comment`:

* the first paragraph becomes ``short_text``,
* everything after the first blank line becomes ``text``, with later
  blank lines kept as paragraph breaks,
* ``@tag`` lines start a tag; following non-tag lines continue it.

Parsing is total: any input produces a (possibly empty) Comment.

Each line goes through :func:`classify_line`, which returns one of a
small set of line classes; :func:`advance_phase` moves the short/long
text state machine forward.  Both are usable on their own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from docreflect.models.comments import Comment, CommentTag

_OPEN_RE = re.compile(r"^\s*/\*+")
_CLOSE_RE = re.compile(r"\*+/\s*$")
_LINE_SPLIT_RE = re.compile(r"\r\n?|\n")
# Leading decoration: whitespace, one optional "*", one optional space.
_GUTTER_RE = re.compile(r"^\s*\*? ?")
_TAG_RE = re.compile(r"^@(\w+)")
_BRACE_TYPE_RE = re.compile(r"^\{[^}]*\}")
_BRACKET_TYPE_RE = re.compile(r"^\[[^\]]*\]")
_TOKEN_RE = re.compile(r"\S+")


class TextPhase(Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    SWITCHED = "switched"


@dataclass(frozen=True)
class TagStart:
    tag_name: str
    param_name: str
    text: str


@dataclass(frozen=True)
class TagContinuation:
    text: str


@dataclass(frozen=True)
class ShortTextLine:
    text: str


@dataclass(frozen=True)
class LongTextLine:
    text: str


@dataclass(frozen=True)
class BlankLine:
    pass


LineClass = TagStart | TagContinuation | ShortTextLine | LongTextLine | BlankLine


def strip_type_annotation(text: str) -> str:
    """Drop a leading ``{type}`` and/or ``[type]`` annotation.

    A ``[type]`` is only dropped when it is first or directly follows the
    ``{type}``; ``{a} [b]`` keeps ``[b]``.
    """
    text = _BRACE_TYPE_RE.sub("", text.strip(), count=1)
    text = _BRACKET_TYPE_RE.sub("", text, count=1)
    return text.strip()


def normalize_tag_name(name: str) -> str:
    name = name.lower()
    if name == "return":
        return "returns"
    return name


def _tag_start(match: re.Match[str], line: str) -> TagStart:
    tag_name = normalize_tag_name(match.group(1))
    rest = line[match.end():].strip()
    param_name = ""

    if tag_name == "param":
        rest = strip_type_annotation(rest)
        token = _TOKEN_RE.match(rest)
        if token:
            param_name = token.group(0)
            rest = rest[len(param_name) + 1:].strip()
        rest = strip_type_annotation(rest)
    elif tag_name == "returns":
        rest = strip_type_annotation(rest)

    return TagStart(tag_name, param_name, rest)


def classify_line(line: str, phase: TextPhase, tag_open: bool) -> LineClass:
    """Classify one gutter-stripped line.

    *phase* is the current short/long text phase and *tag_open* tells
    whether an earlier line started a tag in the same comment.
    """
    match = _TAG_RE.match(line)
    if match:
        return _tag_start(match, line)
    if tag_open:
        return TagContinuation(line)
    if line == "":
        return BlankLine()
    if phase is TextPhase.SWITCHED:
        return LongTextLine(line)
    return ShortTextLine(line)


def advance_phase(phase: TextPhase, line_class: LineClass) -> TextPhase:
    if isinstance(line_class, ShortTextLine):
        return TextPhase.ACCUMULATING
    if isinstance(line_class, BlankLine) and phase is TextPhase.ACCUMULATING:
        return TextPhase.SWITCHED
    return phase


def comment_lines(text: str) -> list[str]:
    """Strip the block markers and per-line gutter from raw comment text."""
    text = _OPEN_RE.sub("", text, count=1)
    text = _CLOSE_RE.sub("", text, count=1)
    return [_GUTTER_RE.sub("", line, count=1).rstrip() for line in _LINE_SPLIT_RE.split(text)]


def _append_line(existing: str, line: str) -> str:
    if existing == "":
        return line
    return existing + "\n" + line


def _close_tag(tag: CommentTag | None) -> None:
    # Blank continuation lines before the closing marker are not content.
    if tag is not None:
        tag.text = tag.text.rstrip("\n")


def parse_comment(text: str | None, comment: Comment | None = None) -> Comment:
    """Parse raw doc comment *text*.

    When *comment* is given the parsed text and tags are appended to it
    instead of a fresh Comment; this is how an implementation's comment
    is merged into one its overloads already populated.
    """
    if comment is None:
        comment = Comment()
    if not text:
        return comment

    phase = TextPhase.EMPTY
    current_tag: CommentTag | None = None

    for line in comment_lines(text):
        line_class = classify_line(line, phase, current_tag is not None)

        if isinstance(line_class, TagStart):
            _close_tag(current_tag)
            current_tag = CommentTag(line_class.tag_name, line_class.param_name, line_class.text)
            comment.tags.append(current_tag)
        elif isinstance(line_class, TagContinuation):
            current_tag.text += "\n" + line_class.text
        elif isinstance(line_class, ShortTextLine):
            comment.short_text = _append_line(comment.short_text, line_class.text)
        elif isinstance(line_class, LongTextLine):
            comment.text = _append_line(comment.text, line_class.text)
        elif isinstance(line_class, BlankLine) and phase is TextPhase.SWITCHED and comment.text:
            # Paragraph break inside the long description.
            comment.text += "\n"

        phase = advance_phase(phase, line_class)

    _close_tag(current_tag)
    comment.text = comment.text.rstrip("\n")
    return comment
