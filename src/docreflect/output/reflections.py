"""Flatten a reflection tree into JSON-ready dicts and text lines."""

from __future__ import annotations

from docreflect.models.reflections import (
    DeclarationReflection,
    Reflection,
    SignatureReflection,
    flag_names,
    kind_name,
    walk,
)
from docreflect.output.formatter import abbrev_kind, indent


def is_documented(reflection: Reflection) -> bool:
    if reflection.comment is not None and not reflection.comment.is_empty():
        return True
    if isinstance(reflection, SignatureReflection):
        return any(p.comment is not None for p in reflection.parameters)
    return False


def reflection_entry(reflection: Reflection) -> dict:
    entry = {
        "id": reflection.id,
        "name": reflection.full_name(),
        "kind": kind_name(reflection.kind),
        "flags": flag_names(reflection.flags),
        "comment": reflection.comment.to_dict() if reflection.comment is not None else None,
    }
    if isinstance(reflection, SignatureReflection):
        entry["parameters"] = [
            {
                "name": p.name,
                "flags": flag_names(p.flags),
                "comment": p.comment.short_text if p.comment is not None else None,
            }
            for p in reflection.parameters
        ]
    if isinstance(reflection, (DeclarationReflection, SignatureReflection)):
        entry["type_parameters"] = [
            {"name": tp.name, "comment": tp.comment.short_text if tp.comment is not None else None}
            for tp in reflection.type_parameters
        ]
    return entry


def collect_entries(root: Reflection, include_all: bool = False) -> list[dict]:
    """Entries for every declaration and signature below *root*, in tree order."""
    entries = []
    for reflection in walk(root):
        if not isinstance(reflection, (DeclarationReflection, SignatureReflection)):
            continue
        if include_all or is_documented(reflection):
            entries.append(reflection_entry(reflection))
    return entries


def _comment_lines(comment: dict) -> list[str]:
    lines = []
    if comment["short_text"]:
        lines.append(comment["short_text"])
    if comment["text"]:
        lines.append(comment["text"])
    if comment["returns"]:
        lines.append(f"returns: {comment['returns']}")
    for tag in comment["tags"]:
        label = f"@{tag['tag']}" + (f" {tag['param']}" if tag["param"] else "")
        lines.append(f"{label} {tag['text']}".rstrip())
    return lines


def format_entry(entry: dict) -> str:
    """Render one entry from :func:`reflection_entry` as indented text."""
    head = f"{abbrev_kind(entry['kind'])}  {entry['name']}"
    if entry["flags"]:
        head += f"  [{', '.join(entry['flags'])}]"
    out = [head]

    comment = entry.get("comment")
    if comment:
        body = _comment_lines(comment)
        if body:
            out.append(indent("\n".join(body), 2))

    for tp in entry.get("type_parameters", []):
        if tp["comment"]:
            out.append(indent(f"<{tp['name']}> {tp['comment']}", 2))
    for param in entry.get("parameters", []):
        if param["comment"]:
            out.append(indent(f"{param['name']}: {param['comment']}", 2))
    return "\n".join(out)
