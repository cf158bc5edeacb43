"""Text and JSON rendering shared by the commands."""

from __future__ import annotations

import json
from datetime import datetime, timezone

ENVELOPE_SCHEMA_NAME = "docreflect-envelope-v1"
ENVELOPE_SCHEMA_VERSION = "1.0.0"

# Short labels for the text listing, keyed by ``kind_name`` output.
_KIND_LABELS = {
    "file": "file",
    "module": "ns",
    "function": "fn",
    "class": "cls",
    "method": "meth",
    "variable": "var",
    "interface": "iface",
    "enum": "enum",
    "enum_member": "member",
    "type_alias": "type",
    "property": "prop",
    "constructor": "ctor",
    "call_signature": "sig",
    "constructor_signature": "sig",
    "parameter": "param",
    "type_parameter": "tparam",
}


def abbrev_kind(kind: str) -> str:
    return _KIND_LABELS.get(kind, kind)


def indent(text: str, level: int = 1) -> str:
    pad = "  " * level
    return "\n".join(f"{pad}{line}" for line in text.splitlines())


def bullet_list(title: str, items: list[str]) -> str:
    return "\n".join([title, *(f"  {item}" for item in items)])


def to_json(data) -> str:
    """Pretty JSON with sorted keys, so equal results serialize identically."""
    return json.dumps(data, indent=2, sort_keys=True, default=str)


def _timestamp() -> str:
    now = datetime.now(timezone.utc).replace(microsecond=0)
    return now.isoformat().replace("+00:00", "Z")


def json_envelope(command: str, summary: dict | None = None, **payload) -> dict:
    """Wrap a command result for ``--json`` output.

    Every envelope carries ``schema``, ``schema_version``, ``command``,
    ``version`` and ``summary``; *payload* keys sit beside them.  The
    timestamp goes under ``_meta`` so two runs over the same sources
    differ only there.
    """
    from docreflect import __version__

    envelope = {
        "schema": ENVELOPE_SCHEMA_NAME,
        "schema_version": ENVELOPE_SCHEMA_VERSION,
        "command": command,
        "version": __version__,
        "summary": dict(summary or {}),
        **payload,
    }
    envelope["_meta"] = {"timestamp": _timestamp()}
    return envelope
