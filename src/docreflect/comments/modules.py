"""Selection of one comment per merged module reflection.

A module can be declared in several places (merged declarations across
files, ``namespace A {}`` repeated in one file).  Each piece may carry
its own doc comment; only one of them documents the module.

Rules, applied as candidates arrive:

* text containing ``@preferred`` (any case) beats text without it,
* otherwise the longer text wins,
* ties keep the candidate seen first.

Candidates are held as raw text and only parsed in :meth:`finalize`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from docreflect.comments.parser import parse_comment
from docreflect.models.reflections import Reflection

log = logging.getLogger(__name__)

PREFERRED_MARKER = "@preferred"


@dataclass
class ModuleCommentCandidate:
    reflection: Reflection
    full_text: str
    is_preferred: bool


def is_preferred_text(raw_text: str) -> bool:
    return PREFERRED_MARKER in raw_text.lower()


def should_replace(stored: ModuleCommentCandidate, raw_text: str, is_preferred: bool) -> bool:
    if is_preferred:
        return True
    return not (stored.is_preferred or len(stored.full_text) >= len(raw_text))


class ModuleCommentSelector:
    """Per-conversion table of module comment candidates, keyed by reflection id."""

    def __init__(self):
        self._candidates: dict[int, ModuleCommentCandidate] = {}

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, reflection_id: int) -> bool:
        return reflection_id in self._candidates

    def get(self, reflection_id: int) -> ModuleCommentCandidate | None:
        return self._candidates.get(reflection_id)

    def record(self, raw_text: str, reflection: Reflection) -> bool:
        """Offer *raw_text* as the comment of *reflection*.

        Returns True when it became the retained candidate.
        """
        if not raw_text:
            return False
        preferred = is_preferred_text(raw_text)
        stored = self._candidates.get(reflection.id)

        if stored is None:
            self._candidates[reflection.id] = ModuleCommentCandidate(reflection, raw_text, preferred)
            return True

        if not should_replace(stored, raw_text, preferred):
            log.debug("Keeping stored comment for module %s", reflection.name)
            return False

        log.debug("Replacing comment for module %s (preferred=%s)", reflection.name, preferred)
        stored.full_text = raw_text
        stored.is_preferred = preferred
        return True

    def finalize(self) -> int:
        """Parse every retained candidate onto its reflection and empty the table.

        Returns the number of module comments assigned.
        """
        count = 0
        for candidate in self._candidates.values():
            comment = parse_comment(candidate.full_text)
            comment.remove_tags("preferred")
            candidate.reflection.comment = comment
            count += 1
        self._candidates.clear()
        log.debug("Assigned %d module comments", count)
        return count
