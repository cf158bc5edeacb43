"""State carried through one conversion run."""

from __future__ import annotations

from dataclasses import dataclass, field

from docreflect.comments.modules import ModuleCommentSelector
from docreflect.models.reflections import ProjectReflection


@dataclass
class ConversionContext:
    """Everything a stage handler may read or write during one run.

    ``module_comments`` exists between ``BEGIN`` and ``RESOLVE_BEGIN``
    only; nothing in it survives into the resolve pass or the next run.
    """

    project: ProjectReflection
    module_comments: ModuleCommentSelector | None = None
    files: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)
