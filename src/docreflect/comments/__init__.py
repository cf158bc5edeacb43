"""Doc comment parsing, module comment selection and signature reconciliation."""

from docreflect.comments.modules import ModuleCommentCandidate, ModuleCommentSelector, is_preferred_text
from docreflect.comments.parser import classify_line, parse_comment
from docreflect.comments.reconcile import reconcile_signatures

__all__ = [
    "ModuleCommentCandidate",
    "ModuleCommentSelector",
    "classify_line",
    "is_preferred_text",
    "parse_comment",
    "reconcile_signatures",
]
