"""Propagation of a declaration's comment onto its signatures and parameters.

Runs once per declaration during the resolve pass, when every signature
and parameter of the tree already exists.
"""

from __future__ import annotations

import logging

from docreflect.models.comments import Comment
from docreflect.models.reflections import DeclarationReflection, SignatureReflection

log = logging.getLogger(__name__)


def move_returns_tag(comment: Comment | None) -> None:
    """Move the ``@returns`` tag text into ``comment.returns``."""
    if comment is None:
        return
    tag = comment.get_tag("returns")
    if tag is not None:
        comment.returns = tag.text
        comment.remove_tags("returns")


def _resolve_parameters(signature: SignatureReflection, comment: Comment | None) -> None:
    own = signature.comment
    for parameter in signature.parameters:
        tag = None
        if own is not None:
            tag = own.get_tag("param", parameter.name)
        if tag is None and comment is not None:
            tag = comment.get_tag("param", parameter.name)
        if tag is not None:
            parameter.comment = Comment(short_text=tag.text)


def reconcile_signatures(declaration: DeclarationReflection) -> bool:
    """Push returns, descriptions and ``@param`` docs down to the signatures.

    Signature-level text always wins over declaration-level text; a
    parameter gets the single most specific ``@param`` match.  Any
    ``@param`` tag left over afterwards is dropped.

    Returns False when *declaration* has no signatures.
    """
    signatures = declaration.get_all_signatures()
    if not signatures:
        return False

    comment = declaration.comment
    move_returns_tag(comment)

    for signature in signatures:
        move_returns_tag(signature.comment)

        if comment is not None:
            if signature.comment is None:
                signature.comment = Comment()
            child = signature.comment
            child.short_text = child.short_text or comment.short_text
            child.text = child.text or comment.text
            child.returns = child.returns or comment.returns

        _resolve_parameters(signature, comment)

        if signature.comment is not None:
            signature.comment.remove_tags("param")

    if comment is not None:
        comment.remove_tags("param")

    log.debug("Reconciled %d signatures of %s", len(signatures), declaration.name)
    return True
