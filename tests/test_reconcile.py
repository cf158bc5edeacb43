"""Tests for pushing declaration comments down to signatures and parameters."""

from __future__ import annotations

from docreflect.comments.parser import parse_comment
from docreflect.comments.reconcile import move_returns_tag, reconcile_signatures
from docreflect.models.comments import Comment, CommentTag
from docreflect.models.reflections import (
    DeclarationReflection,
    ParameterReflection,
    ReflectionKind,
    SignatureReflection,
)


def _function(comment=None, signature_comments=(None,), parameters=()):
    declaration = DeclarationReflection("fn", ReflectionKind.Function)
    declaration.comment = comment
    for sig_comment in signature_comments:
        signature = SignatureReflection("fn", ReflectionKind.CallSignature, declaration)
        signature.comment = sig_comment
        for name in parameters:
            signature.parameters.append(ParameterReflection(name, signature))
        declaration.signatures.append(signature)
    return declaration


def test_move_returns_tag():
    comment = parse_comment("/**\n * @returns the sum\n */")
    move_returns_tag(comment)
    assert comment.returns == "the sum"
    assert not comment.has_tag("returns")


def test_move_returns_tag_accepts_none():
    move_returns_tag(None)


def test_no_signatures_is_a_no_op():
    declaration = DeclarationReflection("Thing", ReflectionKind.Class)
    declaration.comment = parse_comment("/**\n * @param x unused\n */")
    assert reconcile_signatures(declaration) is False
    assert declaration.comment.has_tag("param")


def test_returns_fall_back_to_declaration():
    declaration = _function(
        comment=Comment(tags=[CommentTag("returns", "", "R")]),
        signature_comments=(Comment(tags=[CommentTag("returns", "", "S")]), None),
    )
    assert reconcile_signatures(declaration) is True

    first, second = declaration.signatures
    assert first.comment.returns == "S"
    assert second.comment.returns == "R"
    assert declaration.comment.returns == "R"
    assert not declaration.comment.has_tag("returns")


def test_signature_text_wins_over_declaration_text():
    declaration = _function(
        comment=Comment(short_text="decl short", text="decl long"),
        signature_comments=(Comment(short_text="sig short"), None),
    )
    reconcile_signatures(declaration)

    first, second = declaration.signatures
    assert first.comment.short_text == "sig short"
    assert first.comment.text == "decl long"
    assert second.comment.short_text == "decl short"
    assert second.comment.text == "decl long"


def test_signature_level_param_wins():
    declaration = _function(
        comment=Comment(tags=[CommentTag("param", "x", "decl-level")]),
        signature_comments=(Comment(tags=[CommentTag("param", "x", "sig-level")]),),
        parameters=("x",),
    )
    reconcile_signatures(declaration)
    assert declaration.signatures[0].parameters[0].comment.short_text == "sig-level"


def test_declaration_param_used_when_signature_is_silent():
    declaration = _function(
        comment=Comment(tags=[CommentTag("param", "a", "first"), CommentTag("param", "b", "second")]),
        signature_comments=(None,),
        parameters=("a", "b", "c"),
    )
    reconcile_signatures(declaration)

    params = declaration.signatures[0].parameters
    assert [p.comment.short_text if p.comment else None for p in params] == ["first", "second", None]


def test_param_tags_are_removed_everywhere():
    declaration = _function(
        comment=Comment(tags=[CommentTag("param", "x", "decl"), CommentTag("param", "ghost", "nobody")]),
        signature_comments=(Comment(tags=[CommentTag("param", "x", "sig"), CommentTag("since", "", "1.0")]),),
        parameters=("x",),
    )
    reconcile_signatures(declaration)

    assert not declaration.comment.has_tag("param")
    signature_comment = declaration.signatures[0].comment
    assert not signature_comment.has_tag("param")
    assert [t.tag_name for t in signature_comment.tags] == ["since"]


def test_signature_without_any_comment_stays_uncommented():
    declaration = _function(comment=None, signature_comments=(None,), parameters=("x",))
    reconcile_signatures(declaration)
    assert declaration.signatures[0].comment is None
    assert declaration.signatures[0].parameters[0].comment is None
