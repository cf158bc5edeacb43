"""Converter plugin that parses doc comments and attaches them to reflections.

Ownership of writes:

* creation hooks write a reflection's own ``comment`` (and visibility flags),
* ``RESOLVE_BEGIN`` writes module comments,
* ``RESOLVE`` is the only place signature-derived and parameter comments
  are written.
"""

from __future__ import annotations

import logging

from docreflect.comments.modules import ModuleCommentSelector
from docreflect.comments.parser import parse_comment
from docreflect.comments.reconcile import reconcile_signatures
from docreflect.converter.context import ConversionContext
from docreflect.converter.converter import Converter, ConverterPlugin
from docreflect.converter.events import ConverterEvent, Stage
from docreflect.models.comments import Comment
from docreflect.models.reflections import DeclarationReflection, Reflection, ReflectionFlag, ReflectionKind

log = logging.getLogger(__name__)

ACCESS_MODIFIERS = (
    ("private", ReflectionFlag.Private),
    ("protected", ReflectionFlag.Protected),
    ("public", ReflectionFlag.Public),
)


def apply_access_modifiers(reflection: Reflection, comment: Comment) -> None:
    """Turn ``@private``/``@protected``/``@public`` tags into reflection flags."""
    for tag_name, flag in ACCESS_MODIFIERS:
        if comment.has_tag(tag_name):
            reflection.set_flag(flag)
            comment.remove_tags(tag_name)


def extract_type_parameter_comment(type_parameter: Reflection) -> bool:
    """Move the parent's ``@param <name>`` tag onto *type_parameter*.

    The tag is consumed, so a second type parameter of the same name
    finds nothing.
    """
    parent = type_parameter.parent
    comment = parent.comment if parent is not None else None
    if comment is None:
        return False
    tag = comment.get_tag("param", type_parameter.name)
    if tag is None:
        return False
    type_parameter.comment = Comment(short_text=tag.text)
    comment.remove_tag(tag)
    return True


class CommentPlugin(ConverterPlugin):
    name = "comment"

    def __init__(self, converter: Converter):
        super().__init__(converter)
        converter.on(Stage.BEGIN, self.on_begin)
        converter.on(Stage.CREATE_DECLARATION, self.on_declaration)
        converter.on(Stage.CREATE_SIGNATURE, self.on_declaration)
        converter.on(Stage.CREATE_TYPE_PARAMETER, self.on_create_type_parameter)
        converter.on(Stage.FUNCTION_IMPLEMENTATION, self.on_function_implementation)
        converter.on(Stage.RESOLVE_BEGIN, self.on_resolve_begin)
        converter.on(Stage.RESOLVE, self.on_resolve)

    def on_begin(self, context: ConversionContext, event: ConverterEvent) -> None:
        context.module_comments = ModuleCommentSelector()

    def on_declaration(self, context: ConversionContext, event: ConverterEvent) -> None:
        raw = event.raw_comment
        reflection = event.reflection
        if not raw or reflection is None:
            return

        if reflection.kind_of(ReflectionKind.FunctionOrMethod):
            # The signatures carry the text; an existing comment is parsed
            # into but a new one is not stored.
            apply_access_modifiers(reflection, parse_comment(raw, reflection.comment))
        elif reflection.kind_of(ReflectionKind.Module):
            if context.module_comments is None:
                context.module_comments = ModuleCommentSelector()
            context.module_comments.record(raw, reflection)
        else:
            comment = parse_comment(raw, reflection.comment)
            apply_access_modifiers(reflection, comment)
            reflection.comment = comment

    def on_create_type_parameter(self, context: ConversionContext, event: ConverterEvent) -> None:
        if event.reflection is not None:
            extract_type_parameter_comment(event.reflection)

    def on_function_implementation(self, context: ConversionContext, event: ConverterEvent) -> None:
        if event.raw_comment and event.reflection is not None:
            event.reflection.comment = parse_comment(event.raw_comment, event.reflection.comment)

    def on_resolve_begin(self, context: ConversionContext, event: ConverterEvent) -> None:
        if context.module_comments is not None:
            context.module_comments.finalize()
        context.module_comments = None

    def on_resolve(self, context: ConversionContext, event: ConverterEvent) -> None:
        if isinstance(event.reflection, DeclarationReflection):
            reconcile_signatures(event.reflection)
