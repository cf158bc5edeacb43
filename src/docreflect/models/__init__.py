"""Comment and reflection data model."""

from docreflect.models.comments import Comment, CommentTag
from docreflect.models.reflections import (
    ContainerReflection,
    DeclarationReflection,
    ParameterReflection,
    ProjectReflection,
    Reflection,
    ReflectionFlag,
    ReflectionKind,
    SignatureReflection,
    TypeParameterReflection,
    flag_names,
    kind_name,
    walk,
)

__all__ = [
    "Comment",
    "CommentTag",
    "ContainerReflection",
    "DeclarationReflection",
    "ParameterReflection",
    "ProjectReflection",
    "Reflection",
    "ReflectionFlag",
    "ReflectionKind",
    "SignatureReflection",
    "TypeParameterReflection",
    "flag_names",
    "kind_name",
    "walk",
]
