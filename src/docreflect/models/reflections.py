"""Reflection tree: the typed model a conversion produces.

Every node gets a numeric ``id`` that is unique for the lifetime of the
process, so per-run tables can key on it safely.
"""

from __future__ import annotations

import itertools
from enum import IntFlag
from typing import Iterator

from docreflect.models.comments import Comment

_reflection_ids = itertools.count(1)


class ReflectionKind(IntFlag):
    Global = 0
    ExternalModule = 1
    Module = 2
    Enum = 4
    EnumMember = 16
    Variable = 32
    Function = 64
    Class = 128
    Interface = 256
    Constructor = 512
    Property = 1024
    Method = 2048
    CallSignature = 4096
    IndexSignature = 8192
    ConstructorSignature = 16384
    Parameter = 32768
    TypeLiteral = 65536
    TypeParameter = 131072
    Accessor = 262144
    GetSignature = 524288
    SetSignature = 1048576
    ObjectLiteral = 2097152
    TypeAlias = 4194304

    ClassOrInterface = Class | Interface
    VariableOrProperty = Variable | Property
    FunctionOrMethod = Function | Method
    SomeModule = Module | ExternalModule
    SomeSignature = CallSignature | IndexSignature | ConstructorSignature | GetSignature | SetSignature


class ReflectionFlag(IntFlag):
    NONE = 0
    Private = 1
    Protected = 2
    Public = 4
    Static = 8
    Exported = 16
    Optional = 32
    Rest = 64
    Abstract = 128
    Const = 256


# Display names for JSON/text output, lowest bit first.
KIND_NAMES = {
    ReflectionKind.ExternalModule: "file",
    ReflectionKind.Module: "module",
    ReflectionKind.Enum: "enum",
    ReflectionKind.EnumMember: "enum_member",
    ReflectionKind.Variable: "variable",
    ReflectionKind.Function: "function",
    ReflectionKind.Class: "class",
    ReflectionKind.Interface: "interface",
    ReflectionKind.Constructor: "constructor",
    ReflectionKind.Property: "property",
    ReflectionKind.Method: "method",
    ReflectionKind.CallSignature: "call_signature",
    ReflectionKind.ConstructorSignature: "constructor_signature",
    ReflectionKind.Parameter: "parameter",
    ReflectionKind.TypeParameter: "type_parameter",
    ReflectionKind.TypeAlias: "type_alias",
}


def kind_name(kind: ReflectionKind) -> str:
    return KIND_NAMES.get(kind, "global" if kind == ReflectionKind.Global else str(int(kind)))


def flag_names(flags: ReflectionFlag) -> list[str]:
    return [flag.name.lower() for flag in ReflectionFlag if flag and flags & flag]


class Reflection:
    """Base node of the reflection tree."""

    def __init__(self, name: str, kind: ReflectionKind, parent: Reflection | None = None):
        self.id: int = next(_reflection_ids)
        self.name = name
        self.kind = kind
        self.parent = parent
        self.comment: Comment | None = None
        self.flags = ReflectionFlag.NONE

    def kind_of(self, kind: ReflectionKind) -> bool:
        return bool(self.kind & kind)

    def set_flag(self, flag: ReflectionFlag, value: bool = True) -> None:
        if value:
            self.flags |= flag
        else:
            self.flags &= ~flag

    def has_flag(self, flag: ReflectionFlag) -> bool:
        return bool(self.flags & flag)

    def children_iter(self) -> Iterator[Reflection]:
        """Yield the reflections this node directly owns."""
        return iter(())

    def full_name(self) -> str:
        parts = []
        node: Reflection | None = self
        while node is not None and not isinstance(node, ProjectReflection):
            parts.append(node.name)
            node = node.parent
        return ".".join(reversed(parts))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} {kind_name(self.kind)} {self.name!r}>"


class ContainerReflection(Reflection):
    def __init__(self, name: str, kind: ReflectionKind, parent: Reflection | None = None):
        super().__init__(name, kind, parent)
        self.children: list[DeclarationReflection] = []

    def get_child(self, name: str, kind: ReflectionKind) -> DeclarationReflection | None:
        for child in self.children:
            if child.name == name and child.kind == kind:
                return child
        return None

    def children_iter(self) -> Iterator[Reflection]:
        yield from self.children


class TypeParameterReflection(Reflection):
    def __init__(self, name: str, parent: Reflection | None = None):
        super().__init__(name, ReflectionKind.TypeParameter, parent)


class ParameterReflection(Reflection):
    def __init__(self, name: str, parent: Reflection | None = None):
        super().__init__(name, ReflectionKind.Parameter, parent)


class SignatureReflection(Reflection):
    """One call signature (overload) of a function, method or constructor."""

    def __init__(self, name: str, kind: ReflectionKind, parent: Reflection | None = None):
        super().__init__(name, kind, parent)
        self.parameters: list[ParameterReflection] = []
        self.type_parameters: list[TypeParameterReflection] = []

    def children_iter(self) -> Iterator[Reflection]:
        yield from self.type_parameters
        yield from self.parameters


class DeclarationReflection(ContainerReflection):
    """A named declaration: module, class, function, variable, ..."""

    def __init__(self, name: str, kind: ReflectionKind, parent: Reflection | None = None):
        super().__init__(name, kind, parent)
        self.signatures: list[SignatureReflection] = []
        self.type_parameters: list[TypeParameterReflection] = []

    def get_all_signatures(self) -> list[SignatureReflection]:
        return list(self.signatures)

    def children_iter(self) -> Iterator[Reflection]:
        yield from self.type_parameters
        yield from self.signatures
        yield from self.children


class ProjectReflection(ContainerReflection):
    """Root of a conversion; keeps an id -> reflection registry."""

    def __init__(self, name: str = "project"):
        super().__init__(name, ReflectionKind.Global)
        self.reflections: dict[int, Reflection] = {}

    def register(self, reflection: Reflection) -> Reflection:
        self.reflections[reflection.id] = reflection
        return reflection

    def iter_reflections(self) -> Iterator[Reflection]:
        """Registered reflections in creation (id) order."""
        for reflection_id in sorted(self.reflections):
            yield self.reflections[reflection_id]


def walk(reflection: Reflection) -> Iterator[Reflection]:
    """Depth-first, pre-order traversal starting at *reflection*."""
    yield reflection
    for child in reflection.children_iter():
        yield from walk(child)
