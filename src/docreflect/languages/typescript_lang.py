"""TypeScript source walker.

Builds reflections from a tree-sitter TypeScript tree and hands every raw
doc comment to the converter stages.  Comment lookup follows three rules:

* a declaration's comment is the last ``/** */`` block directly before
  its statement; declarators, ``export``/``declare`` wrappers and
  expression statements defer to the enclosing statement,
* a chained namespace (``namespace A.B {}``) has one comment, owned by
  the innermost segment,
* a file's own comment is its first leading doc comment, and only when
  a second one follows (a lone leading comment documents the first
  statement).
"""

from __future__ import annotations

import re
from pathlib import PurePath

from docreflect.models.reflections import ReflectionFlag, ReflectionKind

from .base import SourceWalker

# Statement nodes whose comment belongs to the node they wrap.
_WRAPPER_TYPES = frozenset({
    "export_statement",
    "ambient_declaration",
    "expression_statement",
    "lexical_declaration",
    "variable_declaration",
})
_MODULE_TYPES = frozenset({"internal_module", "module"})
_FUNCTION_TYPES = frozenset({"function_declaration", "generator_function_declaration", "function_signature"})
_CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})
_VARIABLE_TYPES = frozenset({"lexical_declaration", "variable_declaration"})
_DECLARATION_TYPES = (
    _MODULE_TYPES
    | _FUNCTION_TYPES
    | _CLASS_TYPES
    | _VARIABLE_TYPES
    | {"interface_declaration", "enum_declaration", "type_alias_declaration"}
)
_METHOD_TYPES = frozenset({"method_definition", "method_signature", "abstract_method_signature"})
_PROPERTY_TYPES = frozenset({"public_field_definition", "field_definition", "property_signature"})
# Callables declared without a body: overload signatures and ambient declarations.
_BODYLESS_TYPES = frozenset({"function_signature", "method_signature", "abstract_method_signature"})
_FUNCTION_VALUE_TYPES = frozenset({"arrow_function", "function_expression", "function"})

_ACCESSIBILITY = {
    "private": ReflectionFlag.Private,
    "protected": ReflectionFlag.Protected,
    "public": ReflectionFlag.Public,
}

_SOURCE_SUFFIX_RE = re.compile(r"(\.d)?\.[cm]?tsx?$")


def is_doc_comment(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/**/")


def module_name_for_file(file_name: str) -> str:
    return _SOURCE_SUFFIX_RE.sub("", PurePath(file_name).name) or file_name


class TypeScriptWalker(SourceWalker):
    """Reflection builder for TypeScript (and TSX) files."""

    def __init__(self, language: str = "typescript"):
        self._language = language

    @property
    def language_name(self) -> str:
        return self._language

    @property
    def file_extensions(self) -> list[str]:
        if self._language == "tsx":
            return [".tsx"]
        return [".ts", ".mts", ".cts"]

    # ------------------------------------------------------------------
    # Comment lookup
    # ------------------------------------------------------------------

    def get_comment(self, node, source: bytes) -> str | None:
        if node is None:
            return None
        if node.type == "program":
            return self._file_comment(node, source)

        target = node
        while target.parent is not None and target.parent.type in _WRAPPER_TYPES:
            target = target.parent

        comments = self._leading_doc_comments(target, source)
        return comments[-1] if comments else None

    def _leading_doc_comments(self, node, source: bytes) -> list[str]:
        found = []
        sibling = node.prev_sibling
        while sibling is not None and sibling.type == "comment":
            text = self.node_text(sibling, source)
            if is_doc_comment(text):
                found.append(text)
            sibling = sibling.prev_sibling
        found.reverse()
        return found

    def _file_comment(self, root, source: bytes) -> str | None:
        found = []
        for child in root.children:
            if child.type == "hash_bang_line":
                continue
            if child.type != "comment":
                break
            text = self.node_text(child, source)
            if is_doc_comment(text):
                found.append(text)
        if len(found) < 2:
            return None
        return found[0]

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def walk(self, tree, source, file_name, converter, context):
        root = tree.root_node
        file_reflection = converter.create_declaration(
            context,
            context.project,
            module_name_for_file(file_name),
            ReflectionKind.ExternalModule,
            raw_comment=self.get_comment(root, source),
            node=root,
        )
        self._walk_scope(root, source, file_reflection, converter, context)
        return file_reflection

    def _declarations(self, scope, flags=ReflectionFlag.NONE):
        """Yield ``(node, flags)`` for declarations directly inside *scope*."""
        for child in scope.named_children:
            if child.type == "export_statement":
                yield from self._declarations(child, flags | ReflectionFlag.Exported)
            elif child.type in ("ambient_declaration", "expression_statement"):
                yield from self._declarations(child, flags)
            elif child.type in _DECLARATION_TYPES:
                yield child, flags

    def _walk_scope(self, scope, source, parent, converter, context):
        entries = list(self._declarations(scope))
        handled: set[int] = set()

        for index, (node, flags) in enumerate(entries):
            if index in handled:
                continue
            kind = node.type

            if kind in _FUNCTION_TYPES:
                name = self._name(node, source)
                group = [
                    i
                    for i in range(index, len(entries))
                    if entries[i][0].type in _FUNCTION_TYPES and self._name(entries[i][0], source) == name
                ]
                handled.update(group)
                self._convert_callable(
                    [entries[i][0] for i in group], source, parent, ReflectionKind.Function, flags, converter, context
                )
            elif kind in _CLASS_TYPES:
                self._convert_class(node, source, parent, flags, converter, context)
            elif kind == "interface_declaration":
                self._convert_interface(node, source, parent, flags, converter, context)
            elif kind == "enum_declaration":
                self._convert_enum(node, source, parent, flags, converter, context)
            elif kind == "type_alias_declaration":
                declaration = converter.create_declaration(
                    context,
                    parent,
                    self._name(node, source),
                    ReflectionKind.TypeAlias,
                    raw_comment=self.get_comment(node, source),
                    node=node,
                    flags=flags,
                )
                self._convert_type_parameters(node, source, declaration, converter, context)
            elif kind in _VARIABLE_TYPES:
                self._convert_variables(node, source, parent, flags, converter, context)
            elif kind in _MODULE_TYPES:
                self._convert_module(node, source, parent, flags, converter, context)

    def _name(self, node, source) -> str:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return "default"
        return self.node_text(name_node, source)

    def _modifier_flags(self, node, source) -> ReflectionFlag:
        flags = ReflectionFlag.NONE
        for child in node.children:
            if child.type == "accessibility_modifier":
                flags |= _ACCESSIBILITY.get(self.node_text(child, source).strip(), ReflectionFlag.NONE)
            elif child.type == "static":
                flags |= ReflectionFlag.Static
            elif child.type == "abstract":
                flags |= ReflectionFlag.Abstract
        return flags

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _convert_module(self, node, source, parent, flags, converter, context):
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        name = self.node_text(name_node, source)
        if name_node.type == "nested_identifier":
            segments = [segment.strip() for segment in name.split(".")]
        else:
            segments = [name.strip("'\"")]

        raw = self.get_comment(node, source)
        current = parent
        for i, segment in enumerate(segments):
            innermost = i == len(segments) - 1
            current = converter.create_declaration(
                context,
                current,
                segment,
                ReflectionKind.Module,
                raw_comment=raw if innermost else None,
                node=node,
                flags=flags if i == 0 else ReflectionFlag.Exported,
            )

        body = node.child_by_field_name("body")
        if body is not None:
            self._walk_scope(body, source, current, converter, context)

    def _convert_callable(self, nodes, source, parent, kind, flags, converter, context):
        """Convert a function or method and all of its overloads."""
        first = nodes[0]
        overloads = [n for n in nodes if n.type in _BODYLESS_TYPES]
        implementations = [n for n in nodes if n.type not in _BODYLESS_TYPES]

        declaration = converter.create_declaration(
            context,
            parent,
            self._name(first, source),
            kind,
            raw_comment=self.get_comment(first, source),
            node=first,
            flags=flags | self._modifier_flags(first, source),
        )
        signature_kind = (
            ReflectionKind.ConstructorSignature if kind == ReflectionKind.Constructor else ReflectionKind.CallSignature
        )
        for signature_node in overloads or implementations[:1]:
            self._convert_signature(
                signature_node, self.get_comment(signature_node, source), source, declaration, signature_kind,
                converter, context,
            )

        if overloads and implementations:
            converter.function_implementation(
                context,
                declaration,
                raw_comment=self.get_comment(implementations[0], source),
                node=implementations[0],
            )
        return declaration

    def _convert_signature(self, node, raw_comment, source, declaration, kind, converter, context):
        signature = converter.create_signature(context, declaration, kind, raw_comment=raw_comment, node=node)
        self._convert_type_parameters(node, source, signature, converter, context)
        parameters = node.child_by_field_name("parameters")
        if parameters is None:
            # Arrow functions with a single bare parameter
            parameter = node.child_by_field_name("parameter")
            if parameter is not None and parameter.type == "identifier":
                converter.create_parameter(context, signature, self.node_text(parameter, source), node=parameter)
            return signature
        for child in parameters.named_children:
            self._convert_parameter(child, source, signature, converter, context)
        return signature

    def _convert_parameter(self, node, source, signature, converter, context):
        if node.type not in ("required_parameter", "optional_parameter"):
            return
        pattern = node.child_by_field_name("pattern")
        if pattern is None or pattern.type == "this":
            return

        flags = ReflectionFlag.NONE
        if node.type == "optional_parameter":
            flags |= ReflectionFlag.Optional

        if pattern.type == "identifier":
            name = self.node_text(pattern, source)
        elif pattern.type == "rest_pattern":
            flags |= ReflectionFlag.Rest
            inner = pattern.named_children[0] if pattern.named_children else None
            name = self.node_text(inner, source) if inner is not None else self.node_text(pattern, source).lstrip(".")
        else:
            name = "__namedParameters"
        converter.create_parameter(context, signature, name, flags=flags, node=node)

    def _convert_type_parameters(self, node, source, parent, converter, context):
        type_parameters = node.child_by_field_name("type_parameters")
        if type_parameters is None:
            return
        existing = {tp.name for tp in parent.type_parameters}
        for child in type_parameters.named_children:
            if child.type != "type_parameter":
                continue
            name_node = child.child_by_field_name("name")
            if name_node is None and child.named_children:
                name_node = child.named_children[0]
            name = self.node_text(name_node, source)
            # Re-declared generics (merged interfaces) keep their first type parameter.
            if not name or name in existing:
                continue
            existing.add(name)
            converter.create_type_parameter(context, parent, name, node=child)

    def _convert_class(self, node, source, parent, flags, converter, context):
        if node.type == "abstract_class_declaration":
            flags |= ReflectionFlag.Abstract
        declaration = converter.create_declaration(
            context,
            parent,
            self._name(node, source),
            ReflectionKind.Class,
            raw_comment=self.get_comment(node, source),
            node=node,
            flags=flags,
        )
        self._convert_type_parameters(node, source, declaration, converter, context)
        body = node.child_by_field_name("body")
        if body is not None:
            self._convert_members(body, source, declaration, converter, context)

    def _convert_interface(self, node, source, parent, flags, converter, context):
        declaration = converter.create_declaration(
            context,
            parent,
            self._name(node, source),
            ReflectionKind.Interface,
            raw_comment=self.get_comment(node, source),
            node=node,
            flags=flags,
        )
        self._convert_type_parameters(node, source, declaration, converter, context)
        body = node.child_by_field_name("body")
        if body is not None:
            self._convert_members(body, source, declaration, converter, context)

    def _convert_members(self, body, source, parent, converter, context):
        members = [c for c in body.named_children if c.type in _METHOD_TYPES or c.type in _PROPERTY_TYPES]
        handled: set[int] = set()

        for index, member in enumerate(members):
            if index in handled:
                continue
            name = self._name(member, source)
            modifiers = self._modifier_flags(member, source)

            if member.type in _METHOD_TYPES:
                static = bool(modifiers & ReflectionFlag.Static)
                group = [
                    i
                    for i in range(index, len(members))
                    if members[i].type in _METHOD_TYPES
                    and self._name(members[i], source) == name
                    and bool(self._modifier_flags(members[i], source) & ReflectionFlag.Static) == static
                ]
                handled.update(group)
                kind = ReflectionKind.Method
                if name == "constructor" and parent.kind == ReflectionKind.Class:
                    kind = ReflectionKind.Constructor
                self._convert_callable(
                    [members[i] for i in group], source, parent, kind, ReflectionFlag.NONE, converter, context
                )
            else:
                flags = modifiers
                if member.type == "property_signature" and any(c.type == "?" for c in member.children):
                    flags |= ReflectionFlag.Optional
                converter.create_declaration(
                    context,
                    parent,
                    name,
                    ReflectionKind.Property,
                    raw_comment=self.get_comment(member, source),
                    node=member,
                    flags=flags,
                )

    def _convert_enum(self, node, source, parent, flags, converter, context):
        declaration = converter.create_declaration(
            context,
            parent,
            self._name(node, source),
            ReflectionKind.Enum,
            raw_comment=self.get_comment(node, source),
            node=node,
            flags=flags,
        )
        body = node.child_by_field_name("body")
        if body is None:
            return
        for member in body.named_children:
            if member.type == "enum_assignment":
                name_node = member.child_by_field_name("name") or member.named_children[0]
                name = self.node_text(name_node, source).strip("'\"")
            elif member.type in ("property_identifier", "string"):
                name = self.node_text(member, source).strip("'\"")
            else:
                continue
            converter.create_declaration(
                context,
                declaration,
                name,
                ReflectionKind.EnumMember,
                raw_comment=self.get_comment(member, source),
                node=member,
            )

    def _convert_variables(self, node, source, parent, flags, converter, context):
        if any(child.type == "const" for child in node.children):
            flags |= ReflectionFlag.Const

        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            name = self.node_text(name_node, source)
            raw = self.get_comment(declarator, source)
            value = declarator.child_by_field_name("value")

            if value is not None and value.type in _FUNCTION_VALUE_TYPES:
                declaration = converter.create_declaration(
                    context, parent, name, ReflectionKind.Function, raw_comment=raw, node=declarator, flags=flags
                )
                self._convert_signature(
                    value, raw, source, declaration, ReflectionKind.CallSignature, converter, context
                )
            else:
                converter.create_declaration(
                    context, parent, name, ReflectionKind.Variable, raw_comment=raw, node=declarator, flags=flags
                )
