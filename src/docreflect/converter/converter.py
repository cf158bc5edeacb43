"""Conversion driver: walks source files into a reflection tree.

Plugins subscribe handlers to :class:`Stage` values; the converter emits
the stages in a fixed order:

    BEGIN
    CREATE_* / FUNCTION_IMPLEMENTATION   (while files are walked)
    RESOLVE_BEGIN
    RESOLVE                              (once per reflection, id order)
    RESOLVE_END
    END

Handlers are called as ``handler(context, event)`` in registration order
and mutate the :class:`ConversionContext` in place.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

from docreflect.converter.context import ConversionContext
from docreflect.converter.events import ConverterEvent, Stage
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
)

log = logging.getLogger(__name__)

Handler = Callable[[ConversionContext, ConverterEvent], None]
PluginFactory = Callable[["Converter"], "ConverterPlugin"]

# Declarations that merge into one reflection when re-declared in a scope.
_MERGEABLE_KINDS = ReflectionKind.Module | ReflectionKind.Interface


class ConverterPlugin:
    """Base class for converter plugins; subclasses subscribe in ``__init__``."""

    name = ""

    def __init__(self, converter: Converter):
        self.converter = converter


def _builtin_plugins() -> dict[str, PluginFactory]:
    from docreflect.comments.plugin import CommentPlugin

    return {"comment": CommentPlugin}


def available_plugins() -> dict[str, PluginFactory]:
    """Built-in plugins followed by those registered through plugin discovery."""
    from docreflect.plugins import get_plugin_converter_plugins

    plugins = _builtin_plugins()
    for name, factory in get_plugin_converter_plugins().items():
        plugins.setdefault(name, factory)
    return plugins


class Converter:
    def __init__(self, plugins: dict[str, PluginFactory] | None = None):
        self._handlers: dict[Stage, list[Handler]] = {stage: [] for stage in Stage}
        self.plugins: dict[str, ConverterPlugin] = {}
        if plugins is None:
            plugins = available_plugins()
        for name, factory in plugins.items():
            self.add_plugin(name, factory)

    # ------------------------------------------------------------------
    # Plugins and dispatch
    # ------------------------------------------------------------------

    def add_plugin(self, name: str, factory: PluginFactory) -> ConverterPlugin:
        if name in self.plugins:
            raise ValueError(f"duplicate converter plugin: {name}")
        plugin = factory(self)
        self.plugins[name] = plugin
        return plugin

    def on(self, stage: Stage, handler: Handler) -> None:
        self._handlers[stage].append(handler)

    def emit(self, context: ConversionContext, event: ConverterEvent) -> None:
        for handler in self._handlers[event.stage]:
            handler(context, event)

    # ------------------------------------------------------------------
    # Reflection factories (used by source walkers)
    # ------------------------------------------------------------------

    def create_declaration(
        self,
        context: ConversionContext,
        parent: ContainerReflection,
        name: str,
        kind: ReflectionKind,
        *,
        raw_comment: str | None = None,
        node=None,
        flags: ReflectionFlag = ReflectionFlag.NONE,
    ) -> DeclarationReflection:
        reflection = None
        if kind & _MERGEABLE_KINDS:
            reflection = parent.get_child(name, kind)
        if reflection is None:
            reflection = DeclarationReflection(name, kind, parent)
            parent.children.append(reflection)
            context.project.register(reflection)
        reflection.set_flag(flags)
        self.emit(
            context,
            ConverterEvent(Stage.CREATE_DECLARATION, reflection, raw_comment, node, _current_file(context)),
        )
        return reflection

    def create_signature(
        self,
        context: ConversionContext,
        declaration: DeclarationReflection,
        kind: ReflectionKind = ReflectionKind.CallSignature,
        *,
        raw_comment: str | None = None,
        node=None,
    ) -> SignatureReflection:
        signature = SignatureReflection(declaration.name, kind, declaration)
        declaration.signatures.append(signature)
        context.project.register(signature)
        self.emit(
            context,
            ConverterEvent(Stage.CREATE_SIGNATURE, signature, raw_comment, node, _current_file(context)),
        )
        return signature

    def create_parameter(
        self,
        context: ConversionContext,
        signature: SignatureReflection,
        name: str,
        *,
        flags: ReflectionFlag = ReflectionFlag.NONE,
        node=None,
    ) -> ParameterReflection:
        parameter = ParameterReflection(name, signature)
        parameter.set_flag(flags)
        signature.parameters.append(parameter)
        context.project.register(parameter)
        self.emit(context, ConverterEvent(Stage.CREATE_PARAMETER, parameter, None, node, _current_file(context)))
        return parameter

    def create_type_parameter(
        self,
        context: ConversionContext,
        parent: DeclarationReflection | SignatureReflection,
        name: str,
        *,
        node=None,
    ) -> TypeParameterReflection:
        type_parameter = TypeParameterReflection(name, parent)
        parent.type_parameters.append(type_parameter)
        context.project.register(type_parameter)
        self.emit(
            context,
            ConverterEvent(Stage.CREATE_TYPE_PARAMETER, type_parameter, None, node, _current_file(context)),
        )
        return type_parameter

    def function_implementation(
        self,
        context: ConversionContext,
        declaration: DeclarationReflection,
        *,
        raw_comment: str | None = None,
        node=None,
    ) -> None:
        self.emit(
            context,
            ConverterEvent(Stage.FUNCTION_IMPLEMENTATION, declaration, raw_comment, node, _current_file(context)),
        )

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def begin(self, name: str = "project") -> ConversionContext:
        context = ConversionContext(project=ProjectReflection(name))
        self.emit(context, ConverterEvent(Stage.BEGIN))
        return context

    def convert(self, paths: Iterable[str | os.PathLike], name: str = "project") -> ConversionContext:
        """Convert source files on disk and resolve the resulting tree."""
        context = self.begin(name)
        for path in paths:
            self._convert_path(context, Path(path))
        self.resolve(context)
        return context

    def convert_source(self, text: str, file_name: str = "input.ts", name: str = "project") -> ConversionContext:
        """Convert a single in-memory source file."""
        context = self.begin(name)
        self.convert_file(context, text.encode("utf-8"), file_name)
        self.resolve(context)
        return context

    def _convert_path(self, context: ConversionContext, path: Path) -> None:
        try:
            source = path.read_bytes()
        except OSError as exc:
            log.warning("Cannot read %s: %s", path, exc)
            context.failed_files.append(str(path))
            return
        self.convert_file(context, source, str(path))

    def convert_file(self, context: ConversionContext, source: bytes, file_name: str) -> Reflection | None:
        """Walk one file into *context*; returns its file-level reflection."""
        from docreflect.languages.registry import get_language_for_file, get_parser, get_walker

        language = get_language_for_file(file_name)
        walker = get_walker(language) if language else None
        if walker is None:
            log.warning("No source walker for %s", file_name)
            context.failed_files.append(file_name)
            return None

        try:
            tree = get_parser(language).parse(source)
        except Exception as exc:
            log.warning("Parse failed for %s: %s", file_name, exc)
            context.failed_files.append(file_name)
            return None

        context.files.append(file_name)
        return walker.walk(tree, source, file_name, self, context)

    def resolve(self, context: ConversionContext) -> None:
        """Run the resolve pass over the complete tree."""
        self.emit(context, ConverterEvent(Stage.RESOLVE_BEGIN))
        for reflection in list(context.project.iter_reflections()):
            self.emit(context, ConverterEvent(Stage.RESOLVE, reflection))
        self.emit(context, ConverterEvent(Stage.RESOLVE_END))
        self.emit(context, ConverterEvent(Stage.END))
        log.debug(
            "Converted %d files (%d failed), %d reflections",
            len(context.files),
            len(context.failed_files),
            len(context.project.reflections),
        )


def _current_file(context: ConversionContext) -> str | None:
    return context.files[-1] if context.files else None
