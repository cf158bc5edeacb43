"""Stage-driven conversion of source files into reflections."""

from docreflect.converter.context import ConversionContext
from docreflect.converter.converter import Converter, ConverterPlugin, available_plugins
from docreflect.converter.events import ConverterEvent, Stage

__all__ = [
    "ConversionContext",
    "Converter",
    "ConverterEvent",
    "ConverterPlugin",
    "Stage",
    "available_plugins",
]
