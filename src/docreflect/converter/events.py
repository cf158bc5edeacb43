"""Converter stages and the event payload handed to stage handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from docreflect.models.reflections import Reflection


class Stage(Enum):
    """Pipeline stages in the order a conversion emits them."""

    BEGIN = "begin"
    CREATE_DECLARATION = "create_declaration"
    CREATE_SIGNATURE = "create_signature"
    CREATE_PARAMETER = "create_parameter"
    CREATE_TYPE_PARAMETER = "create_type_parameter"
    FUNCTION_IMPLEMENTATION = "function_implementation"
    RESOLVE_BEGIN = "resolve_begin"
    RESOLVE = "resolve"
    RESOLVE_END = "resolve_end"
    END = "end"


@dataclass
class ConverterEvent:
    stage: Stage
    reflection: Reflection | None = None
    # Raw doc comment text found for the source node, if any.
    raw_comment: str | None = None
    node: Any = None
    file_name: str | None = None
