"""Standardized CLI exit codes for docreflect.

Exit code scheme:

    0  SUCCESS         -- command completed
    1  GENERAL_ERROR   -- unexpected failure, crash, unhandled exception
    2  USAGE_ERROR     -- invalid arguments, bad flags, unknown command (Click default)
    3  SOURCE_MISSING  -- no convertible source file found at the given paths
    4  PARSE_FAILURE   -- every requested file failed to parse
    6  PARTIAL         -- command completed but some files were skipped

Comment text itself never causes a failure: malformed documentation
degrades to empty fields.
"""

from __future__ import annotations

import click

# ---------------------------------------------------------------------------
# Exit code constants
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1
EXIT_USAGE: int = 2
EXIT_SOURCE_MISSING: int = 3
EXIT_PARSE_FAILURE: int = 4
EXIT_PARTIAL: int = 6

DESCRIPTIONS: dict[int, str] = {
    EXIT_SUCCESS: "success",
    EXIT_ERROR: "unexpected error",
    EXIT_USAGE: "invalid usage (bad arguments or flags)",
    EXIT_SOURCE_MISSING: "no source files found",
    EXIT_PARSE_FAILURE: "source files could not be parsed",
    EXIT_PARTIAL: "partial results (some files skipped)",
}

# ---------------------------------------------------------------------------
# Custom exceptions (caught by CLI error handler)
# ---------------------------------------------------------------------------


class DocReflectError(click.ClickException):
    """Base class for docreflect errors with exit codes."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def format_message(self) -> str:
        return self.message


class SourceNotFoundError(DocReflectError):
    """Raised when no convertible source file was found."""

    def __init__(self, message: str = "No TypeScript source files found."):
        super().__init__(message, EXIT_SOURCE_MISSING)


class ParseFailureError(DocReflectError):
    """Raised when none of the requested files could be converted."""

    def __init__(self, message: str = "No source file could be parsed."):
        super().__init__(message, EXIT_PARSE_FAILURE)
