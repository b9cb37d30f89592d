"""Core exception hierarchy and message formatting.

This module defines base error and warning types used across the library
to report extension loading issues, unreadable markup, and failed
compilations, together with the formatter shared by exceptions and
diagnostics to render a message with its source location and a YAML
snippet of the offending markup.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from collections.abc import Sequence
    from importlib.metadata import EntryPoint
    from typing import Self

if TYPE_CHECKING:
    from lxml.etree import XMLSyntaxError

if TYPE_CHECKING:
    from balext.diagnostics import Diagnostic

SNIPPET_MARKER = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_FILENAME = '<markup>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Where a problem was found and what it was found on.

    Every key is optional; missing keys are left out of the output.
    """

    #: Source file name.
    filename: str | None

    #: 1-based line of the problem.
    line_num: int | None
    #: 1-based column of the problem, shown only together with the line.
    column_num: int | None

    #: Exception the message was derived from.
    error: Exception | None

    #: Offending markup element as plain data, see `MarkupNode.to_snippet`.
    element: Any


class ErrorFormatter:
    """Renders messages followed by their location and a markup snippet.

    A rendered message looks like::

        error: The Condition/@Message attribute was not found; it is required.
            in "bundle.wxs", line 12
                ...
                Condition: null
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Append location and snippet lines to a message.

        Args:
            message: First line of the output.
            context: Location and element of the problem.

        Returns:
            The message alone without context, otherwise the message
            followed by the location and the snippet.
        """
        if not context:
            return message

        return ''.join((
            message,
            linesep,
            cls.get_location_string(context, indent=FORMAT_INDENT),
            cls.get_snippet_string(context, indent=FORMAT_INDENT * 2),
        ))

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Render the `in "file", line N, column M` line."""
        parts = [f'in "{context.get('filename') or FORMAT_FILENAME}"']

        if (line_num := context.get('line_num')) is not None:
            parts.append(f'line {line_num}')
            if (column_num := context.get('column_num')) is not None:
                parts.append(f'column {column_num}')

        return f'{cls._ensure_indent(indent)}{', '.join(parts)}{linesep}'

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Render the element as an indented YAML block.

        Returns:
            The snippet lines, or an empty string without an element.
        """
        if not (element := context.get('element')):
            return ''

        indent = cls._ensure_indent(indent)
        data = dump(element, indent=SNIPPET_INDENT, sort_keys=False, allow_unicode=True)

        lines = [f'{indent}{SNIPPET_MARKER}']
        lines.extend(
            f'{indent}{line}{linesep}'
            for line in data.splitlines()
            if line.strip()
        )

        return ''.join(lines)

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Turn a number of spaces or a prefix into a prefix."""
        if isinstance(indent, str):
            return indent

        return ' ' * indent if indent else ''


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal extension loading issues.

    This warning is used when an extension cannot be loaded or
    registered, but the problem does not prevent compilation
    (for example, when running in non-strict mode).
    """


class BalError(Exception, ErrorFormatter):
    """Base exception for all balext errors.

    All custom exceptions raised by the library should inherit from
    this class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class PluginError(BalError):
    """Error raised for fatal extension loading failures.

    This exception is raised when an extension entry point is invalid,
    misconfigured, fails to load, or shadows another extension in
    strict mode.
    """

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a plugin error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)


class MarkupError(BalError):
    """Error raised when markup text cannot be read into a node tree."""

    @classmethod
    def from_syntax_error(cls, error: 'XMLSyntaxError',
                          filename: str | None = None) -> 'Self':
        """Create a markup error from an XML parser failure.

        Args:
            error: Exception raised by the XML parser.
            filename: Name of the source, used when the parser has none.

        Returns:
            MarkupError carrying the parser position.
        """
        error_context = ErrorContext(
            filename=filename or error.filename,
            line_num=error.lineno,
            column_num=error.offset,
            error=error,
        )

        message = 'Invalid markup'
        if error.msg:
            message += f'{linesep}{' ' * FORMAT_INDENT}{error.msg}'

        return cls(message, context=error_context)


class CompilationError(BalError):
    """Error raised on demand when a compilation reported errors.

    Diagnostics are never raised while compiling; callers that prefer
    exceptions convert a finished result with
    `CompilationResult.raise_for_errors`.
    """

    def __init__(self, diagnostics: 'Sequence[Diagnostic]') -> None:
        """Initialize a compilation error.

        Args:
            diagnostics: Error diagnostics of the compilation.
        """
        self.diagnostics = tuple(diagnostics)

        count = len(self.diagnostics)
        message = f'Compilation failed with {count} error{'' if count == 1 else 's'}'
        for diagnostic in self.diagnostics:
            message += f'{linesep}{diagnostic}'

        super().__init__(message)
