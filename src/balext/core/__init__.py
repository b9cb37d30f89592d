"""Compiler host and extension runtime.

This package defines the host side of extension compilation:

- the parse context handed to extensions, with attribute accessors,
  diagnostic reporting and delegation of foreign markup;
- discovery and registration of extensions from entry points;
- the compiler walking markup trees in document order.

The primary public entry point is `Compiler`, which registers the builtin
BAL extension, loads foreign extensions and compiles markup trees into
diagnostics and records.
"""

from .compiler import Compiler
from .context import ExtensionHost, ParseContext

__all__ = (
    'Compiler',
    'ExtensionHost',
    'ParseContext',
)
