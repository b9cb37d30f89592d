"""Compiler host.

The compiler plays the role of the host authoring-language compiler
towards extensions: it keeps the extension registry, creates a parse
context for every invocation, and walks markup trees in document order.

Host elements are walked; their foreign attributes and extension child
elements are handed to the owning extensions. The records of an
invocation are kept only if the invocation reported no error, while
traversal of the remaining document always continues.
"""

import logging
from typing import TYPE_CHECKING

from balext import diagnostics
from balext.bal import BalCompiler
from balext.config import CompilerSettings
from balext.extensions import AttributeConsumer
from balext.names import HOST_NAMESPACES
from balext.results import CompilationResult, ElementResult

from .context import ParseContext
from .loader import ExtensionsLoaderMixin

if TYPE_CHECKING:
    from collections.abc import Iterator

if TYPE_CHECKING:
    from balext.diagnostics import Diagnostic
    from balext.extensions import CompilerExtension
    from balext.markup import MarkupAttribute, MarkupNode
    from balext.records import Record

logger = logging.getLogger(__name__)


class Compiler(ExtensionsLoaderMixin):
    """Host compiler with extension support.

    During initialization the compiler registers the builtin BAL
    extension and, unless disabled, loads foreign extensions from entry
    points.
    """

    def __init__(self, settings: CompilerSettings | None = None, *,
                 auto_load: bool = True) -> None:
        """Initialize the compiler.

        Args:
            settings: Compiler settings; resolved from the environment
                when omitted.
            auto_load: Whether to load extensions from entry points.

        Raises:
            PluginError: If extension loading fails on strict mode.
        """
        self.settings = settings if settings is not None else CompilerSettings()
        self.strict_mode = self.settings.strict

        self.clear_extensions()

        self.add_extension(BalCompiler())

        if auto_load:
            self.load_extensions(self.settings.entrypoint_group)

    def extension_for(self, namespace: str) -> 'CompilerExtension | None':
        """Return the extension owning a namespace, if any."""
        return self.extensions.get(namespace)

    def create_context(self, extension: 'CompilerExtension') -> ParseContext:
        """Create a fresh parse context for an extension invocation."""
        return ParseContext(
            self,
            extension.namespace,
            warnings_as_errors=self.settings.warnings_as_errors,
        )

    def _unhandled(self, diagnostic: 'Diagnostic') -> ElementResult:
        """Wrap a diagnostic about a namespace without extension."""
        if self.settings.warnings_as_errors:
            diagnostic = diagnostic.escalate()

        return ElementResult(diagnostics=(diagnostic,))

    def parse_element(self, parent: 'MarkupNode | None',
                      element: 'MarkupNode') -> ElementResult:
        """Route an element to the extension owning its namespace.

        Args:
            parent: Parent element, `None` for a document root.
            element: Element of an extension namespace.

        Returns:
            Result of the extension invocation, or a warning when no
            extension owns the namespace.
        """
        extension = self.extension_for(element.namespace)
        if extension is None:
            return self._unhandled(diagnostics.unhandled_extension_element(parent, element))

        logger.debug('Routing element %s to %s', element.name, extension.name)

        return extension.parse_element(parent, element, self.create_context(extension))

    def parse_attribute(self, parent: 'MarkupNode',
                        attribute: 'MarkupAttribute') -> ElementResult:
        """Route an attribute to the extension owning its namespace.

        Args:
            parent: Element carrying the attribute.
            attribute: Attribute of an extension namespace.

        Returns:
            Result of the extension invocation, or a warning when no
            extension consumes attributes of the namespace.
        """
        extension = self.extension_for(attribute.namespace)
        if not isinstance(extension, AttributeConsumer):
            return self._unhandled(diagnostics.unhandled_extension_attribute(
                parent, attribute.local_name, attribute.namespace,
            ))

        logger.debug('Routing attribute %s of %s to %s',
                     attribute.name, parent.name, extension.name)

        return extension.parse_attribute(parent, attribute, self.create_context(extension))

    def compile(self, root: 'MarkupNode') -> CompilationResult:
        """Compile a markup tree.

        Args:
            root: Root element of the document.

        Returns:
            All diagnostics, and the records of every invocation that
            reported no error, in document order.
        """
        for extension in self.extensions.values():
            extension.reset()

        found: list[Diagnostic] = []
        records: list[Record] = []

        for result in self._walk(None, root):
            found.extend(result.diagnostics)
            records.extend(result.records)

        logger.debug('Compiled %s: %d diagnostics, %d records',
                     root.location, len(found), len(records))

        return CompilationResult(diagnostics=tuple(found), records=tuple(records))

    def _walk(self, parent: 'MarkupNode | None', node: 'MarkupNode') -> 'Iterator[ElementResult]':
        """Yield invocation results of a subtree in document order."""
        if node.namespace not in HOST_NAMESPACES:
            yield self.parse_element(parent, node)
            return

        for attribute in node.attributes:
            if attribute.namespace not in HOST_NAMESPACES:
                yield self.parse_attribute(node, attribute)

        for child in node.children:
            yield from self._walk(node, child)
