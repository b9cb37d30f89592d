"""Compiler extension interfaces.

A compiler extension owns one markup namespace. The host routes every
element and attribute of that namespace to it, together with a parse
context through which the extension reads values, reports diagnostics and
emits records.

Extensions never look into each other: when an element of one extension
carries an attribute of another, the parse context delegates it through
the `AttributeConsumer` capability of the owning extension.

Foreign extensions are published as instances of `CompilerExtension`
under the `balext_extensions` entry point group.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from balext.core import ParseContext
    from balext.markup import MarkupAttribute, MarkupNode
    from balext.results import ElementResult

__all__ = (
    'AttributeConsumer',
    'CompilerExtension',
)


@runtime_checkable
class AttributeConsumer(Protocol):
    """Capability of validating attributes of a namespace.

    Implementations report into the given context and return its result.
    """

    namespace: str

    def parse_attribute(self, parent: 'MarkupNode', attribute: 'MarkupAttribute',
                        context: 'ParseContext') -> 'ElementResult':
        """Validate an attribute found on an element of another namespace."""
        ...  # pragma: no cover


class CompilerExtension(ABC):
    """Base class for markup extensions.

    Subclasses set `namespace` and implement element and attribute
    parsing. Both methods receive a fresh `ParseContext` created by the
    host for the invocation and return `context.result()`.
    """

    #: Namespace owned by the extension.
    namespace: str

    #: Display name used in diagnostics and warnings.
    name: str = 'extension'

    @abstractmethod
    def parse_element(self, parent: 'MarkupNode | None', element: 'MarkupNode',
                      context: 'ParseContext') -> 'ElementResult':
        """Validate an element of the extension namespace.

        Args:
            parent: Parent element, `None` for a document root.
            element: Element to validate.
            context: Parse context of this invocation.

        Returns:
            Diagnostics and records of the element subtree.
        """

    @abstractmethod
    def parse_attribute(self, parent: 'MarkupNode', attribute: 'MarkupAttribute',
                        context: 'ParseContext') -> 'ElementResult':
        """Validate an attribute of the extension namespace.

        Args:
            parent: Element carrying the attribute.
            attribute: Attribute to validate.
            context: Parse context of this invocation.

        Returns:
            Diagnostics and records produced by the attribute.
        """

    def reset(self) -> None:  # noqa: B027
        """Forget state kept from previously compiled documents.

        Called by the host before each document; stateless extensions
        need not override it.
        """
