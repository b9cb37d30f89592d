"""Markup tree model and reader.

The compiler never parses markup itself: it reads an immutable tree of
`MarkupNode` objects owned by the host. This module defines that tree and
a reader that builds it from XML text with lxml, preserving qualified
names, attribute order, text content and source lines.
"""

from typing import TYPE_CHECKING, Any

from lxml import etree
from pydantic import Field

from balext.errors import MarkupError
from balext.models import SchemaModel
from balext.names import QName

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


class SourceLocation(SchemaModel):
    """Position of a node in its source."""

    filename: str | None = Field(
        default=None,
        title='Source file',
        description='Name of the file the node was read from.',
    )

    line: int | None = Field(
        default=None,
        title='Line number',
        description='Line of the node start tag, 1-based.',
    )

    def __str__(self) -> str:
        if self.line is None:
            return self.filename or '<markup>'

        return f'{self.filename or '<markup>'}({self.line})'


class MarkupAttribute(SchemaModel):
    """Attribute of a markup element with its raw text value."""

    name: QName
    value: str

    @property
    def local_name(self) -> str:
        """Local part of the attribute name."""
        return self.name.local

    @property
    def namespace(self) -> str:
        """Namespace of the attribute, empty when unqualified."""
        return self.name.namespace


class MarkupNode(SchemaModel):
    """Element of a markup tree.

    Nodes are read-only views over the source: validators derive typed
    values from them but never modify them.
    """

    name: QName = Field(
        title='Element name',
        description='Namespace-qualified name of the element.',
    )

    attributes: tuple[MarkupAttribute, ...] = Field(
        default=(),
        title='Attributes',
        description='Attributes in document order.',
    )

    children: tuple['MarkupNode', ...] = Field(
        default=(),
        title='Child elements',
        description='Child elements in document order.',
    )

    text: str = Field(
        default='',
        title='Text content',
        description='Text directly inside the element, text of child elements excluded.',
    )

    location: SourceLocation = Field(
        default_factory=SourceLocation,
        title='Source location',
        description='Where the element starts in its source.',
    )

    @property
    def local_name(self) -> str:
        """Local part of the element name."""
        return self.name.local

    @property
    def namespace(self) -> str:
        """Namespace of the element."""
        return self.name.namespace

    def attribute(self, local: str, namespace: str = '') -> MarkupAttribute | None:
        """Find an attribute by qualified name.

        Args:
            local: Local name of the attribute.
            namespace: Namespace of the attribute, empty for unqualified.

        Returns:
            The attribute or `None` if the element does not carry it.
        """
        for attribute in self.attributes:
            if attribute.name == (namespace, local):
                return attribute

        return None

    def to_snippet(self) -> dict[str, Any]:
        """Describe the element as plain data for error snippets."""
        return {
            self.local_name: {
                attribute.local_name: attribute.value
                for attribute in self.attributes
            } or None,
        }

    @classmethod
    def element(cls, name: str, attributes: dict[str, str] | None = None,
                *children: 'MarkupNode', text: str = '',
                location: SourceLocation | None = None) -> 'MarkupNode':
        """Build a node from Clark names.

        Args:
            name: Element name in Clark notation.
            attributes: Mapping of Clark attribute names to values.
            *children: Child nodes.
            text: Text content.
            location: Source location.

        Returns:
            A new markup node.
        """
        return cls(
            name=QName.parse(name),
            attributes=tuple(
                MarkupAttribute(name=QName.parse(key), value=value)
                for key, value in (attributes or {}).items()
            ),
            children=children,
            text=text,
            location=location or SourceLocation(),
        )


class MarkupReader:
    """Reader building markup trees from XML text.

    Comments and processing instructions are skipped; entity references
    are resolved by the parser. External entities and network access are
    disabled.
    """

    def __init__(self) -> None:
        """Initialize the reader with a hardened XML parser."""
        self.parser = etree.XMLParser(
            remove_comments=True,
            remove_pis=True,
            resolve_entities=False,
            no_network=True,
        )

    def read(self, content: str | bytes, filename: str | None = None) -> MarkupNode:
        """Read markup text into a node tree.

        Args:
            content: XML document text.
            filename: Name reported in source locations.

        Returns:
            The root node of the document.

        Raises:
            MarkupError: If the text is not well-formed XML.
        """
        if isinstance(content, str):
            content = content.encode('utf-8')

        try:
            root = etree.fromstring(content, self.parser)

        except etree.XMLSyntaxError as base:
            raise MarkupError.from_syntax_error(base, filename) from base

        return self._build(root, filename)

    def read_file(self, path: 'Path') -> MarkupNode:
        """Read a markup file into a node tree.

        Args:
            path: Path to an XML document.

        Returns:
            The root node of the document.

        Raises:
            MarkupError: If the file is not well-formed XML.
        """
        return self.read(path.read_bytes(), filename=path.as_posix())

    def _build(self, element: etree._Element, filename: str | None) -> MarkupNode:
        """Convert an lxml element and its subtree into nodes."""
        return MarkupNode(
            name=QName.parse(element.tag),
            attributes=tuple(
                MarkupAttribute(name=QName.parse(key), value=value)
                for key, value in element.attrib.items()
            ),
            children=tuple(
                self._build(child, filename)
                for child in self._iter_elements(element)
            ),
            text=(element.text or '') + ''.join(child.tail or '' for child in element),
            location=SourceLocation(filename=filename, line=element.sourceline),
        )

    @staticmethod
    def _iter_elements(element: etree._Element) -> 'Iterator[etree._Element]':
        """Iterate over child elements, skipping any non-element nodes."""
        for child in element:
            if isinstance(child.tag, str):
                yield child
