"""Parse context handed to extensions.

A parse context is created by the host for every top-level invocation of
an extension: one element subtree or one attribute. It gives the
extension everything it needs from the host:

- typed attribute accessors that report coercion problems;
- the diagnostic sink;
- delegation of foreign attributes and child elements to their owners;
- the per-invocation record buffer and its result.

Delegated invocations return their own results, which are merged into the
context, so an error reported by a foreign extension suppresses the
records of the element that carries it.
"""

from typing import TYPE_CHECKING, Protocol

from balext import diagnostics
from balext.names import HOST_NAMESPACES
from balext.results import ElementResult
from balext.values import ValueKind, YesNo

if TYPE_CHECKING:
    from balext.diagnostics import Diagnostic
    from balext.markup import MarkupAttribute, MarkupNode
    from balext.records import Record
    from balext.schema import AttributeSpec, ElementSchema
    from balext.values import AttributeValue


class ExtensionHost(Protocol):
    """Host services a context delegates foreign markup to."""

    def parse_element(self, parent: 'MarkupNode | None',
                      element: 'MarkupNode') -> ElementResult:
        """Route an element to the extension owning its namespace."""
        ...  # pragma: no cover

    def parse_attribute(self, parent: 'MarkupNode',
                        attribute: 'MarkupAttribute') -> ElementResult:
        """Route an attribute to the extension owning its namespace."""
        ...  # pragma: no cover


class ParseContext:
    """Working state of one extension invocation.

    Attributes:
        host: Host routing foreign markup.
        namespace: Namespace of the invoked extension; unqualified
            attributes and attributes of this namespace are its own.
        warnings_as_errors: Whether warnings are reported as errors.
        diagnostics: Diagnostics reported so far.
        records: Records emitted so far.
    """

    def __init__(self, host: ExtensionHost, namespace: str, *,
                 warnings_as_errors: bool = False) -> None:
        """Initialize an empty context.

        Args:
            host: Host routing foreign markup.
            namespace: Namespace of the invoked extension.
            warnings_as_errors: Whether warnings are reported as errors.
        """
        self.host = host
        self.namespace = namespace
        self.warnings_as_errors = warnings_as_errors

        self.diagnostics: list[Diagnostic] = []
        self.records: list[Record] = []

    @property
    def encountered_error(self) -> bool:
        """Whether an error diagnostic was reported in this invocation."""
        return any(diagnostic.is_error for diagnostic in self.diagnostics)

    def on_message(self, diagnostic: 'Diagnostic') -> None:
        """Report a diagnostic.

        Args:
            diagnostic: Diagnostic to add; warnings are escalated when
                the context treats warnings as errors.
        """
        if self.warnings_as_errors:
            diagnostic = diagnostic.escalate()

        self.diagnostics.append(diagnostic)

    def unexpected_element(self, parent: 'MarkupNode | None', element: 'MarkupNode') -> None:
        """Report an element not allowed under its parent."""
        self.on_message(diagnostics.unexpected_element(parent, element))

    def unexpected_attribute(self, node: 'MarkupNode', attribute: 'MarkupAttribute') -> None:
        """Report an attribute not allowed on its element."""
        self.on_message(diagnostics.unexpected_attribute(node, attribute.local_name))

    def get_attribute_value(self, node: 'MarkupNode', attribute: 'MarkupAttribute', *,
                            can_be_empty: bool = False) -> str:
        """Read a text attribute.

        Args:
            node: Element carrying the attribute.
            attribute: Attribute to read.
            can_be_empty: Whether the empty string is a legal value.

        Returns:
            The raw value; an illegal empty value is reported and
            returned as is.
        """
        if not attribute.value and not can_be_empty:
            self.on_message(diagnostics.illegal_empty_attribute_value(node, attribute.local_name))

        return attribute.value

    def get_yes_no_value(self, node: 'MarkupNode', attribute: 'MarkupAttribute') -> YesNo:
        """Read a yes/no attribute.

        Args:
            node: Element carrying the attribute.
            attribute: Attribute to read.

        Returns:
            `YES` or `NO`, or `ILLEGAL` after reporting an empty value
            or an unrecognized token.
        """
        if not attribute.value:
            self.on_message(diagnostics.illegal_empty_attribute_value(node, attribute.local_name))
            return YesNo.ILLEGAL

        value = YesNo.from_token(attribute.value)
        if value is YesNo.ILLEGAL:
            self.on_message(diagnostics.illegal_yes_no_value(
                node, attribute.local_name, attribute.value,
            ))

        return value

    @staticmethod
    def get_condition_inner_text(node: 'MarkupNode') -> str:
        """Read the condition expression held by an element's text."""
        return node.text.strip()

    def coerce(self, node: 'MarkupNode', attribute: 'MarkupAttribute',
               spec: 'AttributeSpec') -> 'AttributeValue':
        """Coerce an attribute value according to its declaration.

        Args:
            node: Element carrying the attribute.
            attribute: Attribute to coerce.
            spec: Declaration of the attribute.

        Returns:
            Text for text kinds, a `YesNo` for yes/no attributes.
        """
        match spec.kind:
            case ValueKind.TEXT:
                return self.get_attribute_value(node, attribute, can_be_empty=True)
            case ValueKind.NON_EMPTY_TEXT:
                return self.get_attribute_value(node, attribute)
            case ValueKind.YES_NO:
                return self.get_yes_no_value(node, attribute)

        raise ValueError(f'Unsupported value kind {spec.kind!r}')  # pragma: no cover

    def collect(self, node: 'MarkupNode', schema: 'ElementSchema') -> dict[str, 'AttributeValue']:
        """Validate and coerce the attributes of an element.

        Own attributes are looked up in the schema and coerced; unknown
        ones are reported, and so are attributes of the host namespace.
        Attributes of any other namespace are delegated to their
        extension. Every declared exclusive pair found together is
        reported once.

        Args:
            node: Element to read.
            schema: Schema of the element.

        Returns:
            Coerced values by attribute name for present attributes, plus
            `YesNo.NOT_SET` for every absent yes/no attribute.
        """
        values: dict[str, AttributeValue] = {}

        for attribute in node.attributes:
            if attribute.namespace in ('', self.namespace):
                spec = schema.get(attribute.local_name)
                if spec is None:
                    self.unexpected_attribute(node, attribute)
                    continue
                values[spec.name] = self.coerce(node, attribute, spec)
            elif attribute.namespace in HOST_NAMESPACES:
                self.unexpected_attribute(node, attribute)
            else:
                self.parse_extension_attribute(node, attribute)

        for first, second in schema.exclusive_pairs():
            if first in values and second in values:
                self.on_message(diagnostics.mutually_exclusive_attributes(node, first, second))

        for spec in schema.attributes:
            if spec.kind is ValueKind.YES_NO:
                values.setdefault(spec.name, YesNo.NOT_SET)

        return values

    def check_required(self, node: 'MarkupNode', schema: 'ElementSchema',
                       values: dict[str, 'AttributeValue']) -> None:
        """Report required attributes missing from collected values."""
        for spec in schema.attributes:
            if spec.required and values.get(spec.name, YesNo.NOT_SET) is YesNo.NOT_SET:
                self.on_message(diagnostics.expected_attribute(node, spec.name))

    def parse_extension_attribute(self, node: 'MarkupNode', attribute: 'MarkupAttribute') -> None:
        """Delegate a foreign attribute to the extension owning it."""
        self.merge(self.host.parse_attribute(node, attribute))

    def parse_for_extension_elements(self, node: 'MarkupNode') -> None:
        """Process the children of an element owned by an extension.

        Host children are unexpected; children of any extension
        namespace are routed through the host to their extension.
        """
        for child in node.children:
            if child.namespace in HOST_NAMESPACES:
                self.unexpected_element(node, child)
            else:
                self.merge(self.host.parse_element(node, child))

    def merge(self, result: ElementResult) -> None:
        """Merge the result of a delegated invocation."""
        self.diagnostics.extend(result.diagnostics)
        self.records.extend(result.records)

    def emit(self, record: 'Record') -> None:
        """Emit a record produced by the invoked extension."""
        self.records.append(record)

    def result(self) -> ElementResult:
        """Finish the invocation.

        Returns:
            Diagnostics and records; records are dropped when any
            diagnostic is an error.
        """
        return ElementResult(
            diagnostics=tuple(self.diagnostics),
            records=tuple(self.records),
        )
