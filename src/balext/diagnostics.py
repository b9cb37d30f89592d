"""Compiler diagnostics and their message catalog.

Diagnostics describe problems found in markup. They are collected, never
raised: a validator keeps going after each one so that every problem of an
element is reported in a single pass.

The module-level factories form the message catalog used by the parse
context and the extensions. Each factory fixes the severity and kind of
its diagnostic.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import Field

from balext.errors import ErrorContext, ErrorFormatter
from balext.markup import SourceLocation
from balext.models import SchemaModel

if TYPE_CHECKING:
    from balext.markup import MarkupNode


class Severity(StrEnum):
    """Severity of a diagnostic."""

    ERROR = 'error'
    WARNING = 'warning'


class DiagnosticKind(StrEnum):
    """Taxonomy of diagnostics."""

    #: Unexpected element or attribute for its parent.
    STRUCTURAL = 'structural'
    #: A mandatory attribute, inner text or parent attribute is absent.
    MISSING_REQUIRED = 'missing-required'
    #: A value is present but fails coercion.
    VALUE_INVALID = 'value-invalid'
    #: Exclusive attributes are used together, or an exclusive pair is violated.
    MUTUAL_EXCLUSION = 'mutual-exclusion'
    #: No extension is registered for a foreign namespace.
    UNHANDLED_EXTENSION = 'unhandled-extension'


class Diagnostic(SchemaModel):
    """A problem found in markup, tied to its source location."""

    severity: Severity = Field(
        default=Severity.ERROR,
        title='Severity',
        description='Errors suppress records of the owning element; warnings do not.',
    )

    kind: DiagnosticKind = Field(
        title='Kind',
        description='Category of the problem.',
    )

    message: str = Field(
        title='Message',
        description='Human-readable description of the problem.',
    )

    location: SourceLocation = Field(
        default_factory=SourceLocation,
        title='Source location',
        description='Location of the element the problem was found on.',
    )

    element: Any = Field(
        default=None,
        title='Element snippet',
        description='Plain data describing the offending element.',
    )

    @property
    def is_error(self) -> bool:
        """Whether the diagnostic has error severity."""
        return self.severity is Severity.ERROR

    def escalate(self) -> 'Diagnostic':
        """Return the diagnostic with error severity."""
        if self.is_error:
            return self

        return self.model_copy(update={'severity': Severity.ERROR})

    def __str__(self) -> str:
        """Render the diagnostic with its location and snippet."""
        return ErrorFormatter.format(
            f'{self.severity}: {self.message}',
            ErrorContext(
                filename=self.location.filename,
                line_num=self.location.line,
                element=self.element,
            ),
        )


def _located(node: 'MarkupNode', kind: DiagnosticKind, message: str,
             severity: Severity = Severity.ERROR) -> Diagnostic:
    """Create a diagnostic located at a node."""
    return Diagnostic(
        severity=severity,
        kind=kind,
        message=message,
        location=node.location,
        element=node.to_snippet(),
    )


def unexpected_element(parent: 'MarkupNode | None', element: 'MarkupNode') -> Diagnostic:
    """The element is not allowed under its parent."""
    if parent is None:
        return _located(
            element, DiagnosticKind.STRUCTURAL,
            f'The {element.local_name} element is not allowed at the document root.',
        )

    return _located(
        element, DiagnosticKind.STRUCTURAL,
        f'The {parent.local_name} element contains an unexpected child '
        f'element {element.local_name!r}.',
    )


def unexpected_attribute(node: 'MarkupNode', attribute: str) -> Diagnostic:
    """The attribute is not part of the element schema."""
    return _located(
        node, DiagnosticKind.STRUCTURAL,
        f'The {node.local_name} element contains an unexpected attribute {attribute!r}.',
    )


def expected_attribute(node: 'MarkupNode', attribute: str) -> Diagnostic:
    """A required attribute is missing."""
    return _located(
        node, DiagnosticKind.MISSING_REQUIRED,
        f'The {node.local_name}/@{attribute} attribute was not found; it is required.',
    )


def expected_one_of_attributes(node: 'MarkupNode', first: str, second: str) -> Diagnostic:
    """Neither attribute of an at-least-one pair is present."""
    return _located(
        node, DiagnosticKind.MISSING_REQUIRED,
        f'The {node.local_name} element must specify at least one of the '
        f'{first!r} or {second!r} attributes.',
    )


def expected_either_attribute(node: 'MarkupNode', first: str, second: str) -> Diagnostic:
    """Exactly one attribute of an exclusive-or pair must be present."""
    return _located(
        node, DiagnosticKind.MUTUAL_EXCLUSION,
        f'The {node.local_name} element must specify exactly one of the '
        f'{first!r} or {second!r} attributes.',
    )


def mutually_exclusive_attributes(node: 'MarkupNode', first: str, second: str) -> Diagnostic:
    """Two exclusive attributes are present together."""
    return _located(
        node, DiagnosticKind.MUTUAL_EXCLUSION,
        f'The {node.local_name}/@{first} attribute cannot be specified when '
        f'attribute {second!r} is also present.',
    )


def condition_expected(node: 'MarkupNode') -> Diagnostic:
    """The element inner text holding a condition is empty."""
    return _located(
        node, DiagnosticKind.MISSING_REQUIRED,
        f'The {node.local_name} element must contain a condition expression '
        'as its inner text; it cannot be empty or whitespace only.',
    )


def expected_parent_with_attribute(parent: 'MarkupNode', attribute: str,
                                   parent_attribute: str) -> Diagnostic:
    """An attribute needs an identifying attribute on its element."""
    return _located(
        parent, DiagnosticKind.MISSING_REQUIRED,
        f'When the {parent.local_name}/@{attribute} attribute is specified, '
        f'the {parent.local_name}/@{parent_attribute} attribute must also be specified.',
    )


def illegal_empty_attribute_value(node: 'MarkupNode', attribute: str) -> Diagnostic:
    """An attribute that needs a value is empty."""
    return _located(
        node, DiagnosticKind.VALUE_INVALID,
        f'The {node.local_name}/@{attribute} attribute\'s value cannot be an empty string.',
    )


def illegal_yes_no_value(node: 'MarkupNode', attribute: str, value: str) -> Diagnostic:
    """A yes/no attribute carries another token."""
    return _located(
        node, DiagnosticKind.VALUE_INVALID,
        f'The {node.local_name}/@{attribute} attribute\'s value, {value!r}, '
        'is not a legal yes/no value; the only legal values are "yes" and "no".',
    )


def unhandled_extension_attribute(node: 'MarkupNode', attribute: str,
                                  namespace: str) -> Diagnostic:
    """No extension owns the namespace of a foreign attribute."""
    return _located(
        node, DiagnosticKind.UNHANDLED_EXTENSION,
        f'The {node.local_name}/@{attribute} attribute belongs to namespace '
        f'{namespace!r}, which has no registered extension.',
        severity=Severity.WARNING,
    )


def unhandled_extension_element(parent: 'MarkupNode | None', element: 'MarkupNode') -> Diagnostic:
    """No extension owns the namespace of a foreign element."""
    owner = f' under {parent.local_name}' if parent is not None else ''
    return _located(
        element, DiagnosticKind.UNHANDLED_EXTENSION,
        f'The {element.local_name} element{owner} belongs to namespace '
        f'{element.namespace!r}, which has no registered extension.',
        severity=Severity.WARNING,
    )
