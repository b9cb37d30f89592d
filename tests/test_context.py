"""Tests for the parse context and attribute coercion."""

from typing import TYPE_CHECKING

import pytest

from balext.core import ParseContext
from balext.diagnostics import DiagnosticKind, Severity, unhandled_extension_attribute
from balext.markup import MarkupNode
from balext.names import BAL_NAMESPACE, HOST_NAMESPACE
from balext.records import Record, Table
from balext.results import ElementResult
from balext.schema import AttributeSpec, ElementSchema
from balext.values import ValueKind, YesNo

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

SCHEMA = ElementSchema(
    name='Sample',
    attributes=(
        AttributeSpec(name='Text', kind=ValueKind.TEXT),
        AttributeSpec(name='Required', required=True),
        AttributeSpec(name='Flag', kind=ValueKind.YES_NO),
        AttributeSpec(name='Left', exclusive_with=('Right',)),
        AttributeSpec(name='Right', exclusive_with=('Left',)),
    ),
)


@pytest.fixture
def host(mocker: 'MockerFixture') -> 'MockType':
    """Provide a host returning empty results."""
    host = mocker.Mock()
    host.parse_element.return_value = ElementResult()
    host.parse_attribute.return_value = ElementResult()

    return host


@pytest.fixture
def context(host: 'MockType') -> ParseContext:
    """Provide a parse context of the BAL namespace."""
    return ParseContext(host, BAL_NAMESPACE)


def sample(**attributes: str) -> MarkupNode:
    """Build a sample element with unqualified attributes."""
    return MarkupNode.element(f'{{{BAL_NAMESPACE}}}Sample', attributes)


@pytest.mark.parametrize(('value', 'expected'), (
    pytest.param('yes', YesNo.YES, id='yes'),
    pytest.param('no', YesNo.NO, id='no'),
    pytest.param('YES', YesNo.YES, id='upper-yes'),
    pytest.param('No', YesNo.NO, id='title-no'),
))
def test_yes_no_value(context: ParseContext, value: str, expected: YesNo) -> None:
    """Coerce yes/no tokens case-insensitively."""
    node = sample(Flag=value)

    assert context.get_yes_no_value(node, node.attributes[0]) is expected
    assert context.diagnostics == []


@pytest.mark.parametrize(('value', 'message'), (
    pytest.param('maybe', 'is not a legal yes/no value', id='token'),
    pytest.param('true', 'is not a legal yes/no value', id='boolean'),
    pytest.param('', 'cannot be an empty string', id='empty'),
))
def test_yes_no_value_illegal(context: ParseContext, value: str, message: str) -> None:
    """Report illegal yes/no values and return the sentinel."""
    node = sample(Flag=value)

    assert context.get_yes_no_value(node, node.attributes[0]) is YesNo.ILLEGAL

    (diagnostic,) = context.diagnostics
    assert diagnostic.kind is DiagnosticKind.VALUE_INVALID
    assert diagnostic.is_error
    assert message in diagnostic.message


def test_attribute_value_empty(context: ParseContext) -> None:
    """Report empty values unless allowed."""
    node = sample(Text='')

    assert context.get_attribute_value(node, node.attributes[0], can_be_empty=True) == ''
    assert context.diagnostics == []

    assert context.get_attribute_value(node, node.attributes[0]) == ''
    assert [item.kind for item in context.diagnostics] == [DiagnosticKind.VALUE_INVALID]


def test_condition_inner_text() -> None:
    """Trim the inner text of condition elements."""
    node = MarkupNode.element('Condition', text='\n  A AND B \t')

    assert ParseContext.get_condition_inner_text(node) == 'A AND B'


def test_collect(context: ParseContext) -> None:
    """Collect coerced values of present attributes only."""
    node = MarkupNode.element(f'{{{BAL_NAMESPACE}}}Sample', {
        'Text': '',
        f'{{{BAL_NAMESPACE}}}Required': 'value',
        'Flag': 'no',
    })

    values = context.collect(node, SCHEMA)

    assert values == {'Text': '', 'Required': 'value', 'Flag': YesNo.NO}
    assert context.diagnostics == []


def test_collect_unexpected_attribute(context: ParseContext) -> None:
    """Report attributes missing from the schema."""
    values = context.collect(sample(Unknown='1', Text='a'), SCHEMA)

    assert values == {'Text': 'a', 'Flag': YesNo.NOT_SET}

    (diagnostic,) = context.diagnostics
    assert diagnostic.kind is DiagnosticKind.STRUCTURAL
    assert "unexpected attribute 'Unknown'" in diagnostic.message


def test_collect_host_attribute(context: ParseContext, host: 'MockType') -> None:
    """Report qualified host attributes instead of delegating them."""
    node = MarkupNode.element(f'{{{BAL_NAMESPACE}}}Sample', {
        'Required': 'a',
        f'{{{HOST_NAMESPACE}}}Id': 'b',
    })

    values = context.collect(node, SCHEMA)

    assert values == {'Required': 'a', 'Flag': YesNo.NOT_SET}
    host.parse_attribute.assert_not_called()

    (diagnostic,) = context.diagnostics
    assert diagnostic.kind is DiagnosticKind.STRUCTURAL
    assert "unexpected attribute 'Id'" in diagnostic.message


def test_collect_unset_flag(context: ParseContext) -> None:
    """Mark absent yes/no attributes as not set, distinct from no."""
    assert context.collect(sample(Required='a'), SCHEMA)['Flag'] is YesNo.NOT_SET
    assert context.collect(sample(Required='a', Flag='no'), SCHEMA)['Flag'] is YesNo.NO
    assert context.diagnostics == []


def test_collect_exclusive_pair(context: ParseContext) -> None:
    """Report an exclusive pair once even if both sides declare it."""
    context.collect(sample(Left='a', Right='b'), SCHEMA)

    (diagnostic,) = context.diagnostics
    assert diagnostic.kind is DiagnosticKind.MUTUAL_EXCLUSION
    assert 'Sample/@Left' in diagnostic.message


def test_collect_delegates_foreign_attribute(context: ParseContext, host: 'MockType') -> None:
    """Delegate attributes of foreign namespaces to the host."""
    node = MarkupNode.element(f'{{{BAL_NAMESPACE}}}Sample', {
        'Text': 'a',
        '{urn:other}Marker': 'b',
    })
    host.parse_attribute.return_value = ElementResult(
        diagnostics=(unhandled_extension_attribute(node, 'Marker', 'urn:other'),),
    )

    values = context.collect(node, SCHEMA)

    assert values == {'Text': 'a', 'Flag': YesNo.NOT_SET}
    host.parse_attribute.assert_called_once_with(node, node.attributes[1])

    (diagnostic,) = context.diagnostics
    assert diagnostic.severity is Severity.WARNING
    assert not context.encountered_error


def test_check_required(context: ParseContext) -> None:
    """Report missing required attributes."""
    node = sample()
    context.check_required(node, SCHEMA, context.collect(node, SCHEMA))

    (diagnostic,) = context.diagnostics
    assert diagnostic.kind is DiagnosticKind.MISSING_REQUIRED
    assert 'Sample/@Required' in diagnostic.message


def test_extension_elements(context: ParseContext, host: 'MockType') -> None:
    """Report host children and delegate extension children."""
    foreign = MarkupNode.element('{urn:other}Child')
    node = MarkupNode.element(
        f'{{{BAL_NAMESPACE}}}Sample', None,
        MarkupNode.element('HostChild'),
        foreign,
    )

    context.parse_for_extension_elements(node)

    host.parse_element.assert_called_once_with(node, foreign)

    (diagnostic,) = context.diagnostics
    assert diagnostic.kind is DiagnosticKind.STRUCTURAL
    assert "unexpected child element 'HostChild'" in diagnostic.message


def test_result_keeps_records_with_warnings(context: ParseContext) -> None:
    """Keep records when only warnings were reported."""
    node = sample()
    context.on_message(unhandled_extension_attribute(node, 'Marker', 'urn:other'))
    context.emit(Record.create(Table.OVERRIDABLE_VARIABLE, Name='A'))

    result = context.result()

    assert result.ok
    assert len(result.records) == 1


def test_result_drops_records_on_error(context: ParseContext) -> None:
    """Drop records once an error was reported."""
    node = sample(Text='')
    context.emit(Record.create(Table.OVERRIDABLE_VARIABLE, Name='A'))
    context.get_attribute_value(node, node.attributes[0])

    result = context.result()

    assert result.has_errors
    assert result.records == ()


def test_warnings_as_errors(host: 'MockType') -> None:
    """Escalate warnings reported through the context."""
    context = ParseContext(host, BAL_NAMESPACE, warnings_as_errors=True)
    context.on_message(unhandled_extension_attribute(sample(), 'Marker', 'urn:other'))

    assert context.encountered_error
    assert context.diagnostics[0].kind is DiagnosticKind.UNHANDLED_EXTENSION
