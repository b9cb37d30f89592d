"""Bundle launch conditions.

A `bal:Condition` element under a bundle or fragment blocks the bundle
from running unless its condition evaluates to true. The condition
expression is the text directly inside the element; `Message` is shown to the
user when the condition fails.
"""

from typing import TYPE_CHECKING

from balext import diagnostics
from balext.records import Record, Table
from balext.schema import AttributeSpec, ElementSchema
from balext.values import ValueKind

if TYPE_CHECKING:
    from balext.core import ParseContext
    from balext.markup import MarkupNode
    from balext.results import ElementResult

CONDITION = ElementSchema(
    name='Condition',
    description='Condition that must be true for the bundle to run.',
    attributes=(
        AttributeSpec(
            name='Message',
            kind=ValueKind.NON_EMPTY_TEXT,
            required=True,
            description='Message shown when the condition evaluates to false.',
        ),
    ),
)


def parse_condition_element(node: 'MarkupNode', context: 'ParseContext') -> 'ElementResult':
    """Validate a condition and emit its record.

    A missing condition expression and a missing message are reported
    independently, so both surface in one pass.

    Args:
        node: `Condition` element.
        context: Parse context of the invocation.

    Returns:
        One `WixBalCondition` record, or diagnostics only.
    """
    values = context.collect(node, CONDITION)
    context.parse_for_extension_elements(node)

    condition = context.get_condition_inner_text(node)
    if not condition:
        context.on_message(diagnostics.condition_expected(node))

    context.check_required(node, CONDITION, values)

    if not context.encountered_error:
        context.emit(Record.create(
            Table.CONDITION,
            node.location,
            Condition=condition,
            Message=values['Message'],
        ))

    return context.result()
