"""Overridable bundle variables.

`bal:Overridable="yes"` on a bundle `Variable` lets the standard UI accept
a new value for the variable from the command line. The variable is
identified by the `Name` attribute of the element carrying the flag.
"""

from typing import TYPE_CHECKING

from balext import diagnostics
from balext.records import Record, Table
from balext.values import YesNo

if TYPE_CHECKING:
    from balext.core import ParseContext
    from balext.markup import MarkupAttribute, MarkupNode
    from balext.results import ElementResult

NAME_ATTRIBUTE = 'Name'


def parse_overridable_attribute(parent: 'MarkupNode', attribute: 'MarkupAttribute',
                                context: 'ParseContext') -> 'ElementResult':
    """Validate an overridable flag and emit its record.

    The name is read from the parent node itself, so the flag does not
    depend on the order the host processes attributes in.

    Args:
        parent: `Variable` element carrying the flag.
        attribute: `Overridable` attribute.
        context: Parse context of the invocation.

    Returns:
        One `WixStdbaOverridableVariable` record when the flag is `yes`.
    """
    name = parent.attribute(NAME_ATTRIBUTE)
    if name is None:
        context.on_message(diagnostics.expected_parent_with_attribute(
            parent, attribute.local_name, NAME_ATTRIBUTE,
        ))
        return context.result()

    if context.get_yes_no_value(parent, attribute) is YesNo.YES:
        context.emit(Record.create(
            Table.OVERRIDABLE_VARIABLE,
            parent.location,
            Name=name.value,
        ))

    return context.result()
