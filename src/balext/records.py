"""Symbolic output records.

Records are the rows handed to the linker: a table name, field values in
the table's column order, and the location of the markup that produced
them. They are created in one piece by `Record.create` and never change
afterwards.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Self

from pydantic import Field

from balext.markup import SourceLocation
from balext.models import SchemaModel
from balext.values import FieldValue  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Mapping


class Table(StrEnum):
    """Tables records can be emitted into."""

    CONDITION = 'WixBalCondition'
    VARIABLE = 'Variable'
    WIX_VARIABLE = 'WixVariable'
    STANDARD_UI_OPTIONS = 'WixStdbaOptions'
    OVERRIDABLE_VARIABLE = 'WixStdbaOverridableVariable'

    @property
    def columns(self) -> tuple[str, ...]:
        """Ordered column names of the table."""
        return COLUMNS[self]


#: Column layout of every table, in field order.
COLUMNS: 'Mapping[Table, tuple[str, ...]]' = {
    Table.CONDITION: ('Condition', 'Message'),
    Table.VARIABLE: ('Id', 'Value', 'Type'),
    Table.WIX_VARIABLE: ('Id', 'Value'),
    Table.STANDARD_UI_OPTIONS: (
        'SuppressOptionsUI',
        'SuppressDowngradeFailure',
        'SuppressRepair',
        'ShowVersion',
    ),
    Table.OVERRIDABLE_VARIABLE: ('Name',),
}


class Record(SchemaModel):
    """A row of a named table with positional field values."""

    table: Table = Field(
        title='Table',
        description='Table the record belongs to.',
    )

    fields: tuple[FieldValue, ...] = Field(
        title='Fields',
        description='Field values in column order; `None` for absent values.',
    )

    location: SourceLocation = Field(
        default_factory=SourceLocation,
        title='Source location',
        description='Location of the markup that produced the record.',
    )

    @classmethod
    def create(cls, table: Table, location: SourceLocation | None = None,
               **values: FieldValue) -> Self:
        """Create a record from column values.

        Args:
            table: Target table.
            location: Location of the producing markup.
            **values: Values by column name; missing columns stay `None`.

        Returns:
            A new record with fields in column order.

        Raises:
            ValueError: If a value names a column the table does not have.
        """
        if unknown := set(values).difference(table.columns):
            raise ValueError(f'table {table} has no columns {sorted(unknown)!r}')

        return cls(
            table=table,
            fields=tuple(values.get(column) for column in table.columns),
            location=location or SourceLocation(),
        )

    def __getitem__(self, key: int | str) -> FieldValue:
        """Get a field value by position or column name."""
        if isinstance(key, str):
            key = self.table.columns.index(key)

        return self.fields[key]

    def as_dict(self) -> dict[str, FieldValue]:
        """Field values by column name."""
        return dict(zip(self.table.columns, self.fields, strict=True))
