"""Results of element and document compilation.

An `ElementResult` bundles the diagnostics and records of one top-level
invocation of an extension. Records survive only while no diagnostic has
error severity, so partial output of a faulty element never reaches the
linker.
"""

from pydantic import Field, ValidationInfo, field_validator

from balext.diagnostics import Diagnostic  # noqa: TC001
from balext.errors import CompilationError
from balext.models import SchemaModel
from balext.records import Record, Table  # noqa: TC001


class ElementResult(SchemaModel):
    """Diagnostics and records of one element subtree."""

    diagnostics: tuple[Diagnostic, ...] = Field(
        default=(),
        title='Diagnostics',
        description='Problems reported while processing the element.',
    )

    records: tuple[Record, ...] = Field(
        default=(),
        title='Records',
        description='Records produced by the element, in emission order.',
    )

    @field_validator('records')
    @classmethod
    def drop_records_on_error(cls, records: tuple[Record, ...],
                              info: ValidationInfo) -> tuple[Record, ...]:
        """Discard records when any diagnostic is an error.

        Args:
            records: Validated records.
            info: Validation info holding the already validated diagnostics.

        Returns:
            The records, or nothing if the element reported errors.
        """
        diagnostics = info.data.get('diagnostics', ())
        if any(diagnostic.is_error for diagnostic in diagnostics):
            return ()

        return records

    @property
    def has_errors(self) -> bool:
        """Whether any diagnostic has error severity."""
        return any(diagnostic.is_error for diagnostic in self.diagnostics)

    @property
    def ok(self) -> bool:
        """Whether the element compiled without errors."""
        return not self.has_errors


class CompilationResult(SchemaModel):
    """Everything a compilation pass produced, in document order."""

    diagnostics: tuple[Diagnostic, ...] = Field(
        default=(),
        title='Diagnostics',
        description='All diagnostics, errors and warnings.',
    )

    records: tuple[Record, ...] = Field(
        default=(),
        title='Records',
        description='Records of every element that compiled without errors.',
    )

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        """Diagnostics with error severity."""
        return tuple(item for item in self.diagnostics if item.is_error)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        """Diagnostics with warning severity."""
        return tuple(item for item in self.diagnostics if not item.is_error)

    def rows(self, table: Table) -> tuple[Record, ...]:
        """Records of a single table, in emission order."""
        return tuple(record for record in self.records if record.table is table)

    def raise_for_errors(self) -> None:
        """Raise if the compilation reported errors.

        Raises:
            CompilationError: If any diagnostic has error severity.
        """
        if errors := self.errors:
            raise CompilationError(errors)
