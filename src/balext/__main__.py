"""CLI utilities for checking BAL markup.

The commands print the element vocabulary of the BAL namespace and
compile markup files without producing any build output.
"""

from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING

from click import Path as PathParam
from click import ClickException, argument, echo, group, option
from yaml import safe_dump

from balext.bal import SCHEMAS
from balext.config import CompilerSettings
from balext.core import Compiler
from balext.errors import MarkupError
from balext.markup import MarkupReader

if TYPE_CHECKING:
    from balext.results import CompilationResult

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


@group(help='Command-line utilities for BAL markup.')
def cli() -> None:
    """Root CLI group for balext tools."""
    return None


@cli.command(
    name='schema',
    help='Print the BAL element vocabulary as JSON to standard output.',
)
def print_schema() -> None:
    """Print the element schemas."""
    echo(dumps(
        [schema.model_dump(mode='json') for schema in SCHEMAS],
        ensure_ascii=False,
        indent=2,
    ))


def _dump_records(result: 'CompilationResult') -> str:
    """Render records as a YAML list of tables and columns."""
    return safe_dump(
        [{str(record.table): record.as_dict()} for record in result.records],
        sort_keys=False,
        allow_unicode=True,
    )


@cli.command(
    name='check',
    help=(
        'Compile a markup file, print diagnostics to standard error and '
        'records to standard output. Exits with status 1 on errors.'
    ),
)
@option(
    '-W', '--warnings-as-errors',
    is_flag=True,
    default=False,
    help='Report warnings as errors.',
)
@option(
    '--strict',
    is_flag=True,
    default=False,
    help='Fail on extension loading issues.',
)
@argument('source', type=InputFilepath)
def check(source: Path, warnings_as_errors: bool, strict: bool) -> None:
    """Compile a markup file.

    Args:
        source: Path to the markup file.
        warnings_as_errors: Report warnings as errors regardless of the environment.
        strict: Fail on extension loading issues regardless of the environment.
    """
    overrides = {
        key: value
        for key, value in (('warnings_as_errors', warnings_as_errors), ('strict', strict))
        if value
    }

    try:
        root = MarkupReader().read_file(source)
    except MarkupError as error:
        raise ClickException(str(error)) from error

    compiler = Compiler(CompilerSettings(**overrides))
    result = compiler.compile(root)

    for diagnostic in result.diagnostics:
        echo(str(diagnostic), err=True)

    if result.records:
        echo(_dump_records(result), nl=False)

    if result.errors:
        raise SystemExit(1)


if __name__ == '__main__':
    cli()
