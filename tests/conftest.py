"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

import pytest

from balext.config import DEFAULT_ENTRYPOINT_GROUP, CompilerSettings
from balext.core import Compiler
from balext.markup import MarkupReader
from tests.examples.bundles import BUNDLE_TEMPLATE

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from balext.results import CompilationResult


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove compiler settings from the environment of each test."""
    for name in ('BALEXT_STRICT', 'BALEXT_WARNINGS_AS_ERRORS', 'BALEXT_ENTRYPOINT_GROUP'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reader() -> MarkupReader:
    """Provide a markup reader."""
    return MarkupReader()


@pytest.fixture
def compiler() -> Compiler:
    """Provide a compiler with the builtin extension only.

    Entry points are not scanned, so installed extensions never
    influence the results of a test.
    """
    return Compiler(CompilerSettings(), auto_load=False)


@pytest.fixture
def compile_bundle(compiler: Compiler,
                   reader: MarkupReader) -> 'Callable[[str], CompilationResult]':
    """Provide a function compiling markup placed inside a bundle.

    The bundle declares the host namespace as default and as `wix`, and the `bal`,
    `util` and `other` prefixes.
    """
    def compile_(body: str) -> 'CompilationResult':
        return compiler.compile(reader.read(BUNDLE_TEMPLATE.format(body=body)))

    return compile_


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of extensions in the `balext_extensions` entry point group.

    The returned factory allows configuring:
    - loadable extensions (instances, classes or arbitrary objects),
    - or an exception raised during extension loading,
    - or an empty entry point list.
    """
    def patch(*extensions: object, raises: Exception | type[Exception] | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled extension configuration.

        Args:
            extensions: Objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.
                Used to simulate extension load failures.

        Returns:
            A mock patch object produced by `mocker.patch` that replaces
            `importlib.metadata.entry_points` for the duration of the test.
        """
        entrypoints = []
        for extension in extensions:
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = DEFAULT_ENTRYPOINT_GROUP
            ep.name = 'tests'
            ep.value = 'tests.examples.extensions:util'
            ep.load.return_value = extension
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch
