"""Tests for the compiler host and extension loading."""

from typing import TYPE_CHECKING

import pydantic
import pytest

from balext.config import CompilerSettings
from balext.core import Compiler
from balext.diagnostics import DiagnosticKind, Severity
from balext.errors import CompilationError, PluginError, PluginWarning
from balext.names import BAL_NAMESPACE
from balext.records import Table
from tests.examples.bundles import BUNDLE_TEMPLATE
from tests.examples.extensions import UTIL_NAMESPACE, ShadowingExtension, UtilExtension, util

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mock import MockType

    from balext.markup import MarkupReader
    from balext.results import CompilationResult

DOCUMENT = BUNDLE_TEMPLATE.format(body=(
    '<bal:Condition Message="first">A</bal:Condition>'
    '<BootstrapperApplicationRef>'
    '<bal:WixStandardBootstrapperApplication LicenseFile="license.rtf" util:Marker="x" />'
    '</BootstrapperApplicationRef>'
    '<util:Search />'
    '<Variable Name="V" bal:Overridable="yes" />'
))


def test_loading(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Register extensions from entry points."""
    patch_entrypoints(util)

    compiler = Compiler()

    assert compiler.extension_for(UTIL_NAMESPACE) is util
    assert set(compiler.extensions) == {BAL_NAMESPACE, UTIL_NAMESPACE}


def test_loading_class(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Instantiate extension classes published as entry points."""
    patch_entrypoints(UtilExtension)

    compiler = Compiler()

    assert isinstance(compiler.extension_for(UTIL_NAMESPACE), UtilExtension)


def test_settings_reject_empty_group() -> None:
    """Require a non-empty entry point group."""
    with pytest.raises(pydantic.ValidationError):
        CompilerSettings(entrypoint_group='')


def test_loading_disabled(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Skip entry points when auto loading is disabled."""
    entry_points = patch_entrypoints(util)

    compiler = Compiler(auto_load=False)

    entry_points.assert_not_called()
    assert compiler.extension_for(UTIL_NAMESPACE) is None


def test_loading_skip_with_failed_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify skipping of extensions that fail during loading."""
    patch_entrypoints(None, raises=SyntaxError)
    with pytest.warns(PluginWarning, match=r'^Failed to load entrypoint'):
        Compiler()


def test_loading_fail_with_failed_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing of extensions that fail during loading with strict mode."""
    patch_entrypoints(None, raises=SyntaxError)
    with pytest.raises(PluginError, match=r'^Failed to load entrypoint'):
        Compiler(CompilerSettings(strict=True))


def test_loading_skip_with_invalid_extension(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify skipping of objects that are not extensions."""
    patch_entrypoints({})
    with pytest.warns(PluginWarning, match=r'object is not an extension$'):
        Compiler()


def test_loading_fail_with_invalid_extension(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing on objects that are not extensions with strict mode."""
    patch_entrypoints({})
    with pytest.raises(PluginError, match=r'object is not an extension$') as error:
        Compiler(CompilerSettings(strict=True))

    assert error.value.entrypoint is not None


def test_loading_shadowing(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Warn when an extension replaces another one."""
    shadow = ShadowingExtension()
    patch_entrypoints(shadow)
    with pytest.warns(PluginWarning, match=r'is shadowing an existing$'):
        compiler = Compiler()

    assert compiler.extension_for(BAL_NAMESPACE) is shadow


def test_loading_fail_with_shadowing(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Fail when an extension replaces another one with strict mode."""
    patch_entrypoints(ShadowingExtension())
    with pytest.raises(PluginError, match=r"^Extension 'shadow' from .* is shadowing an existing$"):
        Compiler(CompilerSettings(strict=True))


def test_strict_from_environment(patch_entrypoints: 'Callable[..., MockType]',
                                 monkeypatch: pytest.MonkeyPatch) -> None:
    """Read settings from the environment."""
    monkeypatch.setenv('BALEXT_STRICT', 'true')
    patch_entrypoints({})

    with pytest.raises(PluginError):
        Compiler()


def test_compile_with_extension(patch_entrypoints: 'Callable[..., MockType]',
                                reader: 'MarkupReader') -> None:
    """Delegate foreign markup and keep records in document order."""
    patch_entrypoints(util)

    result = Compiler().compile(reader.read(DOCUMENT))

    assert result.diagnostics == ()
    assert [record.table for record in result.records] == [
        Table.CONDITION,
        Table.WIX_VARIABLE,
        Table.OVERRIDABLE_VARIABLE,
    ]


def test_compile_unhandled_namespace(compiler: Compiler, reader: 'MarkupReader') -> None:
    """Warn about namespaces without extension and keep records."""
    result = compiler.compile(reader.read(DOCUMENT))

    assert [(item.severity, item.kind) for item in result.diagnostics] == [
        (Severity.WARNING, DiagnosticKind.UNHANDLED_EXTENSION),
        (Severity.WARNING, DiagnosticKind.UNHANDLED_EXTENSION),
    ]
    assert 'Marker attribute belongs to namespace' in result.diagnostics[0].message
    assert 'Search element under Bundle belongs to namespace' in result.diagnostics[1].message
    assert len(result.records) == 3
    assert result.errors == ()


def test_compile_warnings_as_errors(reader: 'MarkupReader') -> None:
    """Escalate warnings and drop the records of their elements."""
    compiler = Compiler(CompilerSettings(warnings_as_errors=True), auto_load=False)

    result = compiler.compile(reader.read(DOCUMENT))

    assert len(result.errors) == 2
    assert [record.table for record in result.records] == [
        Table.CONDITION,
        Table.OVERRIDABLE_VARIABLE,
    ]


def test_compile_foreign_error(patch_entrypoints: 'Callable[..., MockType]',
                               reader: 'MarkupReader') -> None:
    """Drop records of an element when a foreign attribute fails."""
    patch_entrypoints(util)
    content = BUNDLE_TEMPLATE.format(body=(
        '<bal:Condition Message="m" util:Unknown="x">A</bal:Condition>'
        '<bal:Condition Message="n" util:Marker="">B</bal:Condition>'
        '<bal:Condition Message="o"><util:Search />C</bal:Condition>'
        '<bal:Condition Message="p"><util:Find />D</bal:Condition>'
    ))

    result = Compiler().compile(reader.read(content))

    assert [item.kind for item in result.errors] == [
        DiagnosticKind.STRUCTURAL,
        DiagnosticKind.VALUE_INVALID,
        DiagnosticKind.STRUCTURAL,
    ]
    assert [record['Message'] for record in result.records] == ['o']


def test_compile_foreign_attribute_on_host(patch_entrypoints: 'Callable[..., MockType]',
                                           reader: 'MarkupReader') -> None:
    """Route foreign attributes of host elements to their extension."""
    patch_entrypoints(util)
    content = BUNDLE_TEMPLATE.format(body='<Variable Name="V" util:Other="x" other:Flag="1" />')

    result = Compiler().compile(reader.read(content))

    assert [(item.severity, item.kind) for item in result.diagnostics] == [
        (Severity.ERROR, DiagnosticKind.STRUCTURAL),
        (Severity.WARNING, DiagnosticKind.UNHANDLED_EXTENSION),
    ]


def test_raise_for_errors(compile_bundle: 'Callable[..., CompilationResult]') -> None:
    """Convert errors of a compilation into an exception."""
    result = compile_bundle('<bal:Condition />')

    with pytest.raises(CompilationError, match=r'^Compilation failed with 2 errors') as error:
        result.raise_for_errors()

    assert len(error.value.diagnostics) == 2


def test_raise_for_errors_ignores_warnings(compile_bundle: 'Callable[..., CompilationResult]') -> None:
    """Do not raise for warnings."""
    compile_bundle('<other:Element />').raise_for_errors()
