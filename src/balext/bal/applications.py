"""Bootstrapper application references.

Both elements configure a builtin bootstrapper application referenced by
`BootstrapperApplicationRef`. Their attributes become bundle variables
consumed by the application at runtime:

- `WixStandardBootstrapperApplication` customizes the standard UI;
- `WixManagedBootstrapperApplicationHost` customizes the prerequisite UI
  shown by the managed host before the managed application can start.

The two elements differ in their license rule. The standard UI needs at
least one of `LicenseFile` and `LicenseUrl` and rejects both together; an
empty `LicenseUrl` still counts as given. The managed host needs exactly
one of them, both non-empty.
"""

from typing import TYPE_CHECKING

from balext import diagnostics
from balext.records import Record, Table
from balext.schema import AttributeSpec, ElementSchema
from balext.values import ValueKind, YesNo

if TYPE_CHECKING:
    from collections.abc import Mapping

    from balext.core import ParseContext
    from balext.markup import MarkupNode
    from balext.results import ElementResult
    from balext.values import AttributeValue

LAUNCH_TARGET_VARIABLE = 'LaunchTarget'

#: Bundle variables set from standard UI attributes, in emission order.
STANDARD_VARIABLES: 'Mapping[str, str]' = {
    'LicenseFile': 'WixStdbaLicenseRtf',
    'LicenseUrl': 'WixStdbaLicenseUrl',
    'LogoFile': 'WixStdbaLogo',
    'LogoSideFile': 'WixStdbaLogoSide',
    'ThemeFile': 'WixStdbaThemeXml',
    'LocalizationFile': 'WixStdbaThemeWxl',
}

#: Standard UI flags mapped to `WixStdbaOptions` columns, in column order.
STANDARD_OPTIONS: 'Mapping[str, str]' = {
    'SuppressOptionsUI': 'SuppressOptionsUI',
    'SuppressDowngradeFailure': 'SuppressDowngradeFailure',
    'SuppressRepair': 'SuppressRepair',
    'ShowVersion': 'ShowVersion',
}

#: Bundle variables set from managed host attributes, in emission order.
MANAGED_VARIABLES: 'Mapping[str, str]' = {
    'LicenseFile': 'WixMbaPrereqLicenseRtf',
    'LicenseUrl': 'WixMbaPrereqLicenseUrl',
    'LogoFile': 'PreqbaLogo',
    'ThemeFile': 'PreqbaThemeXml',
    'LocalizationFile': 'PreqbaThemeWxl',
    'NetFxPackageId': 'WixMbaPrereqPackageId',
}

STANDARD_BOOTSTRAPPER_APPLICATION = ElementSchema(
    name='WixStandardBootstrapperApplication',
    description='Configures the standard bootstrapper application UI.',
    attributes=(
        AttributeSpec(
            name='LaunchTarget',
            description='Target to run from the success page.',
        ),
        AttributeSpec(
            name='LicenseFile',
            exclusive_with=('LicenseUrl',),
            description='Rich text license shown by the UI.',
        ),
        AttributeSpec(
            name='LicenseUrl',
            kind=ValueKind.TEXT,
            exclusive_with=('LicenseFile',),
            description='License link; an empty value shows no license.',
        ),
        AttributeSpec(name='LogoFile', description='Logo image.'),
        AttributeSpec(name='LogoSideFile', description='Side logo image.'),
        AttributeSpec(name='ThemeFile', description='Theme definition.'),
        AttributeSpec(name='LocalizationFile', description='Theme localization.'),
        AttributeSpec(
            name='SuppressOptionsUI',
            kind=ValueKind.YES_NO,
            description='Hide the options button.',
        ),
        AttributeSpec(
            name='SuppressDowngradeFailure',
            kind=ValueKind.YES_NO,
            description='Succeed silently when a newer version is installed.',
        ),
        AttributeSpec(
            name='SuppressRepair',
            kind=ValueKind.YES_NO,
            description='Hide the repair button.',
        ),
        AttributeSpec(
            name='ShowVersion',
            kind=ValueKind.YES_NO,
            description='Show the bundle version in the UI.',
        ),
    ),
)

MANAGED_BOOTSTRAPPER_APPLICATION_HOST = ElementSchema(
    name='WixManagedBootstrapperApplicationHost',
    description='Configures the prerequisite UI of the managed application host.',
    attributes=(
        AttributeSpec(name='LicenseFile', description='Rich text license shown by the UI.'),
        AttributeSpec(name='LicenseUrl', description='License link.'),
        AttributeSpec(name='LogoFile', description='Logo image.'),
        AttributeSpec(name='ThemeFile', description='Theme definition.'),
        AttributeSpec(name='LocalizationFile', description='Theme localization.'),
        AttributeSpec(name='NetFxPackageId', description='Package installing the .NET Framework.'),
    ),
)


def _emit_variables(node: 'MarkupNode', context: 'ParseContext',
                    values: 'Mapping[str, AttributeValue]',
                    variables: 'Mapping[str, str]') -> None:
    """Emit a `WixVariable` record for every populated attribute."""
    for attribute, variable in variables.items():
        if (value := values.get(attribute)) is not None:
            context.emit(Record.create(
                Table.WIX_VARIABLE,
                node.location,
                Id=variable,
                Value=value,
            ))


def parse_standard_bootstrapper_application_element(
    node: 'MarkupNode', context: 'ParseContext',
) -> 'ElementResult':
    """Validate the standard UI configuration and emit its records.

    Args:
        node: `WixStandardBootstrapperApplication` element.
        context: Parse context of the invocation.

    Returns:
        The launch target variable, one `WixVariable` record per populated
        asset, and one `WixStdbaOptions` record when any flag is `yes`.
    """
    values = context.collect(node, STANDARD_BOOTSTRAPPER_APPLICATION)
    context.parse_for_extension_elements(node)

    if not values.get('LicenseFile') and values.get('LicenseUrl') is None:
        context.on_message(diagnostics.expected_one_of_attributes(node, 'LicenseFile', 'LicenseUrl'))

    if context.encountered_error:
        return context.result()

    if launch_target := values.get('LaunchTarget'):
        context.emit(Record.create(
            Table.VARIABLE,
            node.location,
            Id=LAUNCH_TARGET_VARIABLE,
            Value=launch_target,
            Type='string',
        ))

    _emit_variables(node, context, values, STANDARD_VARIABLES)

    options = {
        column: 1
        for attribute, column in STANDARD_OPTIONS.items()
        if values.get(attribute) is YesNo.YES
    }
    if options:
        context.emit(Record.create(Table.STANDARD_UI_OPTIONS, node.location, **options))

    return context.result()


def parse_managed_bootstrapper_application_host_element(
    node: 'MarkupNode', context: 'ParseContext',
) -> 'ElementResult':
    """Validate the managed host configuration and emit its records.

    Args:
        node: `WixManagedBootstrapperApplicationHost` element.
        context: Parse context of the invocation.

    Returns:
        One `WixVariable` record per populated attribute.
    """
    values = context.collect(node, MANAGED_BOOTSTRAPPER_APPLICATION_HOST)
    context.parse_for_extension_elements(node)

    if bool(values.get('LicenseFile')) == bool(values.get('LicenseUrl')):
        context.on_message(diagnostics.expected_either_attribute(node, 'LicenseFile', 'LicenseUrl'))

    if not context.encountered_error:
        _emit_variables(node, context, values, MANAGED_VARIABLES)

    return context.result()
