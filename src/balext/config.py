"""Compiler runtime settings.

Settings are resolved from `BALEXT_*` environment variables; explicit
constructor arguments take precedence over the environment.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from balext.models import SettingsModel

#: Entry point group foreign compiler extensions are discovered from.
DEFAULT_ENTRYPOINT_GROUP = 'balext_extensions'


class CompilerSettings(SettingsModel):
    """Settings of the compiler host."""

    model_config = SettingsConfigDict(
        env_prefix='BALEXT_',
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=False,
        title='Strict extension loading',
        description=(
            'Raise on extension loading issues such as failing entry points '
            'or namespaces registered twice, instead of emitting warnings.'
        ),
    )

    warnings_as_errors: bool = Field(
        default=False,
        title='Warnings as errors',
        description=(
            'Report warning diagnostics as errors. '
            'Escalated warnings suppress the records of their element.'
        ),
    )

    entrypoint_group: str = Field(
        default=DEFAULT_ENTRYPOINT_GROUP,
        min_length=1,
        title='Extensions entry point group',
        description='Entry point group scanned for foreign compiler extensions.',
    )
