"""Base Pydantic models for compiler elements.

This module defines the foundational model classes used by markup nodes,
schemas, records and diagnostics. It enforces immutability and strict
schema validation so that compilation is deterministic and nothing produced
by a validator can be altered on its way to the linker.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all compiler structures.

    Design principles enforced by this model:
        - Immutability: nodes, records and diagnostics cannot be modified
          after creation. Coercion derives new values instead of
          rewriting the markup it reads.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in extension code.

    All compiler models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for compiler runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so unrelated environment variables never break configuration.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )


class DescribedMixin(SchemaModel):
    """Mixin providing element self-documentation.

    The fields defined in this model do not affect compilation and are
    used for the vocabulary listing and tooling.
    """

    title: str | None = Field(
        default=None,
        title='Title',
        description='Short human-readable title.',
    )

    description: str | None = Field(
        default=None,
        title='Description',
        description='Detailed human-readable description.',
    )
