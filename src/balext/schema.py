"""Declarative element schemas.

Each recognized element declares its attributes through an
`ElementSchema`: which attributes exist, how their values are coerced,
which are required and which may not be combined. The parse context uses
the schema to validate and coerce attributes; element validators add the
rules a schema cannot express.
"""

from typing import TYPE_CHECKING, Self

from pydantic import Field, model_validator

from balext.models import DescribedMixin, SchemaModel
from balext.values import ValueKind

if TYPE_CHECKING:
    from collections.abc import Iterator


class AttributeSpec(DescribedMixin, SchemaModel):
    """Declarative attribute definition."""

    name: str = Field(
        title='Attribute name',
        description='Local name of the attribute.',
    )

    kind: ValueKind = Field(
        default=ValueKind.NON_EMPTY_TEXT,
        title='Value kind',
        description='Coercion applied to the raw attribute text.',
    )

    required: bool = Field(
        default=False,
        title='Required flag',
        description='Whether the attribute must be present.',
    )

    exclusive_with: tuple[str, ...] = Field(
        default=(),
        title='Exclusive attributes',
        description='Attributes of the same element that may not be present together with this one.',
    )


class ElementSchema(DescribedMixin, SchemaModel):
    """Declarative schema of an element and its attributes."""

    name: str = Field(
        title='Element name',
        description='Local name of the element.',
    )

    attributes: tuple[AttributeSpec, ...] = Field(
        default=(),
        title='Attributes',
        description='Attributes the element accepts.',
    )

    @model_validator(mode='after')
    def check_attributes(self) -> Self:
        """Check attribute names are unique and exclusions are declared.

        Returns:
            Self.

        Raises:
            ValueError: If an attribute is declared twice or excludes
                an attribute the schema does not declare.
        """
        names: set[str] = set()
        for attribute in self.attributes:
            if attribute.name in names:
                raise ValueError(f'attribute `{attribute.name}` is not unique in schema')
            names.add(attribute.name)

        for attribute in self.attributes:
            if unknown := set(attribute.exclusive_with).difference(names):
                raise ValueError(
                    f'attribute `{attribute.name}` excludes undeclared {sorted(unknown)!r}',
                )

        return self

    def get(self, name: str) -> AttributeSpec | None:
        """Look up an attribute by local name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute

        return None

    def exclusive_pairs(self) -> 'Iterator[tuple[str, str]]':
        """Iterate over exclusive attribute pairs, each pair once.

        Pairs are ordered by attribute declaration.
        """
        order = [attribute.name for attribute in self.attributes]
        seen: set[frozenset[str]] = set()

        for attribute in self.attributes:
            for other in attribute.exclusive_with:
                pair = frozenset((attribute.name, other))
                if pair in seen:
                    continue
                seen.add(pair)
                yield tuple(sorted(pair, key=order.index))  # type: ignore[misc]
