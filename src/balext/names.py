"""Qualified markup names and namespace constants.

This module defines the namespaces known to the compiler and the
qualified name primitive used by markup nodes and attributes.

The rules defined here form part of the public extension contract and are
relied upon by the markup reader, the compiler host and every extension.
"""

from re import ASCII
from re import compile as regexp
from typing import NamedTuple, Self

#: Namespace of the bootstrapper application layer extension.
BAL_NAMESPACE = 'http://wixtoolset.org/schemas/v4/wxs/bal'

#: Namespace of the host authoring language.
HOST_NAMESPACE = 'http://wixtoolset.org/schemas/v4/wxs'

#: Namespaces whose elements belong to the host compiler.
#: Unqualified names are treated as host names.
HOST_NAMESPACES = frozenset({'', HOST_NAMESPACE})

#: Compiled pattern for names in Clark notation (`{namespace}local`).
CLARK_PATTERN = regexp(
    r'^(\{(?P<namespace>[^}]*)\})?(?P<local>[^{}]+)$',
    flags=ASCII,
)


class QName(NamedTuple):
    """Namespace-qualified name of a markup element or attribute."""

    namespace: str
    local: str

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse a name in Clark notation.

        Args:
            value: Name such as `{http://example.com}Element` or `Element`.

        Returns:
            Qualified name; unqualified names get the empty namespace.

        Raises:
            ValueError: If the value is not a valid Clark name.
        """
        if not (match := CLARK_PATTERN.match(value)):
            raise ValueError(f'{value!r} is not a qualified name')

        return cls(match['namespace'] or '', match['local'])

    @property
    def clark(self) -> str:
        """Name in Clark notation."""
        if not self.namespace:
            return self.local

        return f'{{{self.namespace}}}{self.local}'

    def __str__(self) -> str:
        return self.clark
