"""Bootstrapper application layer extension.

The builtin extension owning the BAL namespace. It validates bundle
launch conditions, the configuration of the standard and managed
bootstrapper applications and overridable variables, and emits their
records.
"""

from .applications import MANAGED_BOOTSTRAPPER_APPLICATION_HOST, STANDARD_BOOTSTRAPPER_APPLICATION
from .conditions import CONDITION
from .dispatcher import AttributeKind, BalCompiler, ElementKind, ParentKind

#: Element schemas of the BAL namespace.
SCHEMAS = (
    CONDITION,
    STANDARD_BOOTSTRAPPER_APPLICATION,
    MANAGED_BOOTSTRAPPER_APPLICATION_HOST,
)

__all__ = (
    'CONDITION',
    'MANAGED_BOOTSTRAPPER_APPLICATION_HOST',
    'SCHEMAS',
    'STANDARD_BOOTSTRAPPER_APPLICATION',
    'AttributeKind',
    'BalCompiler',
    'ElementKind',
    'ParentKind',
)
