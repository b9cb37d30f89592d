"""Routing of BAL markup to its validators.

Parent and node local names are mapped to closed enumerations and routed
with an explicit `match` over the pair. Pairs without a route are
reported as unexpected; nothing in the BAL namespace is ignored.
"""

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from balext.extensions import CompilerExtension
from balext.names import BAL_NAMESPACE, HOST_NAMESPACES

from .applications import (
    parse_managed_bootstrapper_application_host_element,
    parse_standard_bootstrapper_application_element,
)
from .conditions import parse_condition_element
from .variables import parse_overridable_attribute

if TYPE_CHECKING:
    from balext.core import ParseContext
    from balext.markup import MarkupAttribute, MarkupNode, SourceLocation
    from balext.results import ElementResult

logger = logging.getLogger(__name__)


class ParentKind(StrEnum):
    """Host elements BAL markup can appear under."""

    BUNDLE = 'Bundle'
    FRAGMENT = 'Fragment'
    BOOTSTRAPPER_APPLICATION_REF = 'BootstrapperApplicationRef'
    VARIABLE = 'Variable'
    OTHER = ''

    @classmethod
    def of(cls, node: 'MarkupNode | None') -> 'ParentKind':
        """Classify a parent node; foreign and unknown parents are `OTHER`."""
        if node is None or node.namespace not in HOST_NAMESPACES:
            return cls.OTHER

        try:
            return cls(node.local_name)
        except ValueError:
            return cls.OTHER


class ElementKind(StrEnum):
    """Elements of the BAL namespace."""

    CONDITION = 'Condition'
    STANDARD_BOOTSTRAPPER_APPLICATION = 'WixStandardBootstrapperApplication'
    MANAGED_BOOTSTRAPPER_APPLICATION_HOST = 'WixManagedBootstrapperApplicationHost'
    OTHER = ''

    @classmethod
    def of(cls, node: 'MarkupNode') -> 'ElementKind':
        """Classify a BAL element; anything else is `OTHER`."""
        if node.namespace != BAL_NAMESPACE:
            return cls.OTHER

        try:
            return cls(node.local_name)
        except ValueError:
            return cls.OTHER


class AttributeKind(StrEnum):
    """Attributes of the BAL namespace placed on host elements."""

    OVERRIDABLE = 'Overridable'
    OTHER = ''

    @classmethod
    def of(cls, attribute: 'MarkupAttribute') -> 'AttributeKind':
        """Classify a BAL attribute; anything else is `OTHER`."""
        if attribute.namespace != BAL_NAMESPACE:
            return cls.OTHER

        try:
            return cls(attribute.local_name)
        except ValueError:
            return cls.OTHER


class BalCompiler(CompilerExtension):
    """Compiler extension of the bootstrapper application layer.

    Attributes:
        condition_location: Location of the first condition of the current
            document that compiled without errors, `None` until one does.
    """

    namespace = BAL_NAMESPACE
    name = 'bal'

    def __init__(self) -> None:
        self.condition_location: SourceLocation | None = None

    def reset(self) -> None:
        """Clear the condition location latch."""
        self.condition_location = None

    def parse_element(self, parent: 'MarkupNode | None', element: 'MarkupNode',
                      context: 'ParseContext') -> 'ElementResult':
        """Route a BAL element to its validator.

        Args:
            parent: Parent element, `None` for a document root.
            element: BAL element.
            context: Parse context of this invocation.

        Returns:
            Result of the validator, or an unexpected element diagnostic.
        """
        logger.debug('Parsing %s under %s', element.local_name,
                     parent.local_name if parent is not None else '<root>')

        match ParentKind.of(parent), ElementKind.of(element):
            case (ParentKind.BUNDLE | ParentKind.FRAGMENT, ElementKind.CONDITION):
                result = parse_condition_element(element, context)
                if result.records and self.condition_location is None:
                    self.condition_location = element.location
                return result

            case (ParentKind.BOOTSTRAPPER_APPLICATION_REF,
                  ElementKind.STANDARD_BOOTSTRAPPER_APPLICATION):
                return parse_standard_bootstrapper_application_element(element, context)

            case (ParentKind.BOOTSTRAPPER_APPLICATION_REF,
                  ElementKind.MANAGED_BOOTSTRAPPER_APPLICATION_HOST):
                return parse_managed_bootstrapper_application_host_element(element, context)

        context.unexpected_element(parent, element)

        return context.result()

    def parse_attribute(self, parent: 'MarkupNode', attribute: 'MarkupAttribute',
                        context: 'ParseContext') -> 'ElementResult':
        """Route a BAL attribute found on a host element.

        Args:
            parent: Element carrying the attribute.
            attribute: BAL attribute.
            context: Parse context of this invocation.

        Returns:
            Result of the handler, or an unexpected attribute diagnostic.
        """
        logger.debug('Parsing @%s of %s', attribute.local_name, parent.local_name)

        match ParentKind.of(parent), AttributeKind.of(attribute):
            case (ParentKind.VARIABLE, AttributeKind.OVERRIDABLE):
                return parse_overridable_attribute(parent, attribute, context)

        context.unexpected_attribute(parent, attribute)

        return context.result()
