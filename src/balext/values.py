"""Core value types for attribute coercion and record fields.

This module defines the value kinds attributes are coerced to, the
tri-state yes/no type, and the types allowed in record fields.
"""

from enum import StrEnum

#: A record field holds either text, an integer flag, or nothing.
type FieldValue = str | int | None


class ValueKind(StrEnum):
    """Coercion applied to a raw attribute value."""

    #: Any string, the empty string included.
    TEXT = 'text'
    #: Any string except the empty string.
    NON_EMPTY_TEXT = 'non-empty text'
    #: A `yes` or `no` token, see `YesNo`.
    YES_NO = 'yes/no'


class YesNo(StrEnum):
    """Tri-state yes/no value.

    An absent attribute is `NOT_SET`, which is distinct from an explicit
    `NO`. `ILLEGAL` is the sentinel returned after a value diagnostic.
    """

    YES = 'yes'
    NO = 'no'
    NOT_SET = 'not set'
    ILLEGAL = 'illegal'

    @classmethod
    def from_token(cls, value: str) -> 'YesNo':
        """Convert a raw attribute value into a tri-state value.

        Args:
            value: Raw attribute text.

        Returns:
            `YES` or `NO` for recognized tokens (case-insensitive),
            otherwise `ILLEGAL`.
        """
        match value.lower():
            case 'yes':
                return cls.YES
            case 'no':
                return cls.NO

        return cls.ILLEGAL


#: Coerced attribute value as returned by the parse context.
type AttributeValue = str | YesNo | None
