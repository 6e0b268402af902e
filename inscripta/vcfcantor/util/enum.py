"""
Enumeration utilities.
"""
from enum import Enum
from typing import Optional


class HasMemberMixin(Enum):
    """Adds `has_value()`, `has_name()` and a forgiving `from_value()` lookup to enumerations."""

    @classmethod
    def has_value(cls, value) -> bool:
        return value in cls._value2member_map_

    @classmethod
    def has_name(cls, name) -> bool:
        return name in cls.__members__

    @classmethod
    def from_value(cls, value: Optional[str], default: Optional["HasMemberMixin"] = None) -> "HasMemberMixin":
        """
        Look up a member by value. An exact match wins; otherwise the comparison is repeated case-insensitively.

        Values that match no member never raise. They resolve to ``default`` if one is given, and otherwise to the
        ``UNKNOWN`` member of the enumeration. Enumerations without an ``UNKNOWN`` member must pass a default.

        Args:
            value: Raw text to look up.
            default: Member to return when nothing matches.

        Returns:
            The matching member, ``default`` or ``UNKNOWN``.
        """
        if value is not None:
            if value in cls._value2member_map_:
                return cls._value2member_map_[value]
            folded = value.casefold()
            for member in cls:
                if isinstance(member.value, str) and member.value.casefold() == folded:
                    return member
        if default is not None:
            return default
        if "UNKNOWN" in cls.__members__:
            return cls.__members__["UNKNOWN"]
        raise ValueError(f"{value} is not a valid {cls.__name__} and no default was provided")
