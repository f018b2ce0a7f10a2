"""
Scope definitions.
"""

from enum import Enum
from typing import Union


class ComponentScope(str, Enum):
    """Component lifetime scopes."""

    SINGLETON = "singleton"  # One shared instance per container
    PROTOTYPE = "prototype"  # New instance every resolve

    @property
    def cacheable(self) -> bool:
        return self is ComponentScope.SINGLETON

    @classmethod
    def parse(cls, value: Union[str, "ComponentScope", None]) -> "ComponentScope":
        """
        Normalise a scope given as enum member or string.

        ``None`` means the default scope (singleton).

        Raises:
            ValueError: If the name is not a known scope
        """
        if value is None:
            return cls.SINGLETON
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown component scope '{value}' (expected one of: {known})") from None
