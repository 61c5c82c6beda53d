"""Utility functions for handling enum/string values safely."""
from enum import Enum


def enum_to_str(v):
    """
    Safely convert enum or string value to string.

    Examples:
        >>> enum_to_str(Role.SUPER_ADMIN)
        'SUPER_ADMIN'
        >>> enum_to_str('SUPER_ADMIN')
        'SUPER_ADMIN'
        >>> enum_to_str(None)
    """
    if v is None:
        return None
    if isinstance(v, Enum):
        return v.value
    return str(v)


def enum_values(data: dict) -> dict:
    """Copy of data with enum members replaced by their values (for String columns)."""
    return {k: enum_to_str(v) if isinstance(v, Enum) else v for k, v in data.items()}
