"""
JSON serializer utility for converting Python objects to JSON-safe values
"""
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel


def sanitize_for_json(value: Any) -> Any:
    """
    Recursively convert Python objects to JSON-safe values.
    Use before saving to JSON columns (audit_logs.meta_json).
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: sanitize_for_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_json(item) for item in value]
    if isinstance(value, BaseModel):
        return sanitize_for_json(value.model_dump())
    return str(value)
