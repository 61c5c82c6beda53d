"""
Shared schema helpers
"""
from datetime import datetime
from typing import Optional
from staffdesk.utils.datetime_utils import iso_z


def serialize_dt(dt: Optional[datetime]) -> Optional[str]:
    """Serialize datetime as UTC ISO-8601 with Z for API responses."""
    return iso_z(dt)
