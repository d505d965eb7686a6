"""
user_api/utils/time_utils.py

Purpose: Timestamp helpers

- UTC timestamps at the precision MongoDB stores
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Returns the current UTC time truncated to milliseconds.

    BSON dates carry millisecond precision, so truncating up front keeps
    the value we return identical to the value read back later.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)
