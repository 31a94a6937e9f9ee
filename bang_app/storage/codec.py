"""
Wire codec for redirect records.

A record is persisted as one Redis list per slug:

    [target_url, admin_key, click_count]

Positions are part of the format and the registry reads single positions
(LINDEX) without loading the whole list, hence the index constants.

One historical variant of the service wrote two-element lists (no click
counter). Those are decoded with clicks = 0.
"""

from typing import List, Optional, Sequence

from bang_app.models.record import RedirectRecord


TARGET_INDEX = 0
ADMIN_KEY_INDEX = 1
CLICKS_INDEX = 2

LEGACY_LENGTH = 2
RECORD_LENGTH = 3


def encode_record(record: RedirectRecord) -> List[str]:
    """Turn a record into the list elements to RPUSH"""
    return [record.target_url, record.admin_key, str(record.clicks)]


def decode_clicks(raw: Optional[str]) -> int:
    """
    Parse a stored click counter.

    Missing (legacy records) and unparseable values count as 0, matching how
    the counter was always read back before being incremented.
    """
    if raw is None:
        return 0
    try:
        value = int(raw)
    except ValueError:
        return 0
    return max(value, 0)


def decode_record(elements: Sequence[str]) -> Optional[RedirectRecord]:
    """
    Build a record from the full stored list (LRANGE 0 -1).

    Returns None for empty or malformed lists, which callers treat as absent.
    """
    if len(elements) < LEGACY_LENGTH or not elements[TARGET_INDEX]:
        return None

    clicks = elements[CLICKS_INDEX] if len(elements) >= RECORD_LENGTH else None
    return RedirectRecord(
        target_url=elements[TARGET_INDEX],
        admin_key=elements[ADMIN_KEY_INDEX],
        clicks=decode_clicks(clicks),
    )
