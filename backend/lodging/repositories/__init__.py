"""
Data access layer: narrow async query functions over the ORM models.

Services call these instead of building queries themselves, so each
lookup the booking workflow depends on has exactly one definition.
"""

from typing import Optional

# Primary keys are 32-bit INTEGER columns; larger ids cannot exist and
# would make the driver raise instead of returning no row.
MAX_ID = 2**31 - 1


def id_in_range(value: Optional[int]) -> bool:
    return value is not None and 0 < value <= MAX_ID
