"""
Timestamp parsing for ad segment markers ("1:30", "1:02:45").
"""

from typing import Optional

# Multipliers for s, m:s and h:m:s forms
_PART_MULTIPLIERS = {
    1: (1,),
    2: (60, 1),
    3: (3600, 60, 1),
}


def parse_timestamp(text: Optional[str]) -> Optional[int]:
    """
    Convert a colon-separated timestamp into seconds.

    Args:
        text: "s", "m:s" or "h:m:s" with non-negative integer parts

    Returns:
        Seconds, or None if the text isn't one of those forms
    """
    if not text:
        return None

    parts = text.strip().split(':')
    multipliers = _PART_MULTIPLIERS.get(len(parts))
    if multipliers is None:
        return None

    if not all(part.isascii() and part.isdigit() for part in parts):
        return None

    return sum(int(part) * multiplier for part, multiplier in zip(parts, multipliers))
