"""
Duration Parsing

Converts YouTube contentDetails durations (ISO 8601, e.g. PT1H2M3S)
into whole seconds.
"""

import re
from typing import Optional

_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def parse_duration(duration_str: Optional[str]) -> int:
    """
    Parse ISO 8601 duration to seconds.

    Examples:
        PT1H2M3S -> 3723
        PT45S -> 45
        PT2M -> 120
        "" / garbage -> 0
    """
    if not duration_str or not isinstance(duration_str, str):
        return 0

    match = _DURATION_RE.match(duration_str.strip().upper())
    if not match:
        return 0

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds
