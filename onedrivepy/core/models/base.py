"""Parsing helpers shared by the resource models."""
import re
from datetime import datetime
from typing import Any, Optional

_FRACTION = re.compile(r'\.(\d+)')


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as returned by Graph.

    Graph uses a trailing 'Z' and up to 7 fractional digits, which older
    ``datetime.fromisoformat`` versions reject.

    Args:
        value: Timestamp string, datetime or None

    Returns:
        Timezone-aware datetime, or None for missing/unparsable values
    """
    if value is None or isinstance(value, datetime):
        return value

    text = str(value).strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'

    text = _FRACTION.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), text, count=1)

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
