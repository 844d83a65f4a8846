"""Date formatting utilities for history entries"""

from datetime import datetime

HISTORY_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_history_date(raw: str) -> str:
    """Render an API timestamp as e.g. "Mar 5, 2025 at 2:07 PM"; unparseable input is returned as-is"""
    try:
        parsed = datetime.strptime(raw, HISTORY_DATE_FORMAT)
    except ValueError:
        return raw

    hour = parsed.hour % 12 or 12
    meridiem = "AM" if parsed.hour < 12 else "PM"
    return f"{parsed:%b} {parsed.day}, {parsed.year} at {hour}:{parsed:%M} {meridiem}"
