"""Lenient date parsing for frontmatter `date` values"""

from datetime import date, datetime, timezone


_EXTRA_FORMATS = ("%Y/%m/%d", "%Y/%m/%d %H:%M", "%Y.%m.%d")


def parse_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date or datetime (or yyyy/mm/dd) into a naive UTC datetime.

    Returns None when the value is empty or unrecognized.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in _EXTRA_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def today_iso(today: date | None = None) -> str:
    return (today or date.today()).isoformat()
