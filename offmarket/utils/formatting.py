"""Display helpers used as Jinja2 filters."""

from datetime import datetime, timezone
from typing import Optional, Union


def format_date(value: datetime) -> str:
    return f"{value.day} {value:%b %Y}"


def relative_time(value: Union[datetime, str], now: Optional[datetime] = None) -> str:
    """'just now', '5m ago', '3h ago', '2d ago', then a plain date after a week."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    seconds = int((now - value).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return format_date(value)


def thousands(value: int) -> str:
    return f"{value:,}"
