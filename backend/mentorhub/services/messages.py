from __future__ import annotations

from datetime import date, time


def format_time_12h(t: time) -> str:
    """9:00 -> "9 AM", 13:30 -> "1:30 PM"."""
    suffix = "PM" if t.hour >= 12 else "AM"
    hour = t.hour % 12 or 12
    if t.minute == 0:
        return f"{hour} {suffix}"
    return f"{hour}:{t.minute:02d} {suffix}"


def format_date_short(d: date) -> str:
    # e.g. "Wed, Oct 21"
    return f"{d.strftime('%a')}, {d.strftime('%b')} {d.day}"


def format_date_medium(d: date) -> str:
    # e.g. "Wednesday, Oct 21"
    return f"{d.strftime('%A')}, {d.strftime('%b')} {d.day}"


def shift_line(d: date, start: time, end: time, label: str, signup_count: int) -> str:
    label_part = f" ({label})" if label else ""
    return (
        f"  {format_date_short(d)} {format_time_12h(start)}-{format_time_12h(end)}"
        f"{label_part} - {signup_count} signed up"
    )
