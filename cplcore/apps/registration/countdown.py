from __future__ import annotations

from datetime import datetime
from typing import Optional

from django.utils import timezone

NO_DEADLINE = "No deadline set"


def format_remaining(seconds: float) -> str:
    """
    Segundos restantes -> 'DDd HH:MM:SS'.
    Todo valor <= 0 se muestra como '00d 00:00:00'.
    """
    if seconds <= 0:
        return "00d 00:00:00"
    total = int(seconds)
    days, rem = divmod(total, 24 * 3600)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{days:02d}d {hours:02d}:{minutes:02d}:{secs:02d}"


def remaining_seconds(deadline: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    if deadline is None:
        return None
    now = now or timezone.now()
    return max(0, int((deadline - now).total_seconds()))


def countdown_display(deadline: Optional[datetime], now: Optional[datetime] = None) -> str:
    if deadline is None:
        return NO_DEADLINE
    now = now or timezone.now()
    return format_remaining((deadline - now).total_seconds())
