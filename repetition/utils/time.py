from datetime import date, datetime, timedelta, timezone as dt_tz

from django.utils import timezone


class SystemClock:
    """Wall clock; ``today`` is the calendar date in the active time zone."""

    def now(self) -> datetime:
        return timezone.now()

    def today(self) -> date:
        return timezone.localdate(self.now())


class FixedClock(SystemClock):
    def __init__(self, now: datetime):
        if timezone.is_naive(now):
            now = now.replace(tzinfo=dt_tz.utc)
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


def default_clock(clock=None):
    return clock if clock is not None else SystemClock()


def to_local_iso(dt_utc):
    return timezone.localtime(dt_utc).isoformat()
