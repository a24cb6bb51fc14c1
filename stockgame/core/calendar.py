# Standard Lib
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

# Third Party
import bittensor
from pydantic import BaseModel

SATURDAY = 5
SUNDAY = 6


class CalendarConfig(BaseModel):
    """Exchange calendar settings. All times are local to ``timezone``."""

    class Config:
        frozen = True

    timezone: str = "America/New_York"
    market_open: time = time(9, 30)
    market_close: time = time(16, 0)
    result_time: time = time(17, 0)

    @classmethod
    def from_config(cls, config: "bittensor.config") -> "CalendarConfig":
        """Build a calendar config from the ``calendar`` section of a parsed config."""
        calendar = getattr(config, "calendar", None)
        if calendar is None:
            return cls()
        defaults = cls()
        return cls(
            timezone=getattr(calendar, "timezone", None) or defaults.timezone,
            market_open=getattr(calendar, "market_open", None) or defaults.market_open,
            market_close=getattr(calendar, "market_close", None) or defaults.market_close,
            result_time=getattr(calendar, "result_time", None) or defaults.result_time,
        )


class MarketCalendar:
    """Answers trading-calendar questions in the exchange's own time zone.

    Every method takes ``now`` explicitly so that callers (and tests) control
    the clock. Naive datetimes are interpreted as UTC.
    """

    def __init__(self, config: CalendarConfig | None = None):
        self.config = config or CalendarConfig()
        self.zone = ZoneInfo(self.config.timezone)

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(self.zone)

    def local_date(self, instant: datetime) -> date:
        return self.localize(instant).date()

    @staticmethod
    def is_weekend(day: date) -> bool:
        return day.weekday() in (SATURDAY, SUNDAY)

    def is_market_open(self, now: datetime) -> bool:
        local = self.localize(now)
        if self.is_weekend(local.date()):
            return False
        current = local.time()
        return self.config.market_open < current < self.config.market_close

    def can_evaluate_now(self, now: datetime) -> bool:
        """True once a weekday's closing data is authoritative."""
        local = self.localize(now)
        if self.is_weekend(local.date()):
            return False
        return local.time() > self.config.result_time

    def is_origin_on_sunday(self, origin: datetime | date) -> bool:
        if isinstance(origin, datetime):
            origin = self.local_date(origin)
        return origin.weekday() == SUNDAY

    def evaluation_date_for(self, now: datetime) -> date:
        """Most recent weekday whose end-of-day results are authoritative at ``now``.

        A Sunday submission concerns Monday's close, so on Sundays the next day
        is returned instead.
        """
        today = self.local_date(now)
        if today.weekday() == SUNDAY:
            return today + timedelta(days=1)

        if not self.can_evaluate_now(now):
            today -= timedelta(days=1)

        while self.is_weekend(today):
            today -= timedelta(days=1)

        bittensor.logging.debug(f"Evaluation date for {now.isoformat()}: {today.isoformat()}")
        return today

    def grace_deadline(self, origin: datetime | date) -> datetime:
        """Result-readiness time on the day after ``origin``, in the exchange zone."""
        if isinstance(origin, datetime):
            origin = self.local_date(origin)
        following = origin + timedelta(days=1)
        return datetime.combine(following, self.config.result_time, tzinfo=self.zone)

    def sunday_grace_passed(self, now: datetime, origin: datetime | date) -> bool:
        return self.localize(now) > self.grace_deadline(origin)
