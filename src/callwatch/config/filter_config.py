"""Filter configuration models.

The user-controlled acceptance rules: amount thresholds, keywords, allowed
reservation time windows and the active condition mode. Instances are
immutable; a provider hands out a fresh one for every analysis pass.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

_STORAGE_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2})-(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2})$"
)
_LEGACY_PATTERN = re.compile(r"^(\d{1,2}:\d{2})-(\d{1,2}:\d{2})$")
_RESERVATION_PATTERN = re.compile(r"(\d{2})\.(\d{2})\([^)]+\)\s+(\d{2}):(\d{2}).*")
_CLOCK_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")


class ConditionMode(str, Enum):
    """Which acceptance rule set is active."""

    AMOUNT_OR_KEYWORD = "amount_or_keyword"
    """Accept on the base amount, or on a keyword match above the keyword amount."""

    ORIGIN_RESTRICTED = "origin_restricted"
    """Accept only pickups at the configured origins (airport) above its amount."""


def _parse_clock(value: str) -> time:
    hour, minute = value.split(":")
    return time(int(hour), int(minute))


def parse_reservation_time(text: str, reference: date | None = None) -> datetime | None:
    """Parse the scheduled time shown on a call.

    Understands ``"01.10(목) 14:30"`` (the year is taken from ``reference``
    since the list never shows it) and a bare ``"14:30"`` on the reference date.

    Args:
        text: Scheduled time as extracted from the list item
        reference: Date used for the year and for time-only values (default: today)

    Returns:
        Parsed datetime, or None if the text has neither shape or names an
        impossible date
    """
    reference = reference or date.today()
    value = text.strip()
    try:
        full = _RESERVATION_PATTERN.fullmatch(value)
        if full:
            month, day, hour, minute = (int(group) for group in full.groups())
            return datetime(reference.year, month, day, hour, minute)
        clock = _CLOCK_PATTERN.fullmatch(value)
        if clock:
            return datetime.combine(reference, time(int(clock.group(1)), int(clock.group(2))))
    except ValueError as e:
        logger.debug(f"Unparseable reservation time {text!r}: {e}")
    return None


class DateTimeRange(BaseModel):
    """A window of wall-clock time in which calls may be accepted.

    Both ends are inclusive. A window may cross midnight by using different
    start and end dates.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(description="First accepted moment")
    end: datetime = Field(description="Last accepted moment")

    @classmethod
    def whole_day(cls, day: date | None = None) -> DateTimeRange:
        day = day or date.today()
        return cls(start=datetime.combine(day, time(0, 0)), end=datetime.combine(day, time(23, 59)))

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def contains_reservation(self, reservation_time: str, reference: date | None = None) -> bool:
        """Check a scheduled time string against this window.

        A string that cannot be parsed is treated as inside the window.
        """
        moment = parse_reservation_time(reservation_time, reference)
        if moment is None:
            return True
        return self.contains(moment)

    def to_storage_string(self) -> str:
        """Serialize as ``2026-01-06T09:00-2026-01-06T18:00``."""
        return f"{self.start:%Y-%m-%dT%H:%M}-{self.end:%Y-%m-%dT%H:%M}"

    def to_display_string(self) -> str:
        """Compact form: ``1/6 (09:00-18:00)`` or ``1/6~1/7 (22:00-02:00)``."""
        start_day = f"{self.start.month}/{self.start.day}"
        hours = f"({self.start:%H:%M}-{self.end:%H:%M})"
        if self.start.date() == self.end.date():
            return f"{start_day} {hours}"
        return f"{start_day}~{self.end.month}/{self.end.day} {hours}"

    @classmethod
    def from_storage_string(cls, value: str, today: date | None = None) -> DateTimeRange:
        """Parse a stored window.

        Accepts the full storage format and the legacy ``09:00-18:00`` form
        (applied to ``today``). Anything else yields the whole of ``today``.
        """
        today = today or date.today()
        value = value.strip()
        try:
            full = _STORAGE_PATTERN.match(value)
            if full:
                start_day, start_clock, end_day, end_clock = full.groups()
                return cls(
                    start=datetime.combine(date.fromisoformat(start_day), _parse_clock(start_clock)),
                    end=datetime.combine(date.fromisoformat(end_day), _parse_clock(end_clock)),
                )
            legacy = _LEGACY_PATTERN.match(value)
            if legacy:
                return cls(
                    start=datetime.combine(today, _parse_clock(legacy.group(1))),
                    end=datetime.combine(today, _parse_clock(legacy.group(2))),
                )
        except ValueError as e:
            logger.warning(f"Invalid time window {value!r}: {e}")
        else:
            logger.warning(f"Unrecognized time window {value!r}, using whole day")
        return cls.whole_day(today)


DEFAULT_ORIGIN_MARKERS = ("인천공항", "인천국제공항", "ICN", "인천 공항", "운서1동", "운서2동")


class FilterConfig(BaseModel):
    """Snapshot of the acceptance rules."""

    model_config = ConfigDict(frozen=True)

    mode: ConditionMode = Field(
        ConditionMode.AMOUNT_OR_KEYWORD, description="Active acceptance rule set"
    )
    min_amount: int = Field(0, ge=0, description="Base minimum price (amount-or-keyword)")
    keyword_min_amount: int = Field(0, ge=0, description="Minimum price for keyword matches")
    origin_min_amount: int = Field(0, ge=0, description="Minimum price in origin-restricted mode")
    keywords: tuple[str, ...] = Field(default_factory=tuple, description="Origin/destination keywords")
    time_windows: tuple[DateTimeRange, ...] = Field(
        default_factory=tuple, description="Allowed windows; empty means any time"
    )
    allow_hourly_reservation: bool = Field(
        False, description="Accept single-hour reservations"
    )
    hourly_marker: str = Field("시간", description="Category text marking hourly reservations")
    single_hour_marker: str = Field("1시간", description="Category text of a one-hour reservation")
    origin_markers: tuple[str, ...] = Field(
        DEFAULT_ORIGIN_MARKERS, description="Origins allowed in origin-restricted mode"
    )
    refresh_delay_seconds: float = Field(1.0, description="Base interval between list refreshes")

    def validate_settings(self) -> list[str]:
        """List what makes this configuration unusable.

        Returns:
            Human-readable problems; empty when the configuration is valid
        """
        problems: list[str] = []
        if self.refresh_delay_seconds <= 0:
            problems.append(f"refresh delay must be positive (got {self.refresh_delay_seconds})")
        if self.mode is ConditionMode.AMOUNT_OR_KEYWORD:
            if self.min_amount <= 0 and not self.keywords:
                problems.append("amount-or-keyword mode needs a minimum amount or keywords")
        elif self.origin_min_amount <= 0:
            problems.append("origin-restricted mode needs a positive minimum amount")
        return problems

    @property
    def is_valid(self) -> bool:
        return not self.validate_settings()
