"""Filter configuration providers.

The engine never caches a :class:`FilterConfig`; it asks its provider for a
snapshot on every analysis pass, so edits made between ticks take effect on
the next pass.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .filter_config import ConditionMode, DateTimeRange, FilterConfig

logger = logging.getLogger(__name__)


class FilterConfigProvider(ABC):
    """Read-only source of filter configuration snapshots."""

    @abstractmethod
    def snapshot(self) -> FilterConfig:
        """Return the configuration currently in effect."""


class InMemoryFilterStore(FilterConfigProvider):
    """Thread-safe, mutable configuration store.

    Writers (a settings screen, tests) call :meth:`update`; the engine only
    ever calls :meth:`snapshot`. Because :class:`FilterConfig` is frozen the
    returned snapshot can be shared without copying.
    """

    def __init__(self, config: FilterConfig | None = None) -> None:
        self._config = config or FilterConfig()
        self._lock = threading.Lock()

    def snapshot(self) -> FilterConfig:
        with self._lock:
            return self._config

    def update(self, **changes: Any) -> FilterConfig:
        """Replace one or more fields.

        Raises:
            pydantic.ValidationError: If a value does not validate
        """
        with self._lock:
            data = self._config.model_dump()
            data.update(changes)
            updated = FilterConfig.model_validate(data)
            self._config = updated
        logger.info(f"Filter configuration changed: {sorted(changes)}")
        return updated

    def add_keyword(self, keyword: str) -> None:
        keyword = keyword.strip()
        if not keyword:
            return
        keywords = self.snapshot().keywords
        if keyword not in keywords:
            self.update(keywords=(*keywords, keyword))

    def remove_keyword(self, keyword: str) -> None:
        keywords = self.snapshot().keywords
        if keyword in keywords:
            self.update(keywords=tuple(k for k in keywords if k != keyword))

    def add_time_window(self, window: DateTimeRange) -> None:
        windows = self.snapshot().time_windows
        if window not in windows:
            self.update(time_windows=(*windows, window))

    def remove_time_window(self, window: DateTimeRange) -> None:
        windows = self.snapshot().time_windows
        if window in windows:
            self.update(time_windows=tuple(w for w in windows if w != window))


class FilterSettings(BaseSettings):
    """Filter configuration read from ``CALLWATCH_FILTER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CALLWATCH_FILTER_",
        case_sensitive=False,
        extra="ignore",
    )

    mode: ConditionMode = Field(ConditionMode.AMOUNT_OR_KEYWORD, description="Condition mode")
    min_amount: int = Field(0, description="Base minimum price")
    keyword_min_amount: int = Field(0, description="Minimum price for keyword matches")
    origin_min_amount: int = Field(0, description="Minimum price in origin-restricted mode")
    keywords: list[str] = Field(default_factory=list, description="Keywords")
    time_windows: list[str] = Field(
        default_factory=list, description="Windows in storage format"
    )
    allow_hourly_reservation: bool = Field(False, description="Accept single-hour reservations")
    refresh_delay_seconds: float = Field(1.0, description="Base refresh interval")

    def to_filter_config(self) -> FilterConfig:
        return FilterConfig(
            mode=self.mode,
            min_amount=self.min_amount,
            keyword_min_amount=self.keyword_min_amount,
            origin_min_amount=self.origin_min_amount,
            keywords=tuple(self.keywords),
            time_windows=tuple(DateTimeRange.from_storage_string(w) for w in self.time_windows),
            allow_hourly_reservation=self.allow_hourly_reservation,
            refresh_delay_seconds=self.refresh_delay_seconds,
        )


class SettingsFilterConfigProvider(FilterConfigProvider):
    """Provider that re-reads the environment on every snapshot."""

    def snapshot(self) -> FilterConfig:
        return FilterSettings().to_filter_config()
