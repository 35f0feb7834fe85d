"""Configuration package.

Engine settings come from pydantic-settings (``CALLWATCH_*`` environment
variables and ``.env``); filter and parsing rules are immutable pydantic models.

Usage:
    from callwatch.config import get_settings, InMemoryFilterStore, FilterConfig

    settings = get_settings()
    store = InMemoryFilterStore(FilterConfig(min_amount=20000))
    store.add_keyword("인천공항")
"""

from .filter_config import (
    DEFAULT_ORIGIN_MARKERS,
    ConditionMode,
    DateTimeRange,
    FilterConfig,
    parse_reservation_time,
)
from .parsing_config import ParsingConfig, compile_pattern
from .providers import (
    FilterConfigProvider,
    FilterSettings,
    InMemoryFilterStore,
    SettingsFilterConfigProvider,
)
from .settings import EngineSettings, get_settings, reset_settings

__all__ = [
    "DEFAULT_ORIGIN_MARKERS",
    "ConditionMode",
    "DateTimeRange",
    "FilterConfig",
    "parse_reservation_time",
    "ParsingConfig",
    "compile_pattern",
    "FilterConfigProvider",
    "FilterSettings",
    "InMemoryFilterStore",
    "SettingsFilterConfigProvider",
    "EngineSettings",
    "get_settings",
    "reset_settings",
]
