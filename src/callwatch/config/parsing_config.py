"""Parsing rules for call list items.

Mirrors the JSON file shipped alongside the engine::

    {
      "version": "1.0.0",
      "app_version": "6.8.0",
      "view_ids": {"reserved_at": "...", "path": "...", "fare": "..."},
      "patterns": {"price": {"regex": "...", "description": "..."}, ...},
      "validation": {"price_min": 2000, "price_max": 300000, "location_min_length": 2},
      "parsing": {"min_text_count": 2, "enable_view_id_strategy": true, ...}
    }

Missing sections fall back to the defaults below.
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ExtractionException

logger = logging.getLogger(__name__)

_APP_ID = "com.kakao.taxi.driver:id"


@lru_cache(maxsize=64)
def compile_pattern(regex: str) -> re.Pattern[str]:
    """Compile a configured pattern once.

    Raises:
        ExtractionException: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(regex)
    except re.error as e:
        raise ExtractionException(f"Invalid pattern {regex!r}: {e}", cause=e) from e


class ViewIds(BaseModel):
    """Identifiers of the sub-views of one list item."""

    model_config = ConfigDict(frozen=True)

    reserved_at: str = f"{_APP_ID}/tv_reserved_at"
    path: str = f"{_APP_ID}/tv_path"
    fare: str = f"{_APP_ID}/tv_fare"
    stopovers: str | None = None
    surge: str | None = None
    item_container: str | None = None


class PatternItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    regex: str
    description: str = ""

    @property
    def compiled(self) -> re.Pattern[str]:
        return compile_pattern(self.regex)


class Patterns(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: PatternItem = PatternItem(regex=r"(\d{1,3}(,\d{3})*|\d+)\s*원", description="price")
    time: PatternItem = PatternItem(
        regex=r"\d{2}\.\d{2}\([^)]+\)\s+\d{2}:\d{2}.*", description="schedule"
    )
    route: PatternItem = PatternItem(regex=r"(.+)\s*→\s*(.+)", description="route")


class Validation(BaseModel):
    model_config = ConfigDict(frozen=True)

    price_min: int = 2000
    price_max: int = 300000
    location_min_length: int = 2
    reservation_time_required: bool = True


class ParsingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_text_count: int = 2
    enable_view_id_strategy: bool = True
    enable_regex_strategy: bool = True
    enable_heuristic_strategy: bool = True
    selection: Literal["first", "highest_confidence"] = Field(
        "first", description="Stop at the first result or run every strategy and keep the best"
    )


class Markers(BaseModel):
    """Fixed strings the strategies split and match on."""

    model_config = ConfigDict(frozen=True)

    schedule_delimiter: str = " / "
    route_arrow: str = "→"
    currency: str = "원"
    fee: str = "요금"
    numeric_only: str = r"^[0-9,.:\s]+$"


class ParsingConfig(BaseModel):
    """Complete parsing configuration."""

    model_config = ConfigDict(frozen=True)

    version: str = "1.0.0"
    app_version: str = "Unknown"
    view_ids: ViewIds = Field(default_factory=ViewIds)
    patterns: Patterns = Field(default_factory=Patterns)
    validation: Validation = Field(default_factory=Validation)
    parsing: ParsingSettings = Field(default_factory=ParsingSettings)
    markers: Markers = Field(default_factory=Markers)

    @classmethod
    def load(cls, path: Path | str | None) -> ParsingConfig:
        """Load configuration from a JSON file.

        A missing or invalid file is logged and the defaults are used instead.
        """
        if path is None:
            return cls()
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                config = cls.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load parsing config from {path}, using defaults: {e}")
            return cls()
        logger.debug(f"Loaded parsing config version={config.version} app={config.app_version}")
        return config

    def is_numeric_only(self, text: str) -> bool:
        return compile_pattern(self.markers.numeric_only).match(text) is not None
