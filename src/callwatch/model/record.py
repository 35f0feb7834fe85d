"""Extracted opportunity records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .region import Region
from .ui_node import NodeRef


class Confidence(Enum):
    """How much an extraction can be trusted.

    Ordered from most to least trustworthy. Only used to pick between
    strategy results and for diagnostics, never for eligibility.
    """

    VERY_HIGH = 1.0
    HIGH = 0.8
    LOW = 0.3

    @property
    def score(self) -> float:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.value < other.value


@dataclass(frozen=True)
class ExtractedRecord:
    """One candidate opportunity read from the call list.

    Records are values: a later extraction of the same list item produces a
    new record rather than updating this one.
    """

    origin: str
    destination: str
    price: int
    category: str = ""
    scheduled_time: str | None = None
    bounds: Region = field(default_factory=Region)
    clickable: NodeRef | None = None
    confidence: Confidence | None = None
    debug: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> str:
        """Correlation key for logs; not a uniqueness constraint."""
        return f"{self.origin}->{self.destination}@{self.price}@{self.scheduled_time or ''}"

    def summary(self) -> str:
        time_part = f" {self.scheduled_time}" if self.scheduled_time else ""
        return f"{self.origin} -> {self.destination} {self.price:,}{time_part} [{self.category}]"
