"""Extraction strategy base class and shared text helpers.

Strategies turn one call-list item into an :class:`ExtractedRecord`. They are
stateless: running a strategy twice on the same subtree yields equal records.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..config.parsing_config import ParsingConfig
from ..model.record import Confidence, ExtractedRecord
from ..model.ui_node import NodeRef, UINode, UISnapshot

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d")


@dataclass(frozen=True)
class ExtractionResult:
    """Result from an extraction strategy.

    Attributes:
        record: Extracted record, already tagged with confidence and debug info
        confidence: Confidence tier of the strategy that produced it
        strategy_name: Name of the strategy, for logs
        debug: Intermediate values the strategy used
    """

    record: ExtractedRecord
    confidence: Confidence
    strategy_name: str
    debug: dict[str, Any] = field(default_factory=dict, compare=False)


class ExtractionStrategy(ABC):
    """Base class for extraction strategies.

    Each strategy reads a list item a different way. The chain tries them by
    ascending ``priority`` until one succeeds.
    """

    priority: int = 100
    confidence: Confidence = Confidence.LOW

    @abstractmethod
    def extract(
        self, item: UINode, snapshot: UISnapshot, config: ParsingConfig
    ) -> ExtractionResult | None:
        """Extract a record from one list item.

        Args:
            item: Root node of the list item
            snapshot: Snapshot the item belongs to
            config: Active parsing configuration

        Returns:
            ExtractionResult, or None if the item lacks a required field

        Raises:
            ExtractionException: If the configuration itself is unusable
        """

    @abstractmethod
    def get_name(self) -> str:
        """Get strategy name for logging and reporting."""

    @abstractmethod
    def is_enabled(self, config: ParsingConfig) -> bool:
        """Check if the configuration switches this strategy on."""

    def _result(
        self,
        item: UINode,
        snapshot: UISnapshot,
        fields: ParsedFields,
        debug: dict[str, Any],
    ) -> ExtractionResult:
        debug = {"strategy": self.get_name(), **debug}
        record = ExtractedRecord(
            origin=fields.origin,
            destination=fields.destination,
            price=fields.price,
            category=fields.category,
            scheduled_time=fields.scheduled_time or None,
            bounds=item.bounds,
            clickable=resolve_clickable(item, snapshot),
            confidence=self.confidence,
            debug=debug,
        )
        return ExtractionResult(record, self.confidence, self.get_name(), debug)


@dataclass
class ParsedFields:
    """Fields gathered while a strategy walks an item."""

    origin: str = ""
    destination: str = ""
    price: int = 0
    scheduled_time: str = ""
    category: str = ""

    def missing(self) -> list[str]:
        missing = []
        if not self.scheduled_time:
            missing.append("time")
        if not self.origin or not self.destination:
            missing.append("route")
        if self.price <= 0:
            missing.append("price")
        return missing


def collect_texts(item: UINode, snapshot: UISnapshot) -> list[str]:
    """Flatten the text of a subtree in document order.

    Node texts are always kept; a description is only added when the same
    string has not been collected already.
    """
    texts: list[str] = []
    for node in snapshot.iter_nodes(item):
        if node.text and node.text.strip():
            texts.append(node.text.strip())
        if node.description and node.description.strip():
            description = node.description.strip()
            if description not in texts:
                texts.append(description)
    return texts


def parse_price(text: str, config: ParsingConfig) -> int:
    """Read the first price in ``text``; 0 when there is none."""
    match = config.patterns.price.compiled.search(text)
    if not match:
        return 0
    digits = "".join(_DIGITS.findall(match.group(1) if match.groups() else match.group(0)))
    return int(digits) if digits else 0


def split_schedule(text: str, config: ParsingConfig) -> tuple[str, str]:
    """Split ``"01.10(목) 14:30 / 일반 예약"`` into time and category."""
    delimiter = config.markers.schedule_delimiter
    if delimiter in text:
        scheduled, category = text.split(delimiter, 1)
        return scheduled.strip(), category.strip()
    return text.strip(), ""


def split_route(text: str, config: ParsingConfig, use_pattern: bool = True) -> tuple[str, str] | None:
    """Split a route segment into origin and destination.

    Tries the arrow glyph first, then the configured route pattern.
    """
    arrow = config.markers.route_arrow
    if arrow in text:
        origin, destination = text.split(arrow, 1)
        if origin.strip() and destination.strip():
            return origin.strip(), destination.strip()
    if use_pattern:
        match = config.patterns.route.compiled.search(text)
        if match and len(match.groups()) >= 2:
            return match.group(1).strip(), match.group(2).strip()
    return None


def resolve_clickable(item: UINode, snapshot: UISnapshot) -> NodeRef | None:
    """Reference to the node a tap on this item should go to.

    The nearest self-or-ancestor that is actionable on its own, falling back
    to the item itself.
    """
    target = snapshot.actionable_ancestor(item) or item
    if snapshot.path_of(target) is None:
        logger.debug(f"Item is not part of the snapshot: {item.label()}")
        return None
    return snapshot.ref(target)
