"""Prioritized extraction with fallback, plus post-extraction validation."""

import logging

from ..config.parsing_config import ParsingConfig
from ..exceptions import ExtractionException
from ..model.record import ExtractedRecord
from ..model.ui_node import UINode, UISnapshot
from .base import ExtractionResult, ExtractionStrategy
from .heuristic_strategy import HeuristicStrategy
from .identifier_strategy import IdentifierStrategy
from .pattern_strategy import PatternStrategy

logger = logging.getLogger(__name__)


class ExtractionChain:
    """Runs extraction strategies in priority order.

    In ``first`` selection mode the first non-null result wins. In
    ``highest_confidence`` mode every enabled strategy runs and the result
    with the best confidence tier is kept; ties go to the higher priority.

    Example:
        chain = ExtractionChain()
        result = chain.extract(item, snapshot, ParsingConfig())
        if result and chain.validate(result.record, config) is None:
            candidates.append(result.record)
    """

    def __init__(self, strategies: list[ExtractionStrategy] | None = None) -> None:
        if strategies is None:
            strategies = [IdentifierStrategy(), PatternStrategy(), HeuristicStrategy()]
        self.strategies = sorted(strategies, key=lambda s: s.priority)

    def extract(
        self, item: UINode, snapshot: UISnapshot, config: ParsingConfig
    ) -> ExtractionResult | None:
        results: list[ExtractionResult] = []
        for strategy in self.strategies:
            if not strategy.is_enabled(config):
                continue
            try:
                result = strategy.extract(item, snapshot, config)
            except ExtractionException as e:
                logger.warning(f"Strategy {strategy.get_name()} unusable: {e}")
                continue
            if result is None:
                continue
            if config.parsing.selection == "first":
                return result
            results.append(result)

        if not results:
            return None
        # max() keeps the first of equal tiers, which is the higher priority
        return max(results, key=lambda r: r.confidence.score)

    @staticmethod
    def validate(record: ExtractedRecord, config: ParsingConfig) -> str | None:
        """Sanity-check an extracted record.

        Returns:
            Why the record is implausible, or None if it passes
        """
        rules = config.validation
        if not rules.price_min <= record.price <= rules.price_max:
            return f"price {record.price} outside [{rules.price_min}, {rules.price_max}]"
        if len(record.origin) < rules.location_min_length:
            return f"origin too short: {record.origin!r}"
        if len(record.destination) < rules.location_min_length:
            return f"destination too short: {record.destination!r}"
        if rules.reservation_time_required and not record.scheduled_time:
            return "missing scheduled time"
        return None
