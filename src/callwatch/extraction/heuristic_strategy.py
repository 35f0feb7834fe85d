"""Positional extraction, the last resort when no route pattern applies."""

from ..config.parsing_config import ParsingConfig
from ..model.record import Confidence
from ..model.ui_node import UINode, UISnapshot
from .base import ExtractionResult, ExtractionStrategy, ParsedFields, collect_texts
from .pattern_strategy import assign_by_position, match_price_and_time


class HeuristicStrategy(ExtractionStrategy):
    """Origin and destination are the first two non-numeric segments."""

    priority = 3
    confidence = Confidence.LOW

    def get_name(self) -> str:
        return "heuristic"

    def is_enabled(self, config: ParsingConfig) -> bool:
        return config.parsing.enable_heuristic_strategy

    def extract(
        self, item: UINode, snapshot: UISnapshot, config: ParsingConfig
    ) -> ExtractionResult | None:
        texts = collect_texts(item, snapshot)
        if len(texts) < config.parsing.min_text_count:
            return None
        fields = ParsedFields()
        consumed = match_price_and_time(texts, config, fields)
        assign_by_position(texts, config, fields, consumed)
        if fields.missing():
            return None
        return self._result(item, snapshot, fields, {"texts": texts})
