"""Pattern-based extraction over the flattened text of an item."""

import logging

from ..config.parsing_config import ParsingConfig
from ..model.record import Confidence
from ..model.ui_node import UINode, UISnapshot
from .base import (
    ExtractionResult,
    ExtractionStrategy,
    ParsedFields,
    collect_texts,
    parse_price,
    split_route,
    split_schedule,
)

logger = logging.getLogger(__name__)


def match_price_and_time(
    texts: list[str], config: ParsingConfig, fields: ParsedFields
) -> set[int]:
    """Fill price and schedule from the segments that carry them.

    Price is only read from segments holding both the fee and currency
    markers, so a stray number elsewhere cannot pass for the fare.

    Returns:
        Indexes of the segments consumed
    """
    consumed: set[int] = set()
    time_pattern = config.patterns.time.compiled
    for index, text in enumerate(texts):
        if fields.price == 0 and config.markers.fee in text and config.markers.currency in text:
            price = parse_price(text, config)
            if price:
                fields.price = price
                consumed.add(index)
                continue
        if not fields.scheduled_time and time_pattern.fullmatch(text.strip()):
            fields.scheduled_time, fields.category = split_schedule(text, config)
            consumed.add(index)
    return consumed


def assign_by_position(
    texts: list[str], config: ParsingConfig, fields: ParsedFields, skip: set[int]
) -> None:
    """First two qualifying segments become origin and destination."""
    min_length = config.validation.location_min_length
    for index, text in enumerate(texts):
        if index in skip or len(text) < min_length or config.is_numeric_only(text):
            continue
        if not fields.origin:
            fields.origin = text
        elif not fields.destination:
            fields.destination = text
            break


class PatternStrategy(ExtractionStrategy):
    """Match the configured price, time and route patterns against each segment."""

    priority = 2
    confidence = Confidence.HIGH

    def get_name(self) -> str:
        return "pattern"

    def is_enabled(self, config: ParsingConfig) -> bool:
        return config.parsing.enable_regex_strategy

    def extract(
        self, item: UINode, snapshot: UISnapshot, config: ParsingConfig
    ) -> ExtractionResult | None:
        texts = collect_texts(item, snapshot)
        if len(texts) < config.parsing.min_text_count:
            return None

        fields = ParsedFields()
        consumed = match_price_and_time(texts, config, fields)

        route_source = "pattern"
        route_pattern = config.patterns.route.compiled
        for index, text in enumerate(texts):
            if index in consumed:
                continue
            match = route_pattern.search(text.strip())
            if match and len(match.groups()) >= 2:
                fields.origin = match.group(1).strip()
                fields.destination = match.group(2).strip()
                consumed.add(index)
                break

        if not (fields.origin and fields.destination):
            route_source = "arrow"
            for index, text in enumerate(texts):
                if index in consumed:
                    continue
                route = split_route(text, config, use_pattern=False)
                if route:
                    fields.origin, fields.destination = route
                    break

        if not (fields.origin and fields.destination):
            route_source = "position"
            fields.origin = fields.destination = ""
            assign_by_position(texts, config, fields, consumed)

        if fields.missing():
            logger.debug(f"Pattern extraction missing {fields.missing()} in {texts}")
            return None
        return self._result(item, snapshot, fields, {"texts": texts, "route_source": route_source})
