"""Identifier-based extraction.

Reads the fields of a list item through their stable view identifiers. This
is the most reliable strategy when the target app keeps its identifiers, and
it does not depend on the order in which text happens to be laid out.
"""

import logging

from ..config.parsing_config import ParsingConfig
from ..model.record import Confidence
from ..model.ui_node import UINode, UISnapshot
from .base import (
    ExtractionResult,
    ExtractionStrategy,
    ParsedFields,
    parse_price,
    split_route,
    split_schedule,
)

logger = logging.getLogger(__name__)


class IdentifierStrategy(ExtractionStrategy):
    """Extract via the schedule, route and fare view identifiers."""

    priority = 1
    confidence = Confidence.VERY_HIGH

    def get_name(self) -> str:
        return "identifier"

    def is_enabled(self, config: ParsingConfig) -> bool:
        view_ids = config.view_ids
        return config.parsing.enable_view_id_strategy and all(
            (view_ids.reserved_at, view_ids.path, view_ids.fare)
        )

    def _field_text(self, item: UINode, snapshot: UISnapshot, identifier: str) -> str:
        node = snapshot.find_by_identifier(identifier, start=item)
        if node is None:
            return ""
        return (node.text or node.description or "").strip()

    def extract(
        self, item: UINode, snapshot: UISnapshot, config: ParsingConfig
    ) -> ExtractionResult | None:
        view_ids = config.view_ids
        reserved_text = self._field_text(item, snapshot, view_ids.reserved_at)
        path_text = self._field_text(item, snapshot, view_ids.path)
        fare_text = self._field_text(item, snapshot, view_ids.fare)
        if not (reserved_text and path_text and fare_text):
            return None

        fields = ParsedFields()
        fields.scheduled_time, fields.category = split_schedule(reserved_text, config)
        route = split_route(path_text, config)
        if route:
            fields.origin, fields.destination = route
        fields.price = parse_price(fare_text, config)
        if fields.price == 0 and config.is_numeric_only(fare_text):
            fields.price = int("".join(ch for ch in fare_text if ch.isdigit()) or 0)

        if fields.missing():
            logger.debug(f"Identifier fields incomplete, missing {fields.missing()}")
            return None

        debug = {"reserved_at": reserved_text, "path": path_text, "fare": fare_text}
        if view_ids.stopovers:
            stopovers = self._field_text(item, snapshot, view_ids.stopovers)
            if stopovers:
                debug["stopovers"] = stopovers
        if view_ids.surge:
            surge = self._field_text(item, snapshot, view_ids.surge)
            if surge:
                debug["surge"] = surge
        return self._result(item, snapshot, fields, debug)
