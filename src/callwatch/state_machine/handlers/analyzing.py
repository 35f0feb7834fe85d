"""Analyzing: reads the refreshed call list and picks the best eligible call."""

import logging

from ...extraction.base import collect_texts
from ...extraction.chain import ExtractionChain
from ...filtering.evaluator import FilterEvaluator
from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision, Error, Transition
from ...model.record import ExtractedRecord
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler

logger = logging.getLogger(__name__)


class AnalyzingHandler(StateHandler):
    """Extracts every list item, filters, and targets the highest price.

    A list that is missing or unreadable right after a refresh is usually
    still rendering, so the handler keeps looking for a short window before
    giving up on this cycle.
    """

    state = ControlState.ANALYZING

    def __init__(
        self,
        chain: ExtractionChain | None = None,
        evaluator: FilterEvaluator | None = None,
    ) -> None:
        self.chain = chain or ExtractionChain()
        self.evaluator = evaluator or FilterEvaluator()

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        config = context.filter_config()
        problems = config.validate_settings()
        if problems:
            message = "; ".join(problems)
            context.event_logger.error("invalid_filter_config", message, self.state.value)
            return Error(ControlState.ERROR_UNKNOWN, f"invalid filter configuration: {message}")

        settings = context.settings
        container = snapshot.find_by_class(settings.list_container_classes)
        items = list(container.children) if container is not None else []
        if not items:
            return self._retry_or_give_up(context, "call list not found or empty")

        context.event_logger.call_list_detected(len(items), self.state.value)
        parsing = context.parsing_config
        parsed = 0
        candidates: list[ExtractedRecord] = []
        for index, item in enumerate(items):
            result = self.chain.extract(item, snapshot, parsing)
            if result is None:
                context.event_logger.parsing_failed(
                    index, "no strategy could extract the item", collect_texts(item, snapshot)
                )
                continue
            record = result.record
            problem = self.chain.validate(record, parsing)
            if problem:
                context.event_logger.parsing_failed(index, problem, collect_texts(item, snapshot))
                continue
            parsed += 1
            verdict = self.evaluator.evaluate(record, config)
            context.event_logger.record_parsed(
                record, verdict.accepted, verdict.reason, result.strategy_name, index
            )
            if verdict.accepted:
                candidates.append(record)

        if parsed == 0:
            return self._retry_or_give_up(context, f"none of {len(items)} items could be parsed")
        if not candidates:
            return Transition(
                ControlState.AWAITING_OPPORTUNITY, f"no eligible call among {parsed} parsed"
            )

        candidates.sort(key=lambda r: r.price, reverse=True)
        best = candidates[0]
        context.target = best
        context.item_click_failures = 0
        logger.info(f"Selected {best.summary()} out of {len(candidates)} eligible")
        context.notifier.notify(f"Eligible call found: {best.summary()}")
        return Transition(ControlState.TARGETING_ITEM, f"selected {best.key}")

    def _retry_or_give_up(self, context: SharedContext, reason: str) -> Decision:
        if context.time_in_state_ms() < context.settings.empty_list_retry_ms:
            return NO_CHANGE
        return Transition(ControlState.AWAITING_OPPORTUNITY, reason)
