"""Structured event logger for engine activity.

One method per event kind. The engine and its handlers only talk to the
:class:`EventLogger` interface; :class:`StructlogEventLogger` is the default
implementation and writes one structlog event per call.
"""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from ..model.record import ExtractedRecord
from .logger import get_logger


def _record_fields(record: ExtractedRecord | None) -> dict[str, Any]:
    if record is None:
        return {}
    return {
        "call_key": record.key,
        "origin": record.origin,
        "destination": record.destination,
        "price": record.price,
        "category": record.category,
        "scheduled_time": record.scheduled_time,
        "confidence": record.confidence.name if record.confidence else None,
    }


class EventLogger(ABC):
    """Sink for structured engine events."""

    @abstractmethod
    def state_changed(
        self, from_state: str, to_state: str, reason: str, elapsed_ms: int
    ) -> None:
        """A state change; ``elapsed_ms`` is the time spent in ``from_state``."""

    @abstractmethod
    def node_clicked(
        self,
        identifier: str | None,
        success: bool,
        state: str,
        method: str,
        elapsed_ms: int = 0,
    ) -> None:
        """A click attempt and the channel used for it."""

    @abstractmethod
    def call_list_detected(self, item_count: int, state: str) -> None:
        pass

    @abstractmethod
    def record_parsed(
        self,
        record: ExtractedRecord,
        eligible: bool,
        reject_reason: str | None,
        strategy: str,
        index: int,
    ) -> None:
        """One extracted record and its filter verdict."""

    @abstractmethod
    def parsing_failed(self, index: int, reason: str, texts: list[str]) -> None:
        pass

    @abstractmethod
    def accept_step(
        self,
        step: int,
        name: str,
        target_id: str | None,
        found: bool,
        clicked: bool,
        elapsed_ms: int = 0,
    ) -> None:
        """Progress through the accept workflow (1 item, 2 accept, 3 confirm)."""

    @abstractmethod
    def button_search_failed(
        self, state: str, target_id: str, texts_tried: list[str], node_description: str = ""
    ) -> None:
        pass

    @abstractmethod
    def refresh_attempt(
        self, button_found: bool, clickable: bool, success: bool, elapsed_ms: int, target_ms: int
    ) -> None:
        pass

    @abstractmethod
    def screen_check(self, state: str, target_id: str, found: bool, detail: str = "") -> None:
        pass

    @abstractmethod
    def call_result(
        self, success: bool, record: ExtractedRecord | None, reason: str, elapsed_ms: int
    ) -> None:
        """Outcome of one accept attempt, timed from the detail screen."""

    @abstractmethod
    def timeout(self, state: str, elapsed_ms: int) -> None:
        pass

    @abstractmethod
    def error(self, kind: str, message: str, state: str) -> None:
        pass


class StructlogEventLogger(EventLogger):
    """Event logger writing to structlog."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        """Initialize event logger.

        Args:
            base_logger: Base logger to use
        """
        self.logger = base_logger or get_logger(__name__)

    def state_changed(self, from_state: str, to_state: str, reason: str, elapsed_ms: int) -> None:
        self.logger.info(
            "state_changed",
            from_state=from_state,
            to_state=to_state,
            reason=reason,
            elapsed_ms=elapsed_ms,
        )

    def node_clicked(
        self,
        identifier: str | None,
        success: bool,
        state: str,
        method: str,
        elapsed_ms: int = 0,
    ) -> None:
        log = self.logger.info if success else self.logger.warning
        log(
            "node_clicked",
            node_id=identifier,
            success=success,
            state=state,
            method=method,
            elapsed_ms=elapsed_ms,
        )

    def call_list_detected(self, item_count: int, state: str) -> None:
        self.logger.info("call_list_detected", item_count=item_count, state=state)

    def record_parsed(
        self,
        record: ExtractedRecord,
        eligible: bool,
        reject_reason: str | None,
        strategy: str,
        index: int,
    ) -> None:
        self.logger.info(
            "call_parsed",
            index=index,
            eligible=eligible,
            reject_reason=reject_reason,
            strategy=strategy,
            **_record_fields(record),
        )

    def parsing_failed(self, index: int, reason: str, texts: list[str]) -> None:
        self.logger.warning("parsing_failed", index=index, reason=reason, texts=texts)

    def accept_step(
        self,
        step: int,
        name: str,
        target_id: str | None,
        found: bool,
        clicked: bool,
        elapsed_ms: int = 0,
    ) -> None:
        self.logger.info(
            "accept_step",
            step=step,
            step_name=name,
            target_id=target_id,
            found=found,
            clicked=clicked,
            elapsed_ms=elapsed_ms,
        )

    def button_search_failed(
        self, state: str, target_id: str, texts_tried: list[str], node_description: str = ""
    ) -> None:
        self.logger.warning(
            "button_search_failed",
            state=state,
            target_id=target_id,
            texts_tried=texts_tried,
            node_description=node_description,
        )

    def refresh_attempt(
        self, button_found: bool, clickable: bool, success: bool, elapsed_ms: int, target_ms: int
    ) -> None:
        self.logger.info(
            "refresh_attempt",
            button_found=button_found,
            clickable=clickable,
            success=success,
            elapsed_ms=elapsed_ms,
            target_ms=target_ms,
        )

    def screen_check(self, state: str, target_id: str, found: bool, detail: str = "") -> None:
        self.logger.debug(
            "screen_check", state=state, target_id=target_id, found=found, detail=detail
        )

    def call_result(
        self, success: bool, record: ExtractedRecord | None, reason: str, elapsed_ms: int
    ) -> None:
        log = self.logger.info if success else self.logger.warning
        log(
            "call_result",
            success=success,
            reason=reason,
            elapsed_ms=elapsed_ms,
            **_record_fields(record),
        )

    def timeout(self, state: str, elapsed_ms: int) -> None:
        self.logger.warning("state_timeout", state=state, elapsed_ms=elapsed_ms)

    def error(self, kind: str, message: str, state: str) -> None:
        self.logger.error("engine_error", kind=kind, message=message, state=state)
