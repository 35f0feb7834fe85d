"""Eligibility evaluation for extracted records.

The accept/reject outcome and the rejection reason come out of one walk over
the rules, so a reason can never disagree with the outcome: ``reason`` is
None exactly when ``accepted`` is True.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from ..config.filter_config import ConditionMode, FilterConfig
from ..model.record import ExtractedRecord


@dataclass(frozen=True)
class FilterVerdict:
    """Outcome of evaluating one record."""

    accepted: bool
    reason: str | None = None

    @classmethod
    def accept(cls) -> "FilterVerdict":
        return cls(True, None)

    @classmethod
    def reject(cls, reason: str) -> "FilterVerdict":
        return cls(False, reason)


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


class FilterEvaluator:
    """Decides whether a record satisfies the acceptance rules.

    Pure apart from reading today's date, which is injectable for tests.

    Example:
        evaluator = FilterEvaluator()
        verdict = evaluator.evaluate(record, store.snapshot())
        if not verdict.accepted:
            logger.info(verdict.reason)
    """

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def evaluate(self, record: ExtractedRecord, config: FilterConfig) -> FilterVerdict:
        verdict = self._check_category(record, config)
        if verdict is None:
            verdict = self._check_time_windows(record, config)
        if verdict is None:
            if config.mode is ConditionMode.ORIGIN_RESTRICTED:
                verdict = self._check_origin_restricted(record, config)
            else:
                verdict = self._check_amount_or_keyword(record, config)
        return verdict

    def is_eligible(self, record: ExtractedRecord, config: FilterConfig) -> bool:
        return self.evaluate(record, config).accepted

    def reject_reason(self, record: ExtractedRecord, config: FilterConfig) -> str | None:
        return self.evaluate(record, config).reason

    # Each check returns a verdict to stop at, or None to continue.

    def _check_category(self, record: ExtractedRecord, config: FilterConfig) -> FilterVerdict | None:
        if config.hourly_marker not in record.category:
            return None
        if not config.allow_hourly_reservation:
            return FilterVerdict.reject(f"hourly reservation not allowed ({record.category})")
        if config.single_hour_marker not in record.category:
            return FilterVerdict.reject(
                f"only {config.single_hour_marker} reservations allowed ({record.category})"
            )
        return None

    def _check_time_windows(
        self, record: ExtractedRecord, config: FilterConfig
    ) -> FilterVerdict | None:
        if not record.scheduled_time or not config.time_windows:
            return None
        today = self._today()
        if any(w.contains_reservation(record.scheduled_time, today) for w in config.time_windows):
            return None
        windows = ", ".join(w.to_display_string() for w in config.time_windows)
        return FilterVerdict.reject(
            f"scheduled time {record.scheduled_time} outside every time window [{windows}]"
        )

    def _check_amount_or_keyword(
        self, record: ExtractedRecord, config: FilterConfig
    ) -> FilterVerdict:
        base_pass = record.price >= config.min_amount
        matched = next(
            (
                keyword
                for keyword in config.keywords
                if _contains(record.origin, keyword) or _contains(record.destination, keyword)
            ),
            None,
        )
        keyword_pass = matched is not None and record.price >= config.keyword_min_amount
        if base_pass or keyword_pass:
            return FilterVerdict.accept()

        base_failure = f"amount below minimum ({record.price:,} < {config.min_amount:,})"
        if matched is None:
            keywords = ", ".join(config.keywords) or "none configured"
            keyword_failure = f"no keyword match [keywords: {keywords}]"
        else:
            keyword_failure = (
                f"keyword '{matched}' matched but amount below keyword minimum "
                f"({record.price:,} < {config.keyword_min_amount:,})"
            )
        return FilterVerdict.reject(f"{base_failure} and {keyword_failure}")

    def _check_origin_restricted(
        self, record: ExtractedRecord, config: FilterConfig
    ) -> FilterVerdict:
        if not any(_contains(record.origin, marker) for marker in config.origin_markers):
            return FilterVerdict.reject(
                f"origin '{record.origin}' is not an allowed pickup "
                f"[markers: {', '.join(config.origin_markers)}]"
            )
        if record.price < config.origin_min_amount:
            return FilterVerdict.reject(
                f"amount below origin minimum ({record.price:,} < {config.origin_min_amount:,})"
            )
        return FilterVerdict.accept()
