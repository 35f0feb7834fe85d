"""One handler per control state."""

import random

from ...extraction.chain import ExtractionChain
from ...filtering.evaluator import FilterEvaluator
from ..handler import StateHandler
from .accepted import AcceptedHandler
from .analyzing import AnalyzingHandler
from .awaiting_confirmation import AwaitingConfirmationHandler
from .awaiting_opportunity import AwaitingOpportunityHandler
from .detail_screen import DetailScreenHandler
from .errors import ErrorAlreadyTakenHandler, ErrorTimeoutHandler, ErrorUnknownHandler
from .idle import IdleHandler
from .list_screen import ListScreenHandler
from .refreshing import RefreshingHandler
from .targeting import TargetingHandler
from .timeout_recovery import TimeoutRecoveryHandler


def default_handlers(
    rng: random.Random | None = None,
    chain: ExtractionChain | None = None,
    evaluator: FilterEvaluator | None = None,
) -> list[StateHandler]:
    """A fresh handler for every control state."""
    return [
        IdleHandler(),
        AwaitingOpportunityHandler(),
        ListScreenHandler(rng),
        RefreshingHandler(),
        AnalyzingHandler(chain, evaluator),
        TargetingHandler(),
        DetailScreenHandler(),
        AwaitingConfirmationHandler(),
        AcceptedHandler(),
        ErrorAlreadyTakenHandler(),
        ErrorTimeoutHandler(),
        ErrorUnknownHandler(),
        TimeoutRecoveryHandler(),
    ]


__all__ = [
    "default_handlers",
    "AcceptedHandler",
    "AnalyzingHandler",
    "AwaitingConfirmationHandler",
    "AwaitingOpportunityHandler",
    "DetailScreenHandler",
    "ErrorAlreadyTakenHandler",
    "ErrorTimeoutHandler",
    "ErrorUnknownHandler",
    "IdleHandler",
    "ListScreenHandler",
    "RefreshingHandler",
    "TargetingHandler",
    "TimeoutRecoveryHandler",
]
