"""callwatch: decision engine for automatically accepting reservation calls.

Watches the driver app's UI tree, extracts the calls on the reservation
list, picks the best one that matches the operator's rules and walks the
accept/confirm dialogs for it.

Example:
    from callwatch import Engine, FilterConfig, InMemoryFilterStore

    store = InMemoryFilterStore(FilterConfig(min_amount=30000, keywords=("인천공항",)))
    engine = Engine(device, store)
    engine.start()
"""

from .config import (
    ConditionMode,
    DateTimeRange,
    EngineSettings,
    FilterConfig,
    FilterConfigProvider,
    InMemoryFilterStore,
    ParsingConfig,
    get_settings,
)
from .engine import Engine
from .extraction import ExtractionChain
from .filtering import FilterEvaluator, FilterVerdict
from .hal import IDeviceCapabilities
from .model import (
    Confidence,
    ControlState,
    Decision,
    Error,
    ExtractedRecord,
    NoChange,
    PauseAndTransition,
    Region,
    Transition,
    UINode,
    UISnapshot,
)

__version__ = "0.1.0"

__all__ = [
    "Engine",
    "ConditionMode",
    "DateTimeRange",
    "EngineSettings",
    "FilterConfig",
    "FilterConfigProvider",
    "InMemoryFilterStore",
    "ParsingConfig",
    "get_settings",
    "ExtractionChain",
    "FilterEvaluator",
    "FilterVerdict",
    "IDeviceCapabilities",
    "Confidence",
    "ControlState",
    "Decision",
    "Error",
    "ExtractedRecord",
    "NoChange",
    "PauseAndTransition",
    "Region",
    "Transition",
    "UINode",
    "UISnapshot",
]
