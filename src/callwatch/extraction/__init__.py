"""Extraction package - turns call-list items into records.

Strategies, in priority order:
- IdentifierStrategy: stable view identifiers (very high confidence)
- PatternStrategy: configured price/time/route patterns (high confidence)
- HeuristicStrategy: positional assignment (low confidence)
"""

from .base import ExtractionResult, ExtractionStrategy, collect_texts, resolve_clickable
from .chain import ExtractionChain
from .heuristic_strategy import HeuristicStrategy
from .identifier_strategy import IdentifierStrategy
from .pattern_strategy import PatternStrategy

__all__ = [
    "ExtractionResult",
    "ExtractionStrategy",
    "ExtractionChain",
    "IdentifierStrategy",
    "PatternStrategy",
    "HeuristicStrategy",
    "collect_texts",
    "resolve_clickable",
]
