"""Refresh interval calculation."""

import random

JITTER_MIN = 0.9
JITTER_SPAN = 0.2


def calculate_refresh_delay(base_seconds: float, rng: random.Random | None = None) -> float:
    """Delay before the next list refresh, in milliseconds.

    The configured base interval with +/-10% jitter, drawn fresh on every call
    so consecutive refreshes do not fall into a fixed rhythm.

    Args:
        base_seconds: Configured base interval in seconds
        rng: Random source (default: module-level ``random``)

    Returns:
        Delay in milliseconds within ``[0.9, 1.1] * base_seconds * 1000``
    """
    uniform = rng.uniform if rng is not None else random.uniform
    return base_seconds * 1000.0 * (JITTER_MIN + uniform(0.0, JITTER_SPAN))
