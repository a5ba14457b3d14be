"""Score arithmetic shared by the feedback components."""

import math


def round_score(value: float) -> int:
    """Round half up, so 70.5 becomes 71 rather than 70."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    """Clamp a raw score into [0, 100] and round it."""
    return round_score(clamp(value, 0, 100))
