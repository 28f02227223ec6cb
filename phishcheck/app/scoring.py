"""
scoring.py

Score aggregation and risk-level classification.
"""

from typing import Any, Dict, Iterable, List, Tuple

from phishcheck.app.config import Thresholds
from phishcheck.app.signals import Signal, render_flag

RISK_LEVELS = ('safe', 'low', 'medium', 'high')


def risk_rank(level: str) -> int:
    """Ordinal position of a risk level (safe=0 ... high=3)."""
    return RISK_LEVELS.index(level)


def aggregate(signals: Iterable[Signal]) -> Tuple[int, List[str], Dict[str, Any]]:
    """
    Sum signal scores and collect flags and details in the order given.

    Silent signals add their detail only. When two signals carry the same
    detail key the first one is kept.
    """
    score = 0
    flags = []
    details = {}
    for signal in signals:
        score += signal.score
        if not signal.silent:
            flags.append(render_flag(signal))
        if signal.detail is not None:
            key, value = signal.detail
            details.setdefault(key, value)
    return score, flags, details


def classify(score: int, thresholds: Thresholds) -> str:
    if score >= thresholds.high:
        return 'high'
    if score >= thresholds.medium:
        return 'medium'
    if score >= thresholds.low:
        return 'low'
    return 'safe'
