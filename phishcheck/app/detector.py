"""
detector.py

The detector façade: normalize -> run checks -> aggregate -> classify.

Public API:
    Detector(config=None, checks=DEFAULT_CHECKS, network_signal=None)
    Detector.analyze(url: str) -> AnalysisResult
    analyze_url(url: str) -> AnalysisResult   (module-level default detector)

Example:
    >>> Detector().analyze("http://192.168.1.1/login").risk_score
    60
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from phishcheck.app.config import DetectorConfig
from phishcheck.app.errors import MalformedURL, SignalSourceUnavailable
from phishcheck.app.heuristics import DEFAULT_CHECKS, Check
from phishcheck.app.normalizer import NormalizedURL, normalize_url
from phishcheck.app.scoring import aggregate, classify
from phishcheck.app.signals import Signal, render_flag
from phishcheck.app.threat_intel import SafeBrowsingSignal

logger = logging.getLogger("detector")

INVALID_URL_PENALTY = 50


@dataclass(frozen=True)
class AnalysisResult:
    url: str
    risk_score: int
    risk_level: str
    flags: Tuple[str, ...] = ()
    details: Mapping[str, Any] = field(default_factory=dict)
    signals: Tuple[Signal, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level,
            "flags": list(self.flags),
            "details": dict(self.details),
            "signals": [s.as_dict() for s in self.signals],
        }


def invalid_result(url: str) -> AnalysisResult:
    """Fixed-penalty result for input that is not an absolute URL."""
    signal = Signal("invalid_url", INVALID_URL_PENALTY)
    return AnalysisResult(
        url=url,
        risk_score=INVALID_URL_PENALTY,
        risk_level="high",
        flags=(render_flag(signal),),
        details={},
        signals=(signal,),
    )


class Detector:
    """
    Holds an immutable configuration snapshot, the ordered checks and an
    optional network signal. Safe to share between threads: analyze()
    reads `self.config` once per call and reload() only swaps the
    reference.
    """

    def __init__(self, config: Optional[DetectorConfig] = None,
                 checks: Iterable[Check] = DEFAULT_CHECKS,
                 network_signal=None):
        self.config = config or DetectorConfig()
        self.checks = tuple(checks)
        self.network_signal = network_signal

    def reload(self, config: DetectorConfig) -> None:
        """
        Install a new configuration snapshot. A Safe Browsing client is
        rebuilt when its settings change; injected signals are kept.
        """
        if not isinstance(config, DetectorConfig):
            raise TypeError("reload() expects a DetectorConfig")
        signal = self.network_signal
        if signal is None or isinstance(signal, SafeBrowsingSignal):
            if signal is None or config.network_signal != self.config.network_signal:
                signal = SafeBrowsingSignal.from_config(config.network_signal)
        self.network_signal = signal
        self.config = config

    def run_checks(self, url: NormalizedURL, config: DetectorConfig) -> Tuple[Signal, ...]:
        signals = []
        for check in self.checks:
            signals.extend(check(url, config))
        if self.network_signal is not None and config.network_signal.enabled:
            signals.extend(self._network_signals(url))
        return tuple(signals)

    def _network_signals(self, url: NormalizedURL):
        try:
            signal = self.network_signal.lookup(url)
        except SignalSourceUnavailable as e:
            logger.warning("Network signal unavailable, skipping: %s", e)
            return []
        except Exception:
            logger.exception("Network signal failed, skipping")
            return []
        return [signal] if signal is not None else []

    def analyze(self, url: str) -> AnalysisResult:
        config = self.config
        try:
            normalized = normalize_url(url)
        except MalformedURL as e:
            logger.debug("Malformed URL %r: %s", url, e)
            return invalid_result(url)

        try:
            signals = self.run_checks(normalized, config)
        except Exception:
            logger.exception("Heuristic check failed for %r", url)
            return invalid_result(url)

        score, flags, details = aggregate(signals)
        return AnalysisResult(
            url=url,
            risk_score=score,
            risk_level=classify(score, config.thresholds),
            flags=tuple(flags),
            details=details,
            signals=tuple(s for s in signals if not s.silent),
        )


_default_detector: Optional[Detector] = None


def analyze_url(url: str) -> AnalysisResult:
    """Analyze with a lazily created detector using the default tables."""
    global _default_detector
    if _default_detector is None:
        _default_detector = Detector()
    return _default_detector.analyze(url)
