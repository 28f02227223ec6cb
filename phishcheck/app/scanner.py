"""
scanner.py
Wires the detector together from the environment for the API and CLI.
"""

import logging
from typing import Optional

from phishcheck.app.config import DetectorConfig
from phishcheck.app.detector import Detector
from phishcheck.app.threat_intel import SafeBrowsingSignal

logger = logging.getLogger("scanner")

_detector: Optional[Detector] = None


def build_detector(config: Optional[DetectorConfig] = None) -> Detector:
    """
    Build a detector from `config` (or PHISHCHECK_* env vars), attaching the
    Safe Browsing signal only when it is enabled and has a key.
    """
    if config is None:
        config = DetectorConfig.from_env()
    network_signal = SafeBrowsingSignal.from_config(config.network_signal)
    if network_signal is not None:
        logger.info("Safe Browsing signal enabled (%s)", config.network_signal.endpoint)
    elif config.network_signal.enabled:
        logger.warning("Safe Browsing enabled but no API key configured; signal disabled")
    return Detector(config=config, network_signal=network_signal)


def get_detector() -> Detector:
    """Shared process-wide detector, built on first use."""
    global _detector
    if _detector is None:
        _detector = build_detector()
    return _detector


def scan_url(url: str) -> dict:
    """Analyze `url` with the shared detector and return a JSON-ready dict."""
    return get_detector().analyze(url).to_dict()
