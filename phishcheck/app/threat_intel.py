"""
threat_intel.py

Optional network reputation signal backed by the Google Safe Browsing
v4 Lookup API.

A network signal is any object with

    lookup(url: NormalizedURL) -> Optional[Signal]

that raises SignalSourceUnavailable when the source cannot answer. The
detector treats that as "no contribution" so heuristics alone still
produce a verdict.

Requirements:
    pip install requests
"""

import logging
from typing import Optional

import requests

from phishcheck.app.config import NetworkSignalConfig
from phishcheck.app.errors import SignalSourceUnavailable
from phishcheck.app.normalizer import NormalizedURL
from phishcheck.app.signals import Signal

logger = logging.getLogger("threat_intel")

WEIGHT_SAFE_BROWSING = 50
CLIENT_ID = "phishcheck"
CLIENT_VERSION = "1.0"
THREAT_TYPES = [
    "MALWARE",
    "SOCIAL_ENGINEERING",
    "UNWANTED_SOFTWARE",
    "POTENTIALLY_HARMFUL_APPLICATION",
]


class SafeBrowsingSignal:
    """Look a URL up in Safe Browsing; +50 when it is listed."""

    def __init__(self, api_key: str, endpoint: str, timeout: float = 3.0, session=None):
        if not api_key:
            raise ValueError("Safe Browsing needs an API key")
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: NetworkSignalConfig) -> Optional["SafeBrowsingSignal"]:
        """Return a client when the config enables one, else None."""
        if not config.usable:
            return None
        return cls(config.api_key, config.endpoint, timeout=config.timeout)

    def _payload(self, url: str) -> dict:
        return {
            "client": {"clientId": CLIENT_ID, "clientVersion": CLIENT_VERSION},
            "threatInfo": {
                "threatTypes": THREAT_TYPES,
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}],
            },
        }

    def lookup(self, url: NormalizedURL) -> Optional[Signal]:
        try:
            resp = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self._payload(url.full_href),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise SignalSourceUnavailable(f"Safe Browsing request failed: {e}") from e
        except ValueError as e:
            raise SignalSourceUnavailable(f"Safe Browsing returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SignalSourceUnavailable("Safe Browsing returned an unexpected payload")

        matches = data.get("matches") or []
        threats = []
        for m in matches:
            threat = m.get("threatType") if isinstance(m, dict) else None
            if threat and threat not in threats:
                threats.append(threat)
        if not threats:
            return None

        logger.info("Safe Browsing match for %s: %s", url.host, threats)
        return Signal(
            "safe_browsing",
            WEIGHT_SAFE_BROWSING,
            {"threats": tuple(threats)},
            detail=("safeBrowsing", threats),
        )
