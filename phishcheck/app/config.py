"""
config.py

Immutable reference configuration for the detector: the TLD, keyword and
legitimate-domain tables, the classification thresholds and the optional
network reputation signal settings.

A DetectorConfig is a snapshot. To change anything build a new one with
`replace()`, `from_mapping()` or `from_env()` and hand it to
`Detector.reload()`.
"""

import json
import os
from dataclasses import dataclass, field, replace as dc_replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

# Defaults (tweakable)
SUSPICIOUS_TLDS = ('.tk', '.ml', '.ga', '.cf', '.gq', '.xyz', '.top', '.work')

PHISHING_KEYWORDS = (
    'verify', 'account', 'suspended', 'confirm', 'urgent', 'security',
    'banking', 'paypal', 'signin', 'login', 'update', 'secure',
    'ebay', 'alert', 'locked', 'unusual', 'click', 'immediately',
)

LEGITIMATE_DOMAINS = (
    'google.com', 'facebook.com', 'amazon.com', 'paypal.com',
    'microsoft.com', 'apple.com', 'netflix.com', 'instagram.com',
)

MAX_URL_LENGTH = 75
MAX_EXTRA_SUBDOMAINS = 2  # labels beyond domain + TLD
MAX_HOST_HYPHENS = 3
STANDARD_PORTS = (80, 443)

SAFE_BROWSING_URL = 'https://safebrowsing.googleapis.com/v4/threatMatches:find'
SAFE_BROWSING_TIMEOUT = 3.0

TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _ordered_unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen = []
    for v in values:
        v = str(v).strip().lower()
        if v and v not in seen:
            seen.append(v)
    return tuple(seen)


@dataclass(frozen=True)
class Thresholds:
    high: int = 70
    medium: int = 40
    low: int = 20

    def __post_init__(self):
        for name in ('high', 'medium', 'low'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f'threshold {name!r} must be an integer, got {value!r}')
        if not (self.high > self.medium > self.low >= 0):
            raise ValueError(
                f'thresholds must satisfy high > medium > low >= 0 '
                f'(got high={self.high}, medium={self.medium}, low={self.low})'
            )

    def as_dict(self) -> Dict[str, int]:
        return {'high': self.high, 'medium': self.medium, 'low': self.low}


@dataclass(frozen=True)
class NetworkSignalConfig:
    enabled: bool = False
    endpoint: str = SAFE_BROWSING_URL
    api_key: Optional[str] = None
    timeout: float = SAFE_BROWSING_TIMEOUT

    @property
    def usable(self) -> bool:
        return bool(self.enabled and self.api_key)


@dataclass(frozen=True)
class DetectorConfig:
    suspicious_tlds: Tuple[str, ...] = SUSPICIOUS_TLDS
    phishing_keywords: Tuple[str, ...] = PHISHING_KEYWORDS
    legitimate_domains: Tuple[str, ...] = LEGITIMATE_DOMAINS
    thresholds: Thresholds = field(default_factory=Thresholds)
    max_url_length: int = MAX_URL_LENGTH
    max_extra_subdomains: int = MAX_EXTRA_SUBDOMAINS
    max_host_hyphens: int = MAX_HOST_HYPHENS
    standard_ports: Tuple[int, ...] = STANDARD_PORTS
    network_signal: NetworkSignalConfig = field(default_factory=NetworkSignalConfig)

    def __post_init__(self):
        # accept any iterable (sets, lists) but store ordered, deduplicated tuples
        object.__setattr__(self, 'suspicious_tlds', _ordered_unique(self.suspicious_tlds))
        object.__setattr__(self, 'phishing_keywords', _ordered_unique(self.phishing_keywords))
        object.__setattr__(self, 'legitimate_domains', _ordered_unique(self.legitimate_domains))
        object.__setattr__(self, 'standard_ports', tuple(int(p) for p in self.standard_ports))

    def replace(self, **changes) -> 'DetectorConfig':
        """Return a new snapshot with `changes` applied."""
        return dc_replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional['DetectorConfig'] = None) -> 'DetectorConfig':
        """
        Build a config from a plain dict (e.g. parsed JSON).

        Recognized keys: suspicious_tlds, phishing_keywords,
        legitimate_domains, thresholds {high, medium, low},
        network_signal {enabled, endpoint, api_key, timeout}.
        Missing keys keep the value from `base` (or the defaults).
        """
        base = base or cls()
        changes = {}
        for key in ('suspicious_tlds', 'phishing_keywords', 'legitimate_domains'):
            if key in data:
                values = data[key]
                if isinstance(values, str):
                    raise ValueError(f'{key} must be a list of strings, not a string')
                changes[key] = tuple(values)
        if 'thresholds' in data:
            merged = base.thresholds.as_dict()
            merged.update(data['thresholds'] or {})
            changes['thresholds'] = Thresholds(**merged)
        if 'network_signal' in data:
            ns = data['network_signal'] or {}
            changes['network_signal'] = dc_replace(
                base.network_signal,
                **{k: ns[k] for k in ('enabled', 'endpoint', 'api_key', 'timeout') if k in ns}
            )
        return base.replace(**changes)

    @classmethod
    def from_file(cls, path: str, base: Optional['DetectorConfig'] = None) -> 'DetectorConfig':
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f'cannot read config file {path}: {e}') from e
        if not isinstance(data, dict):
            raise ValueError(f'config file {path} must contain a JSON object')
        return cls.from_mapping(data, base=base)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DetectorConfig':
        """
        Build a config from PHISHCHECK_* environment variables, optionally
        layered on top of the JSON file named by PHISHCHECK_CONFIG_FILE.
        """
        env = os.environ if environ is None else environ
        config = cls()

        config_file = env.get('PHISHCHECK_CONFIG_FILE')
        if config_file:
            config = cls.from_file(config_file, base=config)

        thresholds = config.thresholds.as_dict()
        for name in ('high', 'medium', 'low'):
            raw = env.get(f'PHISHCHECK_THRESHOLD_{name.upper()}')
            if raw:
                try:
                    thresholds[name] = int(raw)
                except ValueError as e:
                    raise ValueError(f'PHISHCHECK_THRESHOLD_{name.upper()} must be an integer') from e

        ns = config.network_signal
        if env.get('PHISHCHECK_SAFE_BROWSING_ENABLED'):
            ns = dc_replace(ns, enabled=env['PHISHCHECK_SAFE_BROWSING_ENABLED'].strip().lower() in TRUE_VALUES)
        if env.get('PHISHCHECK_SAFE_BROWSING_KEY'):
            ns = dc_replace(ns, api_key=env['PHISHCHECK_SAFE_BROWSING_KEY'])
        if env.get('PHISHCHECK_SAFE_BROWSING_URL'):
            ns = dc_replace(ns, endpoint=env['PHISHCHECK_SAFE_BROWSING_URL'])
        if env.get('PHISHCHECK_SAFE_BROWSING_TIMEOUT'):
            ns = dc_replace(ns, timeout=float(env['PHISHCHECK_SAFE_BROWSING_TIMEOUT']))

        return config.replace(thresholds=Thresholds(**thresholds), network_signal=ns)


DEFAULT_CONFIG = DetectorConfig()
