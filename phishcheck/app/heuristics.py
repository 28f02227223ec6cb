"""
heuristics.py

Explainable URL heuristic checks for phishing detection.

Every check has the same shape:

    check(url: NormalizedURL, config: DetectorConfig) -> List[Signal]

and returns an empty list when nothing fires. Checks are independent:
none reads another's output, so the total score is the plain sum of their
contributions. DEFAULT_CHECKS is the order the detector runs them in,
which is also the order flags are reported in.
"""

import re
from typing import Callable, List, Tuple

from phishcheck.app.config import DetectorConfig
from phishcheck.app.normalizer import NormalizedURL
from phishcheck.app.signals import Signal

# Weights (fixed for compatibility with earlier scores)
WEIGHT_IP_HOST = 30
WEIGHT_LONG_URL = 15
WEIGHT_MANY_SUBDOMAINS = 20
WEIGHT_SUSPICIOUS_TLD = 25
WEIGHT_NO_HTTPS = 20
WEIGHT_PER_KEYWORD = 10
WEIGHT_TYPOSQUATTING = 35
WEIGHT_CHAR_SUBSTITUTION = 15
WEIGHT_AT_SYMBOL = 30
WEIGHT_MANY_HYPHENS = 15
WEIGHT_DOUBLE_SLASH = 20
WEIGHT_NONSTANDARD_PORT = 15

IP_RE = re.compile(r'^(\d{1,3}\.){3}\d{1,3}$')
SUBSTITUTION_RE = re.compile(r'([a-z])[0o]([a-z])|([a-z])[1il]([a-z])', re.IGNORECASE)

Check = Callable[[NormalizedURL, DetectorConfig], List[Signal]]


def check_ip_address(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    """Dotted-quad host. Digit count only, octets are not range-checked."""
    if IP_RE.match(url.host):
        return [Signal('ip_host', WEIGHT_IP_HOST, detail=('usesIP', True))]
    return []


def check_url_length(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    length = len(url.full_href)
    if length > config.max_url_length:
        return [Signal('long_url', WEIGHT_LONG_URL, {'length': length}, detail=('urlLength', length))]
    return []


def check_subdomains(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    # treat the last two labels as domain + TLD
    count = len(url.host.split('.')) - 2
    if count > config.max_extra_subdomains:
        return [Signal('many_subdomains', WEIGHT_MANY_SUBDOMAINS, {'count': count}, detail=('subdomains', count))]
    return []


def check_suspicious_tld(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    host = url.host.lower()
    for tld in config.suspicious_tlds:
        if host.endswith(tld):
            return [Signal('suspicious_tld', WEIGHT_SUSPICIOUS_TLD, {'tld': tld}, detail=('suspiciousTLD', tld))]
    return []


def check_https(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    if url.scheme != 'https':
        return [Signal('no_https', WEIGHT_NO_HTTPS, detail=('hasHTTPS', False))]
    return [Signal('https', 0, detail=('hasHTTPS', True), silent=True)]


def check_phishing_keywords(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    """Every configured keyword found in host, path or query counts once."""
    haystacks = (url.host.lower(), url.path.lower(), url.query.lower())
    found = [kw for kw in config.phishing_keywords if any(kw in h for h in haystacks)]
    if not found:
        return []
    return [Signal(
        'phishing_keywords',
        WEIGHT_PER_KEYWORD * len(found),
        {'keywords': tuple(found)},
        detail=('phishingKeywords', list(found)),
    )]


def brand_name(domain: str) -> str:
    """'paypal.com' -> 'paypal'. Only the first '.com' and '.org' are stripped."""
    return domain.replace('.com', '', 1).replace('.org', '', 1)


def check_typosquatting(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    """
    Host mentions a known brand without being that brand's domain or one
    of its subdomains. First matching legitimate domain wins.
    """
    host = url.host.lower()
    for legitimate in config.legitimate_domains:
        brand = brand_name(legitimate)
        if not brand:
            continue
        if brand in host and host != legitimate and not host.endswith('.' + legitimate):
            return [Signal(
                'typosquatting',
                WEIGHT_TYPOSQUATTING,
                {'domain': legitimate},
                detail=('typosquatting', legitimate),
            )]
    return []


def check_character_substitution(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    """Look-alike digits between letters, e.g. g00gle, payp1l."""
    if SUBSTITUTION_RE.search(url.host):
        return [Signal('char_substitution', WEIGHT_CHAR_SUBSTITUTION)]
    return []


def check_suspicious_characters(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    signals = []
    if '@' in url.full_href:
        signals.append(Signal('at_symbol', WEIGHT_AT_SYMBOL))
    hyphens = url.host.count('-')
    if hyphens > config.max_host_hyphens:
        signals.append(Signal('many_hyphens', WEIGHT_MANY_HYPHENS, {'count': hyphens}))
    if '//' in url.path:
        signals.append(Signal('double_slash_path', WEIGHT_DOUBLE_SLASH))
    return signals


def check_port(url: NormalizedURL, config: DetectorConfig) -> List[Signal]:
    if url.port is not None and url.port not in config.standard_ports:
        return [Signal('nonstandard_port', WEIGHT_NONSTANDARD_PORT, {'port': url.port}, detail=('port', url.port))]
    return []


DEFAULT_CHECKS: Tuple[Check, ...] = (
    check_ip_address,
    check_url_length,
    check_subdomains,
    check_suspicious_tld,
    check_https,
    check_phishing_keywords,
    check_typosquatting,
    check_character_substitution,
    check_suspicious_characters,
    check_port,
)
