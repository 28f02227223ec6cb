"""
signals.py

Structured record for a fired heuristic and the prose templates used to
render it for people. Checks never build prose themselves; they return
Signal(kind, score, params, detail) and the flag text is produced by
render_flag() when the result is assembled.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

FLAG_TEMPLATES = {
    'invalid_url': 'Invalid URL format',
    'ip_host': 'Uses IP address instead of domain name',
    'long_url': 'Unusually long URL',
    'many_subdomains': 'Excessive subdomains ({count})',
    'suspicious_tld': 'Suspicious TLD: {tld}',
    'no_https': 'Does not use HTTPS',
    'phishing_keywords': 'Contains phishing keywords: {keywords}',
    'typosquatting': 'Possible typosquatting of {domain}',
    'char_substitution': 'Contains confusing character substitutions (0/O, 1/l/I)',
    'at_symbol': 'Contains @ symbol (may hide real domain)',
    'many_hyphens': 'Excessive hyphens in domain',
    'double_slash_path': 'Double slashes in path (possible redirection)',
    'nonstandard_port': 'Non-standard port: {port}',
    'safe_browsing': 'Flagged by Safe Browsing: {threats}',
}


@dataclass(frozen=True)
class Signal:
    kind: str
    score: int = 0
    params: Mapping[str, Any] = field(default_factory=dict)
    detail: Optional[Tuple[str, Any]] = None
    silent: bool = False

    def __post_init__(self):
        if isinstance(self.score, bool) or not isinstance(self.score, int):
            raise ValueError(f'signal score must be an integer, got {self.score!r}')
        if self.score < 0:
            raise ValueError(f'signal {self.kind!r} has negative score {self.score}')

    def as_dict(self) -> Dict[str, Any]:
        d = {'kind': self.kind, 'score': self.score, 'params': dict(self.params)}
        if self.detail is not None:
            d['detail'] = {self.detail[0]: self.detail[1]}
        return d


def _format_param(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ', '.join(str(v) for v in value)
    return value


def render_flag(signal: Signal) -> str:
    """Render the human-readable flag for a signal."""
    template = FLAG_TEMPLATES.get(signal.kind)
    if template is None:
        # unknown kinds from custom checks may carry their own text
        return str(signal.params.get('message', signal.kind))
    return template.format(**{k: _format_param(v) for k, v in signal.params.items()})
