"""
normalizer.py

Parses a raw URL string into the structured fields the heuristic checks
inspect.

Public function:
    normalize_url(raw: str) -> NormalizedURL

Example:
    >>> normalize_url("HTTPS://Example.com:443")
    NormalizedURL(raw='HTTPS://Example.com:443', scheme='https', host='example.com',
                  port=None, path='/', query='', full_href='https://example.com/')
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from phishcheck.app.errors import MalformedURL

SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
    'ftp': 21,
    'ws': 80,
    'wss': 443,
}

# schemes whose empty path is serialized as "/"
SPECIAL_SCHEMES = {'http', 'https', 'ftp', 'ws', 'wss', 'file'}


@dataclass(frozen=True)
class NormalizedURL:
    raw: str
    scheme: str
    host: str
    port: Optional[int]
    path: str
    query: str
    full_href: str


def _netloc_userinfo(netloc: str) -> str:
    if '@' not in netloc:
        return ''
    return netloc.rsplit('@', 1)[0] + '@'


def _format_host(host: str) -> str:
    # IPv6 literals need their brackets back
    if ':' in host:
        return f'[{host}]'
    return host


def normalize_url(raw: str) -> NormalizedURL:
    """
    Parse `raw` into a NormalizedURL.

    Raises MalformedURL when the value is empty, has no `scheme://`
    prefix, has no host, or cannot be split (bad port, bad IPv6 literal).
    """
    if not isinstance(raw, str):
        raise MalformedURL(f'expected a string, got {type(raw).__name__}')
    value = raw.strip()
    if not value:
        raise MalformedURL('empty url')
    if not SCHEME_RE.match(value):
        raise MalformedURL(f'missing scheme: {value!r}')

    try:
        parts = urlsplit(value)
        host = (parts.hostname or '').lower()
        port = parts.port
    except ValueError as e:
        raise MalformedURL(f'unparseable url {value!r}: {e}') from e

    if not host:
        raise MalformedURL(f'missing host: {value!r}')

    scheme = parts.scheme.lower()
    if port is not None and DEFAULT_PORTS.get(scheme) == port:
        port = None

    path = parts.path
    if not path and scheme in SPECIAL_SCHEMES:
        path = '/'

    href = f'{scheme}://{_netloc_userinfo(parts.netloc)}{_format_host(host)}'
    if port is not None:
        href += f':{port}'
    href += path
    if parts.query:
        href += '?' + parts.query
    if parts.fragment:
        href += '#' + parts.fragment

    return NormalizedURL(
        raw=raw,
        scheme=scheme,
        host=host,
        port=port,
        path=path,
        query=parts.query,
        full_href=href,
    )
