import pytest

from phishcheck.app.errors import MalformedURL
from phishcheck.app.normalizer import normalize_url


def test_normalize_basic_fields():
    n = normalize_url('HTTPS://Example.COM/Login/Page?next=Home#top')
    assert n.raw == 'HTTPS://Example.COM/Login/Page?next=Home#top'
    assert n.scheme == 'https'
    assert n.host == 'example.com'
    assert n.port is None
    assert n.path == '/Login/Page'
    assert n.query == 'next=Home'
    assert n.full_href == 'https://example.com/Login/Page?next=Home#top'


def test_empty_path_becomes_slash():
    n = normalize_url('https://example.com')
    assert n.path == '/'
    assert n.full_href == 'https://example.com/'


def test_default_port_dropped_explicit_port_kept():
    assert normalize_url('https://example.com:443/').port is None
    assert normalize_url('http://example.com:80/').port is None
    n = normalize_url('http://example.com:8080/x')
    assert n.port == 8080
    assert n.full_href == 'http://example.com:8080/x'
    # 443 is only the default for https
    assert normalize_url('http://example.com:443/').port == 443


def test_any_scheme_accepted():
    n = normalize_url('ftp://files.example.com/pub')
    assert n.scheme == 'ftp'
    assert n.host == 'files.example.com'


def test_userinfo_kept_in_href():
    n = normalize_url('https://user@evil.net/')
    assert n.host == 'evil.net'
    assert '@' in n.full_href


def test_surrounding_whitespace_ignored():
    assert normalize_url('  https://example.com/  ').host == 'example.com'


@pytest.mark.parametrize('raw', [
    '',
    '   ',
    'not a url',
    'example.com/login',
    'https://',
    'http://example.com:notaport/',
    'http://example.com:99999/',
    'http://[::1/',
])
def test_malformed_inputs(raw):
    with pytest.raises(MalformedURL):
        normalize_url(raw)


def test_malformed_is_value_error():
    with pytest.raises(ValueError):
        normalize_url('nope')
