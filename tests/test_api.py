import pytest

from phishcheck import api, db
from phishcheck.app.scanner import get_detector


@pytest.fixture
def client():
    api.app.config['TESTING'] = True
    api.limiter.enabled = False
    db.clear_history()
    db.reset_stats()
    detector = get_detector()
    config = detector.config
    with api.app.test_client() as c:
        yield c
    detector.reload(config)


def test_health(client):
    rv = client.get('/health')
    assert rv.status_code == 200
    assert rv.get_json()['status'] == 'ok'


def test_analyze_returns_result_and_records(client):
    rv = client.post('/analyze', json={'url': 'http://192.168.1.1/login'})
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['risk_score'] == 60
    assert d['risk_level'] == 'medium'
    assert d['flags'][0] == 'Uses IP address instead of domain name'
    assert isinstance(d['scan_id'], int)

    item = client.get(f"/history/{d['scan_id']}").get_json()
    assert item['url'] == 'http://192.168.1.1/login'


def test_analyze_malformed_is_still_200(client):
    rv = client.post('/analyze', json={'url': 'not a url'})
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['risk_score'] == 50
    assert d['risk_level'] == 'high'
    assert d['flags'] == ['Invalid URL format']


@pytest.mark.parametrize('body', [None, {}, {'url': ''}, {'url': '   '}, {'url': 5}])
def test_analyze_bad_request(client, body):
    rv = client.post('/analyze', json=body)
    assert rv.status_code == 400
    assert 'error' in rv.get_json()


def test_history_and_stats(client):
    client.post('/analyze', json={'url': 'https://test.net/'})
    client.post('/analyze', json={'url': 'https://paypal-security-alert.tk/'})

    rows = client.get('/history?limit=10').get_json()['rows']
    assert [r['url'] for r in rows] == ['https://paypal-security-alert.tk/', 'https://test.net/']

    assert client.get('/stats').get_json() == {'total_checks': 2, 'threats_blocked': 1}

    assert client.delete('/history').get_json() == {'deleted': 2}
    assert client.get('/history').get_json()['count'] == 0
    assert client.get('/stats').get_json()['total_checks'] == 2


def test_history_bad_paging(client):
    assert client.get('/history?limit=abc').status_code == 400


def test_history_item_not_found(client):
    assert client.get('/history/999999').status_code == 404


def test_thresholds_get_set(client):
    rv = client.get('/config/thresholds')
    assert rv.get_json() == {'high': 70, 'medium': 40, 'low': 20}

    rv = client.post('/config/thresholds', json={'high': 60})
    assert rv.status_code == 200
    assert rv.get_json() == {'high': 60, 'medium': 40, 'low': 20}

    d = client.post('/analyze', json={'url': 'http://192.168.1.1/login'}).get_json()
    assert d['risk_level'] == 'high'


@pytest.mark.parametrize('body', [None, {'high': 10}, {'critical': 90}, {'low': 'x'}])
def test_thresholds_invalid(client, body):
    rv = client.post('/config/thresholds', json=body)
    assert rv.status_code == 400
    assert client.get('/config/thresholds').get_json()['high'] == 70


def test_api_key_required(client, monkeypatch):
    monkeypatch.setattr(api, 'API_KEY', 'sekret')
    assert client.post('/analyze', json={'url': 'https://test.net/'}).status_code == 401
    rv = client.post('/analyze', json={'url': 'https://test.net/'}, headers={'X-API-Key': 'sekret'})
    assert rv.status_code == 200


def test_analyze_keeps_submitted_url_unmodified(client):
    raw = '  https://test.net/Path  '
    d = client.post('/analyze', json={'url': raw}).get_json()
    assert d['url'] == raw
    assert client.get(f"/history/{d['scan_id']}").get_json()['url'] == raw
