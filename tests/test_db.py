import pytest

from phishcheck import db
from phishcheck.app.detector import Detector


@pytest.fixture
def database(tmp_path):
    previous = db.DATABASE_URL
    db.init_db(f"sqlite:///{tmp_path / 'history.db'}")
    yield db
    db.init_db(previous)


def result(url):
    return Detector().analyze(url).to_dict()


def test_record_and_get(database):
    scan_id = database.record_scan(result("http://192.168.1.1/login"))
    item = database.get_scan(scan_id)
    assert item["url"] == "http://192.168.1.1/login"
    assert item["risk_level"] == "medium"
    assert item["risk_score"] == 60
    assert item["flags"][0] == "Uses IP address instead of domain name"
    assert item["result"]["details"]["usesIP"] is True


def test_get_missing(database):
    assert database.get_scan(12345) is None


def test_list_newest_first_and_paging(database):
    ids = [database.record_scan(result(f"https://test.net/{i}")) for i in range(5)]
    rows = database.list_scans(limit=3)
    assert [r["id"] for r in rows] == ids[::-1][:3]
    rows = database.list_scans(limit=3, offset=3)
    assert [r["id"] for r in rows] == ids[::-1][3:]


def test_counters(database):
    database.record_scan(result("https://test.net/"))                   # safe
    database.record_scan(result("http://192.168.1.1/login"))            # medium
    database.record_scan(result("https://paypal-security-alert.tk/"))   # high
    database.record_scan(result("not a url"))                           # high
    assert database.get_stats() == {"total_checks": 4, "threats_blocked": 3}


def test_clear_history_keeps_counters(database):
    database.record_scan(result("https://test.net/"))
    database.record_scan(result("not a url"))
    assert database.clear_history() == 2
    assert database.list_scans() == []
    assert database.get_stats() == {"total_checks": 2, "threats_blocked": 1}


def test_reset_stats(database):
    database.record_scan(result("not a url"))
    database.reset_stats()
    assert database.get_stats() == {"total_checks": 0, "threats_blocked": 0}


def test_history_limit_keeps_newest_scans(database, monkeypatch):
    monkeypatch.setattr(database, "HISTORY_LIMIT", 3)
    ids = [database.record_scan(result(f"https://test.net/{i}")) for i in range(5)]
    assert [r["id"] for r in database.list_scans()] == ids[::-1][:3]
    assert database.get_scan(ids[0]) is None
    # counters still cover every check
    assert database.get_stats()["total_checks"] == 5


def test_history_unlimited_by_default(database):
    for i in range(12):
        database.record_scan(result(f"https://test.net/{i}"))
    assert len(database.list_scans(limit=50)) == 12


def test_failed_record_is_logged_and_rolled_back(database, caplog):
    with caplog.at_level("ERROR", logger="db"):
        with pytest.raises(KeyError):
            database.record_scan({"url": "https://test.net/"})
    assert "rolling back" in caplog.text
    assert database.get_stats() == {"total_checks": 0, "threats_blocked": 0}
