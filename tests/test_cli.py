import json

from phishcheck import cli


def test_json_output(capsys):
    assert cli.main(['https://test.net/', 'not a url', '--json']) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    first, second = (json.loads(l) for l in lines)
    assert first['risk_level'] == 'safe'
    assert second['flags'] == ['Invalid URL format']


def test_text_output(capsys):
    cli.main(['http://192.168.1.1/login'])
    out = capsys.readouterr().out
    assert 'MEDIUM (score 60)' in out
    assert '- Does not use HTTPS' in out


def test_config_file(tmp_path, capsys):
    path = tmp_path / 'tables.json'
    path.write_text(json.dumps({'thresholds': {'high': 60}}))
    cli.main(['http://192.168.1.1/login', '--config', str(path), '--json'])
    assert json.loads(capsys.readouterr().out)['risk_level'] == 'high'


def test_format_result_without_flags():
    text = cli.format_result({'url': 'https://test.net/', 'risk_level': 'safe', 'risk_score': 0, 'flags': []})
    assert 'Flags: none' in text
