import json

from piggybank import config


def test_defaults_come_from_settings_file():
    loaded = config.load_config()
    assert loaded['currency']['symbol'] == '₹'
    assert loaded['summary']['trend_months'] == 3
    assert loaded['summary']['breakdown_period'] == 'month'


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('PIGGYBANK_TREND_MONTHS', '6')
    monkeypatch.setenv('PIGGYBANK_CURRENCY_SYMBOL', '$')
    loaded = config.load_config()
    assert loaded['summary']['trend_months'] == 6
    assert loaded['currency']['symbol'] == '$'


def test_invalid_overrides_fall_back(monkeypatch):
    monkeypatch.setenv('PIGGYBANK_RECENT_LIMIT', 'lots')
    monkeypatch.setenv('PIGGYBANK_BREAKDOWN_PERIOD', 'fortnight')
    loaded = config.load_config()
    assert loaded['summary']['recent_limit'] == 5
    assert loaded['summary']['breakdown_period'] == 'month'


def test_alternative_settings_file(tmp_path, monkeypatch):
    monkeypatch.delenv('PIGGYBANK_TREND_MONTHS', raising=False)
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'summary': {'trend_months': 12}}), encoding='utf-8')
    assert config.load_config(path)['summary']['trend_months'] == 12


def test_get_config_value():
    assert config.get_config_value('summary', 'goal_limit') == 3
    assert config.get_config_value('summary', 'missing', default='x') == 'x'
