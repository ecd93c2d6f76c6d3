from piggybank import insights as insights_module
from piggybank.insights import parse_insights, top_insights


def test_parse_insights_normalizes_types():
    records = [
        {'id': 1, 'content': 'Cut dining out by 10%', 'type': 'expense', 'title': 'Dining'},
        {'id': 2, 'content': 'Consider an index fund', 'type': 'Investment'},
        {'id': 3, 'content': 'You saved more this month', 'type': 'mystery'},
    ]
    parsed = parse_insights(records)
    assert [item.type for item in parsed] == ['expense', 'investment', 'general']
    assert parsed[0].title == 'Dining'
    assert parsed[1].title is None


def test_parse_insights_skips_malformed_records(caplog):
    records = [
        {'id': 1, 'content': '   ', 'type': 'savings'},
        {'content': 'no id'},
        'not a record',
        {'id': 4, 'content': 'Keep it up', 'type': 'savings'},
    ]
    with caplog.at_level('WARNING', logger='piggybank.anomalies'):
        parsed = parse_insights(records)
    assert [item.id for item in parsed] == [4]
    assert 'invalid_insight' in caplog.text


def test_top_insights_uses_configured_limit(monkeypatch):
    parsed = parse_insights([{'id': i, 'content': f'tip {i}', 'type': 'savings'} for i in range(5)])
    assert [item.id for item in top_insights(parsed)] == [0, 1]
    monkeypatch.setattr(insights_module.config, 'INSIGHT_LIMIT', 3)
    assert len(top_insights(parsed)) == 3
    assert top_insights(parsed, limit=0) == ()
