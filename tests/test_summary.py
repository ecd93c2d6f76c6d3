from datetime import datetime

import pytest

from piggybank.data_processing import AggregationWindow
from piggybank.models import Category, SavingsGoal, Transaction
from piggybank.summary import summarize

NOW = datetime(2024, 3, 15, 9, 30)


def _fixture():
    categories = [
        Category(id=1, name='Food & Dining', icon='restaurant', color='#673AB7'),
        Category(id=2, name='Transportation', icon='directions_car', color='#009688'),
    ]
    goals = [
        SavingsGoal(id=1, name='Emergency Fund', target_amount=50000, current_amount=10000,
                    deadline='2024-09-01', icon='savings', color='#4CAF50'),
        SavingsGoal(id=2, name='New Phone', target_amount=1000, current_amount=900),
        SavingsGoal(id=3, name='Done', target_amount=500, current_amount=500),
    ]
    transactions = [
        Transaction(id=1, amount=20000, date='2024-01-05', type='deposit', description='Salary'),
        Transaction(id=2, amount=1000, date='2024-02-05', type='deposit', description='General deposit'),
        Transaction(id=3, amount=400, date='2024-02-10', type='expense', category_id=2, description='Fuel'),
        Transaction(id=4, amount=1500, date='2024-03-02', type='deposit', description='Bonus'),
        Transaction(id=5, amount=300, date='2024-03-03', type='expense', category_id=1, description='Groceries'),
        Transaction(id=6, amount=700, date='2024-03-04', type='expense', category_id=2, description='Train'),
        Transaction(id=7, amount=200, date='2024-03-05', type='deposit', goal_id=2,
                    description='Transfer to New Phone'),
    ]
    return transactions, goals, categories


def test_summary_composes_all_calculators():
    transactions, goals, categories = _fixture()
    summary = summarize(transactions, goals, categories, NOW)

    assert summary.total_savings == 20000 + 1000 - 400 + 1500 - 300 - 700 + 200
    # previous month net 600, current month net 700
    assert summary.monthly_growth_percent == pytest.approx(100 / 6)
    assert summary.last_deposit.id == 7
    assert summary.next_goal.id == 2
    assert summary.next_goal_progress == 90
    assert [share.category_id for share in summary.category_breakdown] == [2, 1]
    assert [share.percentage for share in summary.category_breakdown] == [70, 30]
    assert [bucket.period_label for bucket in summary.trend_series] == ['2024-01', '2024-02', '2024-03']
    assert summary.trend_categories == (2, 1)
    assert [row.goal_id for row in summary.goal_progress] == [1, 2, 3]
    assert summary.recent_transactions[0].id == 7
    assert summary.generated_at == NOW


def test_summary_is_idempotent():
    transactions, goals, categories = _fixture()
    first = summarize(transactions, goals, categories, NOW)
    second = summarize(transactions, goals, categories, NOW)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_summary_of_empty_ledger():
    summary = summarize([], [], [], NOW)
    assert summary.total_savings == 0
    assert summary.monthly_growth_percent == 0
    assert summary.last_deposit is None
    assert summary.next_goal is None
    assert summary.next_goal_progress == 0
    assert summary.category_breakdown == ()
    assert len(summary.trend_series) == 3
    assert summary.trend_categories == ()
    assert summary.recent_transactions == ()


def test_summary_options_override_defaults():
    transactions, goals, categories = _fixture()
    summary = summarize(
        transactions,
        goals,
        categories,
        NOW,
        trend_months=2,
        breakdown_window=AggregationWindow.last_n_months(NOW, 2),
        recent_limit=1,
        goal_limit=1,
    )
    assert len(summary.trend_series) == 2
    assert summary.category_breakdown[0].amount == 1100
    assert len(summary.recent_transactions) == 1
    assert len(summary.goal_progress) == 1


def test_summary_uses_configured_defaults(monkeypatch):
    from piggybank import summary as summary_module

    monkeypatch.setattr(summary_module.config, 'TREND_MONTHS', 6)
    monkeypatch.setattr(summary_module.config, 'BREAKDOWN_PERIOD', 'year')
    transactions, goals, categories = _fixture()
    result = summarize(transactions, goals, categories, NOW)
    assert len(result.trend_series) == 6
    assert sum(share.amount for share in result.category_breakdown) == 1400


def test_invalid_now_raises():
    with pytest.raises(ValueError):
        summarize([], [], [], 'yesterday-ish')


def test_to_dict_uses_widget_keys():
    transactions, goals, categories = _fixture()
    data = summarize(transactions, goals, categories, NOW).to_dict()
    assert data['totalSavings'] == 21300
    assert data['lastDeposit']['amount'] == 200
    assert data['nextGoal']['name'] == 'New Phone'
    assert data['categoryBreakdown'][0]['categoryId'] == 2
    assert data['trends'][-1]['data'][0] == {'categoryId': 2, 'amount': 700}


def test_summary_is_hashable():
    transactions, goals, categories = _fixture()
    summary = summarize(transactions, goals, categories, NOW)
    assert hash(summary) == hash(summarize(transactions, goals, categories, NOW))


def test_invalid_goal_is_reported_once_per_summary(caplog):
    transactions, goals, categories = _fixture()
    goals.append(SavingsGoal(id=4, name='Broken', target_amount=0, current_amount=100))
    with caplog.at_level('WARNING', logger='piggybank.anomalies'):
        summary = summarize(transactions, goals, categories, NOW)
    assert caplog.text.count('invalid_goal_target') == 1
    assert summary.next_goal.id == 2
