from datetime import datetime

import pytest

from piggybank.models import Category, Transaction
from piggybank.trends import build_trend, dense_trend_frame, series_categories

NOW = datetime(2024, 3, 15)


def _expense(id, amount, date, category_id):
    return Transaction(id=id, amount=amount, date=date, type='expense', category_id=category_id)


def test_three_months_with_data_only_in_middle():
    txns = [_expense(1, 250, '2024-02-10', 1)]
    buckets = build_trend(txns, 3, NOW)
    assert [bucket.period_label for bucket in buckets] == ['2024-01', '2024-02', '2024-03']
    assert buckets[0].per_category_amount == {}
    assert buckets[1].per_category_amount == {1: 250}
    assert buckets[2].per_category_amount == {}


def test_buckets_sum_per_category_and_skip_other_types():
    txns = [
        _expense(1, 100, '2024-03-01', 1),
        _expense(2, 50, '2024-03-02', 1),
        _expense(3, 400, '2024-03-03', 2),
        Transaction(id=4, amount=999, date='2024-03-03', type='deposit', category_id=1),
        _expense(5, 75, '2023-12-31', 1),
    ]
    buckets = build_trend(txns, 3, NOW)
    march = buckets[-1].per_category_amount
    assert march == {2: 400, 1: 150}
    assert list(march) == [2, 1]
    assert all(1 not in bucket.per_category_amount for bucket in buckets[:2])


def test_series_categories_follow_first_appearance():
    txns = [
        _expense(1, 10, '2024-01-05', 3),
        _expense(2, 90, '2024-02-05', 1),
        _expense(3, 40, '2024-02-06', 2),
        _expense(4, 500, '2024-03-05', 4),
        _expense(5, 5, '2024-03-06', 3),
    ]
    buckets = build_trend(txns, 3, NOW)
    assert series_categories(buckets) == (3, 1, 2, 4)


def test_invalid_month_count_yields_empty_series(caplog):
    with caplog.at_level('WARNING', logger='piggybank.anomalies'):
        assert build_trend([], 0, NOW) == ()
    assert 'invalid_month_count' in caplog.text


def test_future_expenses_in_current_month_are_ignored():
    txns = [_expense(1, 60, '2024-03-20', 1)]
    buckets = build_trend(txns, 1, NOW)
    assert buckets[0].per_category_amount == {}


def test_dense_frame_zero_fills_missing_categories():
    txns = [
        _expense(1, 100, '2024-01-05', 1),
        _expense(2, 200, '2024-03-05', 2),
    ]
    categories = [Category(id=1, name='Food'), Category(id=2, name='Travel')]
    table = dense_trend_frame(build_trend(txns, 3, NOW), categories)
    assert list(table.index) == ['2024-01', '2024-02', '2024-03']
    assert list(table.columns) == ['Food', 'Travel']
    assert table.loc['2024-02', 'Food'] == 0
    assert table.loc['2024-03', 'Travel'] == 200


def test_dense_frame_limit_keeps_first_series_categories():
    txns = [
        _expense(1, 100, '2024-03-01', 1),
        _expense(2, 90, '2024-03-02', 2),
        _expense(3, 80, '2024-03-03', 3),
    ]
    table = dense_trend_frame(build_trend(txns, 1, NOW), limit=2)
    assert list(table.columns) == [1, 2]


def test_bucket_amounts_are_read_only():
    buckets = build_trend([_expense(1, 250, '2024-02-10', 1)], 3, NOW)
    with pytest.raises(TypeError):
        buckets[1].per_category_amount[1] = 0
    assert buckets[1].per_category_amount == {1: 250}
    assert hash(buckets[1]) == hash(buckets[1])
