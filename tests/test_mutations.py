from datetime import datetime

import pytest

from piggybank.exceptions import InvalidMutationError
from piggybank.models import SavingsGoal
from piggybank.mutations import deposit_request, transfer_request

NOW = datetime(2024, 3, 15, 10, 30)


def test_deposit_request_has_no_implicit_category():
    request = deposit_request(1000, NOW)
    assert request.type == 'deposit'
    assert request.description == 'General deposit'
    assert request.category_id is None
    payload = request.to_payload()
    assert 'categoryId' not in payload
    assert payload['date'] == '2024-03-15T10:30:00.000Z'


def test_deposit_request_rejects_non_positive_amounts():
    for amount in (0, -10, 'abc', float('nan')):
        with pytest.raises(InvalidMutationError):
            deposit_request(amount, NOW)


def test_transfer_request_targets_goal():
    goal = SavingsGoal(id=4, name='Emergency Fund', target_amount=50000, current_amount=10000)
    request = transfer_request(2500, goal, NOW)
    assert request.type == 'deposit'
    assert request.goal_id == 4
    assert request.description == 'Transfer to Emergency Fund'
    assert request.to_payload()['goalId'] == 4


def test_transfer_request_requires_goal():
    with pytest.raises(InvalidMutationError, match='select a goal'):
        transfer_request(100, None, NOW)
