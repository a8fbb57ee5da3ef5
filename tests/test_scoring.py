"""
tests/test_scoring.py
Unit tests for src/workitems/scoring.py.
"""

import itertools

import pytest

from src.workitems.scoring import SCORE_WEIGHTS, compute_score, score_selection
from src.workitems.types import CategorySelection

RANGES = [range(1, 6), range(1, 4), range(1, 4), range(1, 4), range(1, 4)]


def test_weights_sum_to_one():
    assert sum(SCORE_WEIGHTS.values()) == 1


def test_best_selection_scores_100():
    assert compute_score(1, 1, 1, 3, 1) == 100


def test_all_ones_scores_95_because_effort_is_inverted():
    assert compute_score(1, 1, 1, 1, 1) == 95


def test_regression_baseline():
    assert compute_score(5, 3, 3, 1, 3) == 40


def test_half_values_round_up():
    # weighted sum 1.1 -> 97.5
    assert compute_score(1, 1, 1, 3, 2) == 98


@pytest.mark.parametrize("missing", range(5))
def test_any_missing_input_scores_zero(missing):
    args = [1, 1, 1, 1, 1]
    args[missing] = None
    assert compute_score(*args) == 0


def test_scores_stay_in_range():
    for combo in itertools.product(*RANGES):
        assert 0 <= compute_score(*combo) <= 100


@pytest.mark.parametrize("position", [0, 1, 2, 4])
def test_score_non_increasing_in_priority_codes(position):
    for combo in itertools.product(*RANGES):
        if combo[position] == RANGES[position][-1]:
            continue
        bumped = list(combo)
        bumped[position] += 1
        assert compute_score(*bumped) <= compute_score(*combo)


def test_score_non_decreasing_in_effort_category():
    for combo in itertools.product(*RANGES):
        if combo[3] == 3:
            continue
        bumped = list(combo)
        bumped[3] += 1
        assert compute_score(*bumped) >= compute_score(*combo)


def test_score_selection_uses_all_fields():
    selection = CategorySelection(gov_type=5, impact=3, cost_savings=3, effort_category=1, complexity=3)
    assert score_selection(selection) == 40
    assert score_selection(CategorySelection(gov_type=1)) == 0
