import random

import pytest

from arena.services.games.opponent import (
    DIFFICULTY_EASY,
    DIFFICULTY_NORMAL,
    NO_MOVE,
    choose_move,
    choose_random_move,
    pick_move,
)

X, O, _ = 'X', 'O', None


def test_completes_own_line_every_time():
    cells = [O, O, _,
             X, X, _,
             _, _, _]
    for seed in range(20):
        assert choose_move(cells, O, random.Random(seed)) == 2


def test_prefers_winning_over_blocking():
    cells = [X, X, _,
             O, O, _,
             _, _, X]
    assert choose_move(cells, O) == 5


def test_blocks_opponent_line():
    cells = [X, _, _,
             _, X, _,
             _, _, _]
    # X threatens the 0-4-8 diagonal; O has nothing of its own yet
    cells[1] = O
    assert choose_move(cells, O) == 8


def test_takes_center_when_free():
    cells = [X, _, _,
             _, _, _,
             _, _, _]
    assert choose_move(cells, O) == 4


def test_falls_back_to_a_free_corner():
    cells = [_, X, _,
             _, O, _,
             _, _, _]
    picks = {choose_move(cells, O, random.Random(seed)) for seed in range(40)}
    assert picks <= {0, 2, 6, 8}
    assert len(picks) > 1


def test_returns_no_move_when_only_edges_remain_without_threats():
    cells = [X, _, O,
             _, X, _,
             O, _, X]
    # X already has 0-4-8; no empty cell completes or blocks anything
    assert choose_move(cells, O) == NO_MOVE


def test_random_move_picks_an_empty_cell():
    cells = [X, O, X,
             O, _, X,
             O, X, O]
    assert choose_random_move(cells) == 4
    assert choose_random_move([X] * 9) == NO_MOVE


@pytest.mark.parametrize('difficulty', [DIFFICULTY_NORMAL, 'unknown', None])
def test_pick_move_uses_priority_policy_by_default(difficulty):
    cells = [O, O, _,
             _, X, _,
             X, _, _]
    assert pick_move(cells, O, difficulty) == 2


def test_easy_difficulty_plays_randomly():
    cells = [O, O, _,
             _, X, _,
             X, _, _]
    picks = {pick_move(cells, O, DIFFICULTY_EASY, random.Random(seed)) for seed in range(200)}
    assert picks == {2, 3, 5, 7, 8}
