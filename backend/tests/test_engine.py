import pytest

from arena.services.games.engine import (
    MARK_O,
    MARK_X,
    REASON_NORMAL,
    REASON_RESIGNATION,
    STATUS_DRAW,
    STATUS_IN_PROGRESS,
    STATUS_WON,
    WINNING_TRIPLES,
    Match,
)


def _play(match, moves):
    for index in moves:
        assert match.apply_move(index)


def _snapshot(match):
    return (list(match.cells), match.turn, match.outcome, match.winning_triple)


def test_new_match_is_empty_with_x_to_move():
    match = Match()
    assert match.cells == [None] * 9
    assert match.turn == MARK_X
    assert match.outcome.status == STATUS_IN_PROGRESS
    assert match.winning_triple is None


def test_move_places_mark_and_flips_turn():
    match = Match()
    assert match.apply_move(4)
    assert match.cells[4] == MARK_X
    assert match.turn == MARK_O


@pytest.mark.parametrize('triple', WINNING_TRIPLES)
def test_each_triple_wins_for_x(triple):
    match = Match()
    o_moves = [i for i in range(9) if i not in triple][:2]
    _play(match, [triple[0], o_moves[0], triple[1], o_moves[1], triple[2]])
    assert match.outcome.status == STATUS_WON
    assert match.outcome.winner == MARK_X
    assert match.outcome.reason == REASON_NORMAL
    assert match.winning_triple == triple
    # winner keeps the turn
    assert match.turn == MARK_X


def test_full_board_without_line_is_draw():
    match = Match()
    _play(match, [0, 1, 2, 4, 3, 5, 7, 6, 8])
    assert match.outcome.status == STATUS_DRAW
    assert match.outcome.winner is None
    assert match.winning_triple is None


def test_win_on_last_cell_is_not_a_draw():
    match = Match()
    _play(match, [0, 1, 2, 4, 3, 5, 7, 8, 6])
    assert match.outcome.status == STATUS_WON
    assert match.winning_triple == (0, 3, 6)


@pytest.mark.parametrize('index', [-1, 9, 42, '4', None, 4.0, True])
def test_invalid_index_is_rejected_without_change(index):
    match = Match()
    before = _snapshot(match)
    assert match.apply_move(index) is False
    assert _snapshot(match) == before


def test_occupied_cell_is_rejected_without_change():
    match = Match()
    match.apply_move(0)
    before = _snapshot(match)
    assert match.apply_move(0) is False
    assert _snapshot(match) == before


def test_no_moves_after_terminal_outcome():
    match = Match()
    _play(match, [0, 3, 1, 4, 2])
    before = _snapshot(match)
    assert match.apply_move(8) is False
    assert _snapshot(match) == before


def test_resign_hands_win_to_opponent():
    match = Match()
    match.apply_move(0)
    assert match.resign(MARK_O)
    assert match.outcome.status == STATUS_WON
    assert match.outcome.winner == MARK_X
    assert match.outcome.reason == REASON_RESIGNATION
    assert match.winning_triple is None
    assert match.cells[0] == MARK_X


def test_resign_after_terminal_outcome_is_ignored():
    match = Match()
    _play(match, [0, 3, 1, 4, 2])
    outcome = match.outcome
    assert match.resign(MARK_X) is False
    assert match.outcome == outcome


def test_reset_after_win_restores_initial_state():
    match = Match()
    _play(match, [0, 3, 1, 4, 2])
    match.reset()
    assert match.cells == [None] * 9
    assert match.turn == MARK_X
    assert match.outcome.status == STATUS_IN_PROGRESS
    assert match.winning_triple is None
    assert match.apply_move(4)
