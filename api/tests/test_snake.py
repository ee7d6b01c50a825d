"""Tests for snake turn computation."""

from __future__ import annotations

import pytest

from league_api.services.draft.snake import (
    compute_turn,
    expected_position,
    pick_sequence,
    round_for_pick,
    total_picks,
)

FOUR_TEAMS = [(101, 1), (102, 2), (103, 3), (104, 4)]


class TestRoundForPick:
    def test_first_round(self) -> None:
        assert [round_for_pick(p, 4) for p in range(1, 5)] == [1, 1, 1, 1]

    def test_round_boundaries(self) -> None:
        assert round_for_pick(4, 4) == 1
        assert round_for_pick(5, 4) == 2
        assert round_for_pick(8, 4) == 2
        assert round_for_pick(9, 4) == 3

    def test_single_team(self) -> None:
        assert [round_for_pick(p, 1) for p in range(1, 4)] == [1, 2, 3]

    @pytest.mark.parametrize("pick, teams", [(0, 4), (-1, 4), (1, 0)])
    def test_rejects_non_positive_inputs(self, pick: int, teams: int) -> None:
        with pytest.raises(ValueError):
            round_for_pick(pick, teams)


class TestExpectedPosition:
    def test_odd_rounds_run_forward(self) -> None:
        assert [expected_position(p, 4) for p in range(1, 5)] == [1, 2, 3, 4]
        assert [expected_position(p, 4) for p in range(9, 13)] == [1, 2, 3, 4]

    def test_even_rounds_run_backward(self) -> None:
        assert [expected_position(p, 4) for p in range(5, 9)] == [4, 3, 2, 1]

    @pytest.mark.parametrize("teams", [2, 3, 5, 8])
    def test_last_of_round_picks_first_next_round(self, teams: int) -> None:
        for round_number in range(1, 10):
            last_of_round = round_number * teams
            assert expected_position(last_of_round, teams) == expected_position(last_of_round + 1, teams)

    @pytest.mark.parametrize("teams", [2, 3, 4, 7])
    def test_every_round_is_a_permutation(self, teams: int) -> None:
        for round_number in range(1, 6):
            start = (round_number - 1) * teams + 1
            positions = [expected_position(p, teams) for p in range(start, start + teams)]
            assert sorted(positions) == list(range(1, teams + 1))


class TestComputeTurn:
    def test_resolves_team_on_the_clock(self) -> None:
        turn = compute_turn(6, FOUR_TEAMS)

        assert turn.pick_number == 6
        assert turn.round == 2
        assert turn.position_in_round == 2
        assert turn.expected_position == 3
        assert turn.team_id == 103

    def test_order_pairs_need_not_be_sorted(self) -> None:
        shuffled = [(104, 4), (102, 2), (101, 1), (103, 3)]
        assert compute_turn(5, shuffled).team_id == 104

    def test_missing_slot_yields_no_team(self) -> None:
        turn = compute_turn(2, [(101, 1), (103, 3)])
        assert turn.team_id is None


class TestPickSequence:
    def test_four_team_two_round_snake(self) -> None:
        # A, B, C, D, D, C, B, A
        assert pick_sequence(FOUR_TEAMS, rounds=2) == [101, 102, 103, 104, 104, 103, 102, 101]

    def test_length_is_total_picks(self) -> None:
        assert len(pick_sequence(FOUR_TEAMS, rounds=10)) == total_picks(4, 10) == 40

    def test_each_team_picks_once_per_round(self) -> None:
        sequence = pick_sequence(FOUR_TEAMS, rounds=6)
        for team_id, _ in FOUR_TEAMS:
            assert sequence.count(team_id) == 6
