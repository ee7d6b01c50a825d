"""Snake (serpentine) turn computation.

Pure functions shared by the pick engine, the state snapshot pushed to
clients and the turn indicator. Odd rounds run 1 -> N, even rounds run
N -> 1, so the team picking last in round R picks first in round R+1.

Example with 4 teams:
    pick_number:      1 2 3 4 | 5 6 7 8
    pick_position:    1 2 3 4 | 4 3 2 1
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class TurnInfo:
    """Who is on the clock for a given pick number."""

    pick_number: int
    round: int
    position_in_round: int
    expected_position: int
    team_id: int | None


def round_for_pick(pick_number: int, team_count: int) -> int:
    """ceil(pick_number / team_count) without floats."""
    _check_inputs(pick_number, team_count)
    return (pick_number + team_count - 1) // team_count


def expected_position(pick_number: int, team_count: int) -> int:
    """Draft-order slot (1..N) that owns ``pick_number``."""
    _check_inputs(pick_number, team_count)
    round_number = round_for_pick(pick_number, team_count)
    position_in_round = ((pick_number - 1) % team_count) + 1
    if round_number % 2 == 1:
        return position_in_round
    return team_count - position_in_round + 1


def total_picks(team_count: int, rounds: int) -> int:
    return team_count * rounds


def compute_turn(
    pick_number: int,
    order: Iterable[tuple[int, int]],
) -> TurnInfo:
    """Resolve the team on the clock.

    Args:
        pick_number: 1-based pick index (the draft's current_pick).
        order: (team_id, pick_position) pairs for the draft.

    Returns:
        TurnInfo; ``team_id`` is None when no team holds the expected slot.
    """
    slots = {position: team_id for team_id, position in order}
    team_count = len(slots)
    round_number = round_for_pick(pick_number, team_count)
    position = expected_position(pick_number, team_count)
    return TurnInfo(
        pick_number=pick_number,
        round=round_number,
        position_in_round=((pick_number - 1) % team_count) + 1,
        expected_position=position,
        team_id=slots.get(position),
    )


def pick_sequence(order: Iterable[tuple[int, int]], rounds: int) -> list[int | None]:
    """Team ids in pick order for the whole draft (index 0 is pick 1)."""
    pairs = list(order)
    count = total_picks(len(pairs), rounds)
    return [compute_turn(pick, pairs).team_id for pick in range(1, count + 1)]


def _check_inputs(pick_number: int, team_count: int) -> None:
    if team_count < 1:
        raise ValueError("team_count must be at least 1")
    if pick_number < 1:
        raise ValueError("pick_number is 1-based")
