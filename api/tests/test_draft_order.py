"""Tests for draft order assignment."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from league_api.services.draft.broadcast import DraftBroadcaster
from league_api.services.draft.errors import DraftErrorKind
from league_api.services.draft.models import ActorContext
from league_api.services.draft.order import (
    assign_order,
    fisher_yates,
    get_draft_order,
    get_draft_teams_with_captains,
)


class TestFisherYates:
    @pytest.mark.parametrize("size", [2, 3, 5, 12])
    def test_output_is_a_permutation(self, size: int) -> None:
        items = list(range(size))
        for seed in range(25):
            shuffled = fisher_yates(items, random.Random(seed))
            assert sorted(shuffled) == items

    def test_input_is_not_mutated(self) -> None:
        items = [1, 2, 3, 4]
        fisher_yates(items, random.Random(1))
        assert items == [1, 2, 3, 4]

    def test_every_team_reaches_first_pick(self) -> None:
        rng = random.Random(42)
        firsts = Counter(fisher_yates([1, 2, 3, 4], rng)[0] for _ in range(2000))
        assert set(firsts) == {1, 2, 3, 4}
        assert all(300 < count < 700 for count in firsts.values())


class TestAssignOrder:
    @pytest.mark.asyncio
    async def test_assigns_positions_one_to_n(self, store, league, owner) -> None:
        draft = store.add_draft(league.season_id)

        result = await assign_order(store, owner, draft.id, rng=random.Random(7))

        assert result.success
        assert sorted(slot.pick_position for slot in result.value) == [1, 2, 3, 4]
        assert sorted(slot.team_id for slot in result.value) == league.team_ids
        assert store.drafts[draft.id].draft_order_assigned is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("team_count", [2, 3, 6])
    async def test_permutation_for_any_team_count(self, store, owner, team_count: int) -> None:
        from tests.fakes import seed_league

        league = seed_league(store, team_count=team_count, player_count=0)
        draft = store.add_draft(league.season_id)

        result = await assign_order(store, owner, draft.id)

        positions = [slot.pick_position for slot in result.value]
        assert sorted(positions) == list(range(1, team_count + 1))
        assert len(set(slot.team_id for slot in result.value)) == team_count

    @pytest.mark.asyncio
    async def test_second_assignment_is_a_conflict(self, store, league, owner) -> None:
        draft = store.add_draft(league.season_id)
        first = await assign_order(store, owner, draft.id)
        original = [slot.team_id for slot in store.order[draft.id]]

        second = await assign_order(store, owner, draft.id)

        assert first.success
        assert not second.success
        assert second.error_kind is DraftErrorKind.conflict
        assert [slot.team_id for slot in store.order[draft.id]] == original

    @pytest.mark.asyncio
    async def test_captain_cannot_assign(self, store, league) -> None:
        draft = store.add_draft(league.season_id)
        captain = ActorContext(user_id=league.captain_ids[0], role="captain")

        result = await assign_order(store, captain, draft.id)

        assert result.error_kind is DraftErrorKind.authorization
        assert store.order[draft.id] == []

    @pytest.mark.asyncio
    async def test_unknown_draft(self, store, league, owner) -> None:
        result = await assign_order(store, owner, 999)
        assert result.error_kind is DraftErrorKind.not_found

    @pytest.mark.asyncio
    async def test_requires_pending_draft(self, store, league, owner) -> None:
        draft = store.add_draft(league.season_id, status="completed")

        result = await assign_order(store, owner, draft.id)

        assert result.error_kind is DraftErrorKind.state

    @pytest.mark.asyncio
    async def test_requires_captained_teams(self, store, owner) -> None:
        store.add_season(1)
        store.add_team(1, "Orphans")
        draft = store.add_draft(1)

        result = await assign_order(store, owner, draft.id)

        assert result.error_kind is DraftErrorKind.state
        assert "captains" in result.error

    @pytest.mark.asyncio
    async def test_publishes_state_to_viewers(self, store, league, owner) -> None:
        draft = store.add_draft(league.season_id)
        broadcaster = DraftBroadcaster()
        queue = broadcaster.subscribe(draft.id)

        await assign_order(store, owner, draft.id, broadcaster=broadcaster)

        message = queue.get_nowait()
        assert message["type"] == "state_sync"
        assert message["payload"]["draft"]["draftOrderAssigned"] is True
        assert len(message["payload"]["order"]) == 4


class TestOrderReads:
    @pytest.mark.asyncio
    async def test_teams_with_captains_sorted_by_name(self, store, league) -> None:
        store.add_team(9, "Aardvarks")

        teams = await get_draft_teams_with_captains(store)

        assert [team.name for team in teams] == ["A", "B", "C", "D"]
        assert teams[0].captain_name == "Captain A"

    @pytest.mark.asyncio
    async def test_get_draft_order_by_position(self, store, league) -> None:
        draft = store.add_draft(league.season_id)
        store.set_order(draft.id, [3, 1, 4, 2])

        order = await get_draft_order(store, draft.id)

        assert [(slot.pick_position, slot.team_id) for slot in order] == [(1, 3), (2, 1), (3, 4), (4, 2)]
        assert order[0].team.name == "C"
