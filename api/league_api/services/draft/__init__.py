"""Live snake draft: order assignment, turn state machine, picks and rosters."""

from .broadcast import DraftBroadcaster, draft_broadcaster, get_broadcaster
from .errors import (
    DraftActionResult,
    DraftAuthorizationError,
    DraftConflictError,
    DraftError,
    DraftErrorKind,
    DraftNotFoundError,
    DraftStateError,
    PlayerAlreadyDraftedError,
    TurnMovedOnError,
    TurnOrderError,
)
from .lifecycle import activate_draft, get_current_draft, start_draft_cycle
from .materialize import complete_draft_rosters
from .models import ActorContext, DraftStateView, PickView, RatedPlayer
from .order import assign_order, get_draft_order, get_draft_teams_with_captains
from .picks import apply_pick, get_draft_picks, get_last_pick
from .player_pool import get_available_players, get_eligible_players
from .side_effects import CeleryDraftSideEffects, DraftSideEffects, get_side_effects
from .state import load_draft_state, publish_draft_state
from .store import DraftStore, SqlDraftStore

__all__ = [
    "ActorContext",
    "CeleryDraftSideEffects",
    "DraftActionResult",
    "DraftAuthorizationError",
    "DraftBroadcaster",
    "DraftConflictError",
    "DraftError",
    "DraftErrorKind",
    "DraftNotFoundError",
    "DraftSideEffects",
    "DraftStateError",
    "DraftStateView",
    "DraftStore",
    "PickView",
    "PlayerAlreadyDraftedError",
    "RatedPlayer",
    "SqlDraftStore",
    "TurnMovedOnError",
    "TurnOrderError",
    "activate_draft",
    "apply_pick",
    "assign_order",
    "complete_draft_rosters",
    "draft_broadcaster",
    "get_available_players",
    "get_broadcaster",
    "get_current_draft",
    "get_draft_order",
    "get_draft_picks",
    "get_draft_teams_with_captains",
    "get_eligible_players",
    "get_last_pick",
    "get_side_effects",
    "load_draft_state",
    "publish_draft_state",
    "start_draft_cycle",
]
