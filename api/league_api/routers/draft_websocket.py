"""WebSocket router for the live draft board."""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from ..dependencies.auth import api_key_accepted
from ..dependencies.stores import StoreFactory, get_store_factory
from ..schemas.draft import DraftMessageType, DraftWSMessage
from ..services.draft import DraftBroadcaster, DraftNotFoundError, get_broadcaster, load_draft_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["draft-websocket"])


@router.websocket("/ws/drafts/{draft_id}")
async def draft_websocket(
    websocket: WebSocket,
    draft_id: int,
    broadcaster: DraftBroadcaster = Depends(get_broadcaster),
    store_factory: StoreFactory = Depends(get_store_factory),
) -> None:
    """
    Live updates for one draft.

    Server sends:
    - state_sync: full draft snapshot, on connect and after every change
    - error: bad client message or missing draft

    Clients can send:
    - request_sync: ask for a fresh full snapshot (use after reconnecting)
    """
    if not api_key_accepted(websocket.query_params.get("apiKey")):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    # Subscribe before the first snapshot so no change slips in between.
    async with broadcaster.subscription(draft_id) as queue:
        if not await _send_state(websocket, store_factory, draft_id):
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        forwarder = asyncio.create_task(_forward(websocket, queue, draft_id))
        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json(
                        DraftWSMessage.create_error("Invalid JSON", "INVALID_JSON").model_dump(mode="json")
                    )
                    continue
                await _handle_client_message(websocket, store_factory, draft_id, message)
        except WebSocketDisconnect:
            logger.debug("draft_viewer_disconnected", extra={"draft_id": draft_id})
        finally:
            forwarder.cancel()
            with suppress(asyncio.CancelledError):
                await forwarder


async def _send_state(websocket: WebSocket, store_factory: StoreFactory, draft_id: int) -> bool:
    """Send a full snapshot read fresh from the database. False when the draft is gone."""
    async with store_factory() as store:
        try:
            state = await load_draft_state(store, draft_id)
        except DraftNotFoundError as exc:
            await websocket.send_json(
                DraftWSMessage.create_error(exc.message, "DRAFT_NOT_FOUND").model_dump(mode="json")
            )
            return False
    await websocket.send_json(DraftWSMessage.state_sync(state).model_dump(mode="json"))
    return True


async def _forward(websocket: WebSocket, queue: asyncio.Queue[dict[str, Any]], draft_id: int) -> None:
    while True:
        message = await queue.get()
        try:
            await websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError):
            logger.debug("draft_forward_stopped", extra={"draft_id": draft_id})
            return


async def _handle_client_message(
    websocket: WebSocket,
    store_factory: StoreFactory,
    draft_id: int,
    message: Any,
) -> None:
    msg_type = message.get("type") if isinstance(message, dict) else None

    if msg_type == DraftMessageType.REQUEST_SYNC.value:
        await _send_state(websocket, store_factory, draft_id)
    else:
        await websocket.send_json(
            DraftWSMessage.create_error(
                f"Unknown message type: {msg_type}", "UNKNOWN_TYPE"
            ).model_dump(mode="json")
        )
