"""Tests for the live draft WebSocket."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from league_api.dependencies import get_store_factory
from league_api.services.draft import DraftBroadcaster, get_broadcaster
from main import app
from tests.fakes import FakeDraftStore, seed_league, store_factory_for


class TestDraftWebSocket(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FakeDraftStore()
        self.league = seed_league(self.store, team_count=4, player_count=8)
        self.draft = self.store.add_draft(self.league.season_id, status="in_progress", rounds_per_draft=2)
        self.store.set_order(self.draft.id, self.league.team_ids)
        self.broadcaster = DraftBroadcaster()

        app.dependency_overrides[get_store_factory] = lambda: store_factory_for(self.store)
        app.dependency_overrides[get_broadcaster] = lambda: self.broadcaster
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_sends_full_state_on_connect(self) -> None:
        with self.client.websocket_connect(f"/ws/drafts/{self.draft.id}") as websocket:
            message = websocket.receive_json()

        self.assertEqual(message["type"], "state_sync")
        payload = message["payload"]
        self.assertEqual(payload["draft"]["id"], self.draft.id)
        self.assertEqual(payload["draft"]["currentPick"], 1)
        self.assertEqual(payload["onTheClock"]["teamId"], 1)
        self.assertEqual(len(payload["order"]), 4)
        self.assertEqual(payload["picks"], [])

    def test_request_sync_returns_fresh_state(self) -> None:
        with self.client.websocket_connect(f"/ws/drafts/{self.draft.id}") as websocket:
            websocket.receive_json()
            self.store.drafts[self.draft.id].current_pick = 5

            websocket.send_json({"type": "request_sync"})
            message = websocket.receive_json()

        self.assertEqual(message["type"], "state_sync")
        self.assertEqual(message["payload"]["draft"]["currentPick"], 5)
        self.assertEqual(message["payload"]["onTheClock"]["teamId"], 4)

    def test_invalid_json_keeps_socket_open(self) -> None:
        with self.client.websocket_connect(f"/ws/drafts/{self.draft.id}") as websocket:
            websocket.receive_json()

            websocket.send_text("{not json")
            error = websocket.receive_json()
            websocket.send_json({"type": "request_sync"})
            follow_up = websocket.receive_json()

        self.assertEqual(error["type"], "error")
        self.assertEqual(error["payload"]["code"], "INVALID_JSON")
        self.assertEqual(follow_up["type"], "state_sync")

    def test_unknown_message_type(self) -> None:
        with self.client.websocket_connect(f"/ws/drafts/{self.draft.id}") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "make_pick"})
            error = websocket.receive_json()

        self.assertEqual(error["payload"]["code"], "UNKNOWN_TYPE")

    def test_unknown_draft_reports_error(self) -> None:
        with self.client.websocket_connect("/ws/drafts/999") as websocket:
            message = websocket.receive_json()

        self.assertEqual(message["type"], "error")
        self.assertEqual(message["payload"]["code"], "DRAFT_NOT_FOUND")

    def test_api_key_required_when_configured(self) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = "k" * 32

            with self.assertRaises(WebSocketDisconnect):
                with self.client.websocket_connect(f"/ws/drafts/{self.draft.id}") as websocket:
                    websocket.receive_json()

            with self.client.websocket_connect(
                f"/ws/drafts/{self.draft.id}?apiKey={'k' * 32}"
            ) as websocket:
                self.assertEqual(websocket.receive_json()["type"], "state_sync")


if __name__ == "__main__":
    unittest.main()
