"""
Tests for API layer.

Tests:
- API service methods
- HTTP status codes for rejections
- Session lifecycle via API
- Error handling
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    NotificationKind,
    PlaceBuildingRequest,
    TrendDirection,
)
from ..api.service import APIService


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    @pytest.fixture
    def session_id(self, service):
        return service.create_session(CreateSessionRequest(skip_welcome=True)).session_id

    def test_create_session(self, service):
        response = service.create_session(CreateSessionRequest(player_name="Ana"))

        assert response.player_name == "Ana"
        assert response.current_turn == 0
        assert response.available_buildings == ["sustainable_house", "community_garden"]
        assert response.open_overlays == ["welcome"]
        assert response.terrain_limit == 10
        assert response.indicators.biodiversity == 30

    def test_place_building(self, service, session_id):
        response = service.place_building(
            session_id, PlaceBuildingRequest(kind="sustainable_house", x=0, z=0)
        )

        assert response.success
        assert response.building.kind == "sustainable_house"
        assert response.game_state.current_turn == 1
        assert response.game_state.indicators.population == 4
        assert response.game_state.trends["community_happiness"] == TrendDirection.UP
        assert response.game_state.trends["air_quality"] == TrendDirection.FLAT

    def test_locked_kind(self, service, session_id):
        response = service.place_building(
            session_id, PlaceBuildingRequest(kind="solar_panel_array", x=0, z=0)
        )
        assert not response.success
        assert response.error_code == ErrorCode.KIND_LOCKED
        assert service.get_game_state(session_id).current_turn == 0

    def test_unknown_kind(self, service, session_id):
        response = service.place_building(session_id, PlaceBuildingRequest(kind="castle", x=0, z=0))
        assert response.error_code == ErrorCode.UNKNOWN_KIND

    def test_engine_rejection_mapped(self, service, session_id):
        service.place_building(session_id, PlaceBuildingRequest(kind="sustainable_house", x=0, z=0))
        response = service.place_building(
            session_id, PlaceBuildingRequest(kind="sustainable_house", x=2, z=0)
        )
        assert response.error_code == ErrorCode.INSUFFICIENT_ENERGY

    def test_missing_session(self, service):
        response = service.get_game_state("missing")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_challenge_notification(self, service, session_id):
        for kind, x in [("sustainable_house", 0), ("community_garden", 2), ("community_garden", 4)]:
            response = service.place_building(session_id, PlaceBuildingRequest(kind=kind, x=x, z=0))

        assert response.notifications[0].kind == NotificationKind.TRIGGERED
        assert response.game_state.current_challenge.challenge_id == "challenge1_energy"

        closed = service.close_challenge(session_id)
        assert closed.success
        assert closed.game_state.current_challenge is None

    def test_build_menu(self, service, session_id):
        menu = service.get_build_menu(session_id)
        assert [b.kind for b in menu.buildings] == ["sustainable_house", "community_garden"]
        assert all(b.affordable for b in menu.buildings)
        assert menu.free_cell_count == 81

    def test_history(self, service, session_id):
        service.place_building(session_id, PlaceBuildingRequest(kind="community_garden", x=0, z=0))
        service.place_building(session_id, PlaceBuildingRequest(kind="community_garden", x=2, z=0))

        assert [p.turn for p in service.get_history(session_id).history] == [0, 1, 2]
        assert [p.turn for p in service.get_history(session_id, last=1).history] == [2]

    def test_indicator_info(self, service):
        info = service.get_indicator_info()
        assert len(info) == 7
        assert {i.indicator for i in info} >= {"air_quality", "population"}

    def test_end_session(self, service, session_id):
        assert service.end_session(session_id)
        assert session_id not in service.list_sessions()


class TestHTTP:
    """Tests for the FastAPI application."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app(APIService()))

    @pytest.fixture
    def session_id(self, client):
        response = client.post("/api/v1/sessions", json={"skip_welcome": True})
        assert response.status_code == 200
        return response.json()["session_id"]

    def _place(self, client, session_id, kind, x, z=0):
        return client.post(
            f"/api/v1/sessions/{session_id}/buildings",
            json={"kind": kind, "x": x, "z": z},
        )

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_catalog(self, client):
        response = client.get("/api/v1/catalog")
        assert response.status_code == 200
        assert len(response.json()["buildings"]) == 9

    def test_place_success(self, client, session_id):
        response = self._place(client, session_id, "sustainable_house", 0)
        assert response.status_code == 200
        body = response.json()
        assert body["success"]
        assert body["game_state"]["indicators"]["community_happiness"] == 55

    def test_unknown_kind_400(self, client, session_id):
        response = self._place(client, session_id, "castle", 0)
        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_KIND"

    def test_locked_409(self, client, session_id):
        response = self._place(client, session_id, "school", 0)
        assert response.status_code == 409
        assert response.json()["error_code"] == "KIND_LOCKED"

    def test_occupied_409(self, client, session_id):
        self._place(client, session_id, "community_garden", 0)
        response = self._place(client, session_id, "community_garden", 0)
        assert response.status_code == 409
        assert response.json()["error_code"] == "CELL_OCCUPIED"

    def test_out_of_bounds_422(self, client, session_id):
        response = self._place(client, session_id, "community_garden", 10)
        assert response.status_code == 422
        assert response.json()["error_code"] == "OUT_OF_BOUNDS"

    def test_missing_session_404(self, client):
        response = client.get("/api/v1/sessions/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

        response = self._place(client, "missing", "community_garden", 0)
        assert response.status_code == 404

    def test_close_challenge_without_active(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/challenge/close")
        assert response.status_code == 409
        assert response.json()["error_code"] == "NO_ACTIVE_CHALLENGE"

    def test_overlay_roundtrip(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/overlays/dashboard/open")
        assert response.status_code == 200
        assert response.json()["game_state"]["open_overlays"] == ["dashboard"]

        response = client.post(f"/api/v1/sessions/{session_id}/overlays/dashboard/close")
        assert response.status_code == 200
        assert response.json()["game_state"]["open_overlays"] == []

    def test_unknown_overlay(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/overlays/settings/open")
        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_OVERLAY"

        response = client.post(f"/api/v1/sessions/{session_id}/overlays/dashboard/toggle")
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_select_building(self, client, session_id):
        building_id = self._place(client, session_id, "community_garden", 0).json()["building"]["building_id"]

        response = client.post(f"/api/v1/sessions/{session_id}/buildings/{building_id}/select")
        assert response.status_code == 200
        assert response.json()["game_state"]["selected_building_id"] == building_id

        response = client.post(f"/api/v1/sessions/{session_id}/buildings/info/close")
        assert response.json()["game_state"]["selected_building_id"] is None

        response = client.post(f"/api/v1/sessions/{session_id}/buildings/nope/select")
        assert response.status_code == 404

    def test_build_menu(self, client, session_id):
        self._place(client, session_id, "sustainable_house", 0)
        response = client.get(f"/api/v1/sessions/{session_id}/placements")
        assert response.status_code == 200
        menu = {b["kind"]: b["affordable"] for b in response.json()["buildings"]}
        assert menu == {"sustainable_house": False, "community_garden": True}

    def test_history_last(self, client, session_id):
        self._place(client, session_id, "community_garden", 0)
        response = client.get(f"/api/v1/sessions/{session_id}/history", params={"last": 1})
        assert response.status_code == 200
        assert [p["turn"] for p in response.json()["history"]] == [1]

    def test_end_session(self, client, session_id):
        response = client.delete(f"/api/v1/sessions/{session_id}")
        assert response.json()["success"]
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404
