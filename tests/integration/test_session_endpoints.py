"""Integration tests for session endpoints."""
import pytest
from datetime import timedelta


async def start(app_client, user_id=1, subject_id=5):
    return await app_client.post(
        "/sessions/start",
        json={"user_id": user_id, "subject_id": subject_id},
    )


@pytest.mark.asyncio
class TestSessionStart:
    """Tests for starting a session."""

    async def test_start_session_success(self, app_client, api_clock):
        """Test starting a session successfully."""
        response = await start(app_client)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["user_id"] == 1
        assert data["subject_id"] == 5
        assert data["status"] == "active"
        assert data["end_time"] is None
        assert data["total_duration_minutes"] is None
        assert data["start_time"].startswith(api_clock.now.date().isoformat())

    async def test_start_session_with_live_session(self, app_client):
        """Test starting a second session for the same user fails."""
        await start(app_client)

        response = await start(app_client, subject_id=6)

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "ACTIVE_SESSION_EXISTS"

    async def test_start_session_invalid_body(self, app_client):
        """Test ids are validated before reaching the service."""
        response = await app_client.post(
            "/sessions/start",
            json={"user_id": 0, "subject_id": "abc"},
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestSessionLifecycle:
    """Tests for pause, resume and finish."""

    async def test_pause_resume_finish(self, app_client, api_clock):
        """Test the full timer flow excludes paused time."""
        session_id = (await start(app_client)).json()["id"]

        response = await app_client.post("/sessions/pause", json={"session_id": session_id})
        assert response.status_code == 200
        assert response.json()["status"] == "paused"

        api_clock.advance(minutes=10)
        response = await app_client.post("/sessions/resume", json={"session_id": session_id})
        assert response.status_code == 200
        assert response.json()["status"] == "active"

        api_clock.advance(minutes=5)
        response = await app_client.post("/sessions/finish", json={"session_id": session_id})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["total_duration_minutes"] == 5
        assert data["end_time"] is not None

    async def test_pause_non_active_session(self, app_client):
        """Test pausing twice fails with an invalid status."""
        session_id = (await start(app_client)).json()["id"]
        await app_client.post("/sessions/pause", json={"session_id": session_id})

        response = await app_client.post("/sessions/pause", json={"session_id": session_id})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_STATUS"

    async def test_finish_unknown_session(self, app_client):
        """Test finishing an unknown session returns 404."""
        response = await app_client.post("/sessions/finish", json={"session_id": 99})

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOT_FOUND"

    async def test_finish_too_short(self, app_client, api_clock):
        """Test finishing under a minute fails."""
        session_id = (await start(app_client)).json()["id"]
        api_clock.advance(seconds=30)

        response = await app_client.post("/sessions/finish", json={"session_id": session_id})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "SESSION_TOO_SHORT"

    async def test_resume_after_timeout(self, app_client, api_clock):
        """Test an over-long pause interrupts the session."""
        session_id = (await start(app_client)).json()["id"]
        await app_client.post("/sessions/pause", json={"session_id": session_id})
        api_clock.advance(hours=24, minutes=1)

        response = await app_client.post("/sessions/resume", json={"session_id": session_id})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "PAUSE_TIMEOUT"
        assert detail["session"]["status"] == "interrupted"
        assert detail["session"]["interruption_reason"] == "timeout"

        response = await app_client.get(f"/sessions/{session_id}")
        assert response.json()["status"] == "interrupted"

        # The user is free to start again
        response = await start(app_client)
        assert response.status_code == 201


@pytest.mark.asyncio
class TestSessionRead:
    """Tests for reading sessions."""

    async def test_get_current_session(self, app_client):
        """Test the live session is returned for its user."""
        session_id = (await start(app_client)).json()["id"]

        response = await app_client.get("/sessions/current", params={"user_id": 1})

        assert response.status_code == 200
        assert response.json()["id"] == session_id

    async def test_get_current_session_none(self, app_client):
        """Test 404 when no session is running."""
        response = await app_client.get("/sessions/current", params={"user_id": 1})

        assert response.status_code == 404

    async def test_get_session_with_pauses(self, app_client, api_clock):
        """Test the detail view lists pauses."""
        session_id = (await start(app_client)).json()["id"]
        await app_client.post("/sessions/pause", json={"session_id": session_id})
        api_clock.advance(minutes=7)
        await app_client.post("/sessions/resume", json={"session_id": session_id})

        response = await app_client.get(f"/sessions/{session_id}")

        assert response.status_code == 200
        pauses = response.json()["pauses"]
        assert len(pauses) == 1
        assert pauses[0]["duration_minutes"] == 7

    async def test_get_unknown_session(self, app_client):
        """Test 404 for an unknown session."""
        response = await app_client.get("/sessions/12")

        assert response.status_code == 404


@pytest.mark.asyncio
class TestSessionEdit:
    """Tests for editing recorded sessions."""

    async def test_edit_completed_session(self, app_client, api_clock):
        """Test a completed session's end time and subject can be corrected."""
        started = (await start(app_client)).json()
        api_clock.advance(minutes=90)
        await app_client.post("/sessions/finish", json={"session_id": started["id"]})

        new_end = (api_clock.now - timedelta(minutes=30)).isoformat() + "Z"
        response = await app_client.put(
            "/sessions/edit",
            json={
                "session_id": started["id"],
                "reason": "time_adjustment",
                "new_end_time": new_end,
                "new_subject_id": 8,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_duration_minutes"] == 60
        assert data["subject_id"] == 8
        assert data["edit_reason"] == "time_adjustment"

    async def test_edit_active_session(self, app_client):
        """Test a live session cannot be edited."""
        session_id = (await start(app_client)).json()["id"]

        response = await app_client.put(
            "/sessions/edit",
            json={"session_id": session_id, "reason": "subject_correction", "new_subject_id": 2},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_STATUS"

    async def test_edit_after_window(self, app_client, api_clock):
        """Test edits more than a day after start are refused."""
        session_id = (await start(app_client)).json()["id"]
        api_clock.advance(minutes=30)
        await app_client.post("/sessions/finish", json={"session_id": session_id})
        api_clock.advance(hours=24)

        response = await app_client.put(
            "/sessions/edit",
            json={"session_id": session_id, "reason": "subject_correction", "new_subject_id": 2},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "EDIT_PERIOD_EXPIRED"
