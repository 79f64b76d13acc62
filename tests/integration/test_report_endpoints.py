"""Integration tests for report endpoints."""
import pytest
from datetime import timedelta

from studytime.utils.clock import utcnow


async def add_record(app_client, days_ago, start="08:00", end="09:00", subject_id=3, user_id=2):
    response = await app_client.post(
        "/manual-records",
        json={
            "user_id": user_id,
            "subject_id": subject_id,
            "study_date": (utcnow().date() - timedelta(days=days_ago)).isoformat(),
            "start_time": start,
            "end_time": end,
            "description": None,
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
class TestStatisticsEndpoint:
    """Tests for the statistics endpoint."""

    async def test_statistics_week(self, app_client):
        """Test three study days in a seven day range."""
        for days_ago in (1, 3, 5):
            await add_record(app_client, days_ago)

        response = await app_client.get(
            "/reports/statistics",
            params={
                "user_id": 2,
                "date_start": (utcnow().date() - timedelta(days=6)).isoformat(),
                "date_end": utcnow().date().isoformat(),
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_minutes"] == 180
        assert data["days_with_study"] == 3
        assert data["total_entries"] == 3
        assert data["consistency_percentage"] == 42.86
        assert data["most_studied_subject_id"] == 3

    async def test_statistics_include_finished_sessions(self, app_client, api_clock):
        """Test completed sessions are aggregated with manual records."""
        session_id = (await app_client.post(
            "/sessions/start", json={"user_id": 2, "subject_id": 9}
        )).json()["id"]
        api_clock.advance(minutes=120)
        await app_client.post("/sessions/finish", json={"session_id": session_id})
        await add_record(app_client, 1, subject_id=3)

        response = await app_client.get(
            "/reports/statistics",
            params={
                "user_id": 2,
                "date_start": (utcnow().date() - timedelta(days=1)).isoformat(),
                "date_end": utcnow().date().isoformat(),
            },
        )

        data = response.json()
        assert data["total_minutes"] == 180
        assert data["most_studied_subject_id"] == 9
        assert data["entry_average_minutes"] == 90.0

    async def test_statistics_reversed_range(self, app_client):
        """Test a reversed range fails validation."""
        response = await app_client.get(
            "/reports/statistics",
            params={"user_id": 2, "date_start": "2025-01-07", "date_end": "2025-01-01"},
        )

        assert response.status_code == 422

    async def test_statistics_missing_dates(self, app_client):
        """Test the date range is required."""
        response = await app_client.get("/reports/statistics", params={"user_id": 2})

        assert response.status_code == 422


@pytest.mark.asyncio
class TestHistoryEndpoint:
    """Tests for the history endpoint."""

    async def test_history_combines_sources(self, app_client, api_clock):
        """Test sessions and records are listed newest first."""
        await add_record(app_client, 2)
        session_id = (await app_client.post(
            "/sessions/start", json={"user_id": 2, "subject_id": 3}
        )).json()["id"]
        await app_client.post("/sessions/pause", json={"session_id": session_id})
        api_clock.advance(minutes=5)
        await app_client.post("/sessions/resume", json={"session_id": session_id})
        api_clock.advance(minutes=65)
        await app_client.post("/sessions/finish", json={"session_id": session_id})

        response = await app_client.get("/reports/history", params={"user_id": 2})

        assert response.status_code == 200
        items = response.json()
        assert [i["kind"] for i in items] == ["automatic_session", "manual_record"]
        assert items[0]["duration_formatted"] == "01:05"
        assert items[0]["pause_count"] == 1
        assert items[0]["pause_total_formatted"] == "00:05"
        assert items[1]["status"] == "manual"

    async def test_history_filters(self, app_client):
        """Test subject and date filters narrow the list."""
        await add_record(app_client, 1, subject_id=3)
        await add_record(app_client, 1, start="10:00", end="11:00", subject_id=4)
        await add_record(app_client, 10, subject_id=3)

        response = await app_client.get(
            "/reports/history",
            params={
                "user_id": 2,
                "subject_id": 3,
                "date_start": (utcnow().date() - timedelta(days=2)).isoformat(),
            },
        )

        items = response.json()
        assert len(items) == 1
        assert items[0]["subject_id"] == 3

    async def test_history_requires_user(self, app_client):
        """Test the user id is required."""
        response = await app_client.get("/reports/history")

        assert response.status_code == 422


@pytest.mark.asyncio
class TestHealth:
    """Tests for status endpoints."""

    async def test_health(self, app_client):
        """Test the health endpoint."""
        response = await app_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
