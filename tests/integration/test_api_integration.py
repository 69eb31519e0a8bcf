import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app

MUSEUM_HOURS = {
    "weekday_text": [
        "Monday: Closed",
        "Tuesday: 9:00 AM – 5:00 PM",
        "Wednesday: 9:00 AM – 5:00 PM",
    ],
    "periods": [
        {"open": {"day": 2, "time": "0900"}, "close": {"day": 2, "time": "1700"}},
        {"open": {"day": 3, "time": "0900"}, "close": {"day": 3, "time": "1700"}},
    ],
}


def _itinerary() -> dict:
    return {
        "city": "Paris",
        "days": [
            {
                "date": "2024-11-19",
                "activities": [
                    {"name": "Walk", "time": "10:00 AM - 11:30 AM"},
                    {
                        "name": "Louvre",
                        "time": "4:00 PM - 6:00 PM",
                        "type": "Museums",
                        "opening_hours": MUSEUM_HOURS,
                    },
                    {"name": "Dinner", "time": "6:30 PM - 8:00 PM"},
                ],
            },
            {
                "date": "2024-11-25",
                "activities": [
                    {"name": "Orsay", "time": "10:00 AM - 12:00 PM", "opening_hours": MUSEUM_HOURS},
                ],
            },
        ],
    }


@pytest.mark.asyncio
async def test_healthz_integration():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_validate_integration():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/hours/validate", json=_itinerary())
    assert response.status_code == 200
    body = response.json()
    assert body["has_conflicts"] is True
    assert [(c["day_index"], c["activity_index"]) for c in body["conflicts"]] == [(0, 1), (1, 0)]
    assert body["conflicts"][1]["verdict"]["reason"] == "Closed on Monday"


@pytest.mark.asyncio
async def test_auto_fix_integration():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/hours/auto-fix", json=_itinerary())
    assert response.status_code == 200
    body = response.json()
    day_one = body["itinerary"]["days"][0]["activities"]
    assert [a["time"] for a in day_one] == [
        "10:00 AM - 11:30 AM",
        "3:00 PM - 5:00 PM",
        "5:15 PM - 6:45 PM",
    ]
    assert body["itinerary"]["days"][1]["activities"] == []
    assert [r["activity_name"] for r in body["removed"]] == ["Orsay"]
    assert body["resolved"] is True


@pytest.mark.asyncio
async def test_auto_fix_day_integration():
    app = create_app()
    payload = {"date": "2024-11-19", "activities": _itinerary()["days"][0]["activities"]}
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/hours/auto-fix-day", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["activities"][1]["time"] == "3:00 PM - 5:00 PM"
    assert body["activities"][2]["travel_time"] == "15 min"


@pytest.mark.asyncio
async def test_check_activity_integration():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ok = await ac.post(
            "/hours/check",
            json={"date": "2024-11-19", "time": "9:00 AM - 10:30 AM", "opening_hours": MUSEUM_HOURS},
        )
        bad = await ac.post(
            "/hours/check",
            json={"date": "2024-11-19", "time": "after lunch", "opening_hours": MUSEUM_HOURS},
        )
    assert ok.status_code == 200
    assert ok.json()["is_valid"] is True
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_day_plan_integration():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get(
            "/hours/day-plan",
            params={"start_date": "2024-11-18", "end_date": "2024-11-20", "pace": "packed"},
        )
        reversed_range = await ac.get(
            "/hours/day-plan",
            params={"start_date": "2024-11-20", "end_date": "2024-11-18"},
        )
    assert response.status_code == 200
    plans = response.json()
    assert [p["day_type"] for p in plans] == ["arrival", "full", "departure"]
    assert plans[1]["max_activities"] == 8
    assert reversed_range.status_code == 422
