from sqlalchemy import text

from tests.helpers import reservation


def create(client, **overrides):
    return client.post("/api/reservations", json=reservation(**overrides))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"db": True}


def test_create_and_get(client):
    response = create(client, endTime="17:00")
    assert response.status_code == 201
    body = response.json()
    assert body["endTime"] == "17:00"
    assert body["status"] == "waiting"
    assert body["created_at"] == body["updated_at"]

    fetched = client.get(f"/api/reservations/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body


def test_create_validation_error_lists_all_problems(client):
    response = create(client, name="", guests=99)
    assert response.status_code == 400
    assert response.json()["detail"] == {
        "error": "validation_error",
        "details": ["name is required", "guests must be between 1 and 50"],
    }


def test_slot_full_and_cancel(client):
    first = create(client).json()

    response = create(client, name="Jai Schwartz")
    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "slot_full"

    cancelled = client.post(f"/api/reservations/{first['id']}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    assert create(client, name="Jai Schwartz").status_code == 201


def test_slot_closed(client):
    client.put("/api/closed", json={"closed_dates": ["2024-12-25"]})
    response = create(client, date="2024-12-25")
    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "slot_closed"


def test_update(client):
    created = create(client).json()
    response = client.put(
        f"/api/reservations/{created['id']}",
        json=reservation(guests=8, status="confirmed"),
    )
    assert response.status_code == 200
    assert response.json()["guests"] == 8
    assert response.json()["status"] == "confirmed"
    assert response.json()["id"] == created["id"]


def test_update_missing(client):
    response = client.put("/api/reservations/nope", json=reservation())
    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "not_found"


def test_move(client):
    created = create(client).json()
    response = client.post(
        f"/api/reservations/{created['id']}/move",
        json={"date": "2024-12-10", "time": "20:00"},
    )
    assert response.status_code == 200
    assert (response.json()["date"], response.json()["time"]) == ("2024-12-10", "20:00")

    bad = client.post(f"/api/reservations/{created['id']}/move", json={"date": "x"})
    assert bad.status_code == 400


def test_delete(client):
    created = create(client).json()
    response = client.delete(f"/api/reservations/{created['id']}")
    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["removed"]["id"] == created["id"]

    assert client.get(f"/api/reservations/{created['id']}").status_code == 404
    assert client.delete(f"/api/reservations/{created['id']}").status_code == 404


def test_list_filters(client):
    client.patch("/api/settings", json={"max_per_slot": 5})
    create(client, id="a", date="2024-12-09")
    create(client, id="b", date="2024-12-11", status="cancelled")
    create(client, id="c", date="2024-12-12", status="confirmed")

    def ids(**params):
        return [r["id"] for r in client.get("/api/reservations", params=params).json()]

    assert ids() == ["a", "b", "c"]
    assert ids(**{"from": "2024-12-10"}) == ["b", "c"]
    assert ids(to="2024-12-11") == ["a", "b"]
    assert ids(status="cancelled") == ["b"]
    assert ids(status="all") == ["a", "b", "c"]
    # Malformed bounds are ignored
    assert ids(**{"from": "yesterday"}) == ["a", "b", "c"]


def test_settings_patch(client):
    assert client.get("/api/settings").json()["max_per_slot"] == 1

    response = client.patch("/api/settings", json={"max_per_slot": 2, "opening_hour": "12:00"})
    assert response.status_code == 200
    assert response.json()["max_per_slot"] == 2
    assert response.json()["closing_hour"] == "23:00"

    bad = client.put("/api/settings", json={"slot_minutes": -5})
    assert bad.status_code == 400
    assert bad.json()["detail"]["error"] == "validation_error"


def test_closed_patch(client):
    response = client.patch("/api/closed", json={"weekly_closed": {"monday": True}})
    assert response.status_code == 200
    assert response.json()["weekly_closed"]["monday"] is True
    assert response.json()["closed_dates"] == []

    assert create(client, date="2024-12-09").status_code == 409


def test_slots_day(client):
    client.patch("/api/settings", json={"opening_hour": "15:00", "closing_hour": "16:00", "max_per_slot": 2})
    create(client, time="15:30")

    response = client.get("/api/slots", params={"date": "2024-12-09"})
    assert response.status_code == 200
    body = response.json()
    assert body["closed"] is False
    assert body["slots"] == [
        {"time": "15:00", "open": True, "booked": 0, "remaining": 2},
        {"time": "15:30", "open": True, "booked": 1, "remaining": 1},
        {"time": "16:00", "open": True, "booked": 0, "remaining": 2},
    ]

    assert client.get("/api/slots", params={"date": "2024-02-30"}).status_code == 400


def test_storage_failure_maps_to_503(client, db):
    db.execute(text("DROP TABLE kv"))
    db.commit()

    for response in (
        client.get("/api/settings"),
        client.get("/api/slots", params={"date": "2024-12-09"}),
        create(client),
    ):
        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "storage_error"


def test_settings_patch_with_dashboard_keys(client):
    response = client.put("/api/settings", json={"openingHour": "12:00", "maxPerSlot": 2})
    assert response.status_code == 200
    assert response.json()["opening_hour"] == "12:00"
    assert response.json()["max_per_slot"] == 2

    response = client.put("/api/closed", json={"closedDates": ["2024-12-25"]})
    assert response.json()["closed_dates"] == ["2024-12-25"]
