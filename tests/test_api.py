from datetime import timedelta

from petspa import config
from tests.conftest import register_and_login


def booking(day, time="10:00", **overrides):
    payload = {
        "client_name": "Maria Souza",
        "pet_name": "Luna",
        "pet_breed": "Poodle",
        "pet_size": "medio",
        "contact": "11999998888",
        "vaccination_status": "Em dia",
        "date": day.isoformat(),
        "time": time,
        "service": "Banho e Tosa",
        "extras": ["hydration"],
    }
    payload.update(overrides)
    return payload


def create_rule(client, headers, **overrides):
    payload = {"day_of_week": 3, "time": "11:00", "pet_name": "Thor", "frequency": "weekly"}
    payload.update(overrides)
    resp = client.post("/admin/recurring-rules", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_login_with_wrong_password(client, client_headers):
    resp = client.post("/auth/login", data={"username": "tutor@example.com", "password": "nope-nope"})
    assert resp.status_code == 401


def test_admin_registration_requires_allow_list(client):
    resp = client.post("/users", json={"email": "intruder@example.com", "password": "Password!23", "role": "admin"})
    assert resp.status_code == 403


def test_book_appointment_and_slot_disappears(client, client_headers, next_wednesday):
    resp = client.post("/appointments", json=booking(next_wednesday), headers=client_headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["total_price"] == 95.0
    assert body["blocked"] is False

    slots = client.get("/slots", params={"date": next_wednesday.isoformat()}).json()["available"]
    assert "10:00" not in slots
    assert "10:30" in slots
    assert len(slots) == 16

    mine = client.get("/clients/me/appointments", headers=client_headers).json()
    assert [a["id"] for a in mine] == [body["id"]]


def test_double_booking_conflicts(client, client_headers, next_wednesday):
    assert client.post("/appointments", json=booking(next_wednesday), headers=client_headers).status_code == 201
    resp = client.post("/appointments", json=booking(next_wednesday), headers=client_headers)
    assert resp.status_code == 409


def test_booking_validation(client, client_headers, next_wednesday):
    sunday = next_wednesday - timedelta(days=3)
    monday = next_wednesday - timedelta(days=2)
    cases = [
        booking(next_wednesday, vaccination_status="Não está em dia"),
        booking(sunday),
        booking(monday, time="09:00"),
        booking(next_wednesday, service="Tosa Completa"),
        booking(next_wednesday - timedelta(weeks=3)),
    ]
    for payload in cases:
        resp = client.post("/appointments", json=payload, headers=client_headers)
        assert resp.status_code == 422, payload


def test_booking_requires_login(client, next_wednesday):
    assert client.post("/appointments", json=booking(next_wednesday)).status_code == 401


def test_cancel_own_appointment_only(client, client_headers, next_wednesday):
    appt_id = client.post("/appointments", json=booking(next_wednesday), headers=client_headers).json()["id"]
    other = register_and_login(client, "other@example.com")

    assert client.delete(f"/appointments/{appt_id}", headers=other).status_code == 403
    assert client.delete(f"/appointments/{appt_id}", headers=client_headers).status_code == 204
    assert client.delete(f"/appointments/{appt_id}", headers=client_headers).status_code == 404


def test_admin_routes_need_allow_listed_admin(client, client_headers):
    assert client.get("/admin/agenda").status_code == 401
    assert client.get("/admin/agenda", headers=client_headers).status_code == 403


def test_agenda_merges_bookings_and_club_visits(client, admin_headers, client_headers, next_wednesday):
    client.post("/appointments", json=booking(next_wednesday, time="10:00"), headers=client_headers)
    create_rule(client, admin_headers, time="09:30", cycle_start_date=next_wednesday.isoformat())

    resp = client.get("/admin/agenda", params={"date": next_wednesday.isoformat()}, headers=admin_headers)
    assert resp.status_code == 200
    entries = resp.json()["entries"]
    assert [e["kind"] for e in entries] == ["recurring", "client"]
    assert entries[0]["visit_ordinal"] == 1
    assert entries[0]["starts_at"].startswith(f"{next_wednesday.isoformat()}T09:30")
    assert entries[1]["client_name"] == "Maria Souza"

    next_week = next_wednesday + timedelta(weeks=1)
    entries = client.get("/admin/agenda", params={"date": next_week.isoformat()}, headers=admin_headers).json()["entries"]
    assert [e["visit_ordinal"] for e in entries] == [2]

    # club visit takes the slot for customers too
    slots = client.get("/slots", params={"date": next_week.isoformat()}).json()["available"]
    assert "09:30" not in slots


def test_rule_validation(client, admin_headers, next_wednesday):
    bad_time = {"day_of_week": 3, "time": "11:15", "pet_name": "Thor", "frequency": "weekly"}
    assert client.post("/admin/recurring-rules", json=bad_time, headers=admin_headers).status_code == 422

    wrong_weekday = dict(bad_time, time="11:00", cycle_start_date=(next_wednesday + timedelta(days=1)).isoformat())
    assert client.post("/admin/recurring-rules", json=wrong_weekday, headers=admin_headers).status_code == 422

    bad_bath = dict(bad_time, time="11:00", start_bath_number=5)
    assert client.post("/admin/recurring-rules", json=bad_bath, headers=admin_headers).status_code == 422


def test_rule_occurrence_endpoint(client, admin_headers, next_wednesday):
    rule = create_rule(client, admin_headers, frequency="bi-weekly", cycle_start_date=next_wednesday.isoformat())

    url = f"/admin/recurring-rules/{rule['id']}/occurrence"
    on = client.get(url, params={"date": (next_wednesday + timedelta(weeks=2)).isoformat()}, headers=admin_headers)
    off = client.get(url, params={"date": (next_wednesday + timedelta(weeks=1)).isoformat()}, headers=admin_headers)
    assert on.json()["occurs"] is True
    assert off.json()["occurs"] is False
    assert client.get("/admin/recurring-rules/999/occurrence", headers=admin_headers).status_code == 404


def test_delete_and_bulk_delete_rules(client, admin_headers):
    ids = [create_rule(client, admin_headers, pet_name=name)["id"] for name in ("Thor", "Bidu", "Mel")]

    assert client.delete(f"/admin/recurring-rules/{ids[0]}", headers=admin_headers).status_code == 204
    assert client.delete(f"/admin/recurring-rules/{ids[0]}", headers=admin_headers).status_code == 404

    resp = client.post("/admin/recurring-rules/bulk-delete", json={"ids": [ids[1]]}, headers=admin_headers)
    assert resp.json() == {"deleted": 1}

    resp = client.post("/admin/recurring-rules/bulk-delete", json={"ids": []}, headers=admin_headers)
    assert resp.json() == {"deleted": 1}
    assert client.get("/admin/recurring-rules", headers=admin_headers).json() == []


def test_import_rules_from_csv(client, admin_headers):
    create_rule(client, admin_headers, pet_name="Antigo")
    content = (
        "dayOfWeek,time,petName,frequency\n"
        "terça-feira,14:00,Thor,semanal\n"
        "domingo,10:00,Mel,semanal\n"
    ).encode("utf-8")

    resp = client.post(
        "/admin/recurring-rules/import",
        params={"replace": "true"},
        files={"file": ("rules.csv", content, "text/csv")},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["imported"] == 1
    assert body["replaced"] == 1
    assert len(body["skipped"]) == 1

    rules = client.get("/admin/recurring-rules", headers=admin_headers).json()
    assert [r["pet_name"] for r in rules] == ["Thor"]


def test_import_rejects_missing_headers(client, admin_headers):
    resp = client.post(
        "/admin/recurring-rules/import",
        files={"file": ("rules.csv", b"name,time\nThor,14:00\n", "text/csv")},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_blocks_in_legacy_mode(client, admin_headers, next_wednesday, monkeypatch):
    monkeypatch.setattr(config, "LEGACY_BLOCKED_APPOINTMENTS", True)
    resp = client.post(
        "/admin/blocks",
        json={"date": next_wednesday.isoformat(), "times": ["14:00", "14:30"]},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    blocks = resp.json()
    assert all(b["blocked"] for b in blocks)

    entries = client.get("/admin/agenda", params={"date": next_wednesday.isoformat()}, headers=admin_headers).json()["entries"]
    assert [e["kind"] for e in entries] == ["blocked", "blocked"]

    slots = client.get("/slots", params={"date": next_wednesday.isoformat()}).json()["available"]
    assert "14:00" not in slots

    listed = client.get("/admin/appointments", params={"blocked": "true"}, headers=admin_headers).json()
    assert len(listed) == 2

    assert client.delete(f"/admin/blocks/{blocks[0]['id']}", headers=admin_headers).status_code == 204
    slots = client.get("/slots", params={"date": next_wednesday.isoformat()}).json()["available"]
    assert "14:00" in slots
    assert "14:30" not in slots


def test_blocked_slot_cannot_be_booked(client, admin_headers, client_headers, next_wednesday, monkeypatch):
    monkeypatch.setattr(config, "LEGACY_BLOCKED_APPOINTMENTS", True)
    client.post("/admin/blocks", json={"date": next_wednesday.isoformat(), "times": ["10:00"]}, headers=admin_headers)
    resp = client.post("/appointments", json=booking(next_wednesday), headers=client_headers)
    assert resp.status_code == 409


def test_blocks_disabled_without_legacy_mode(client, admin_headers, next_wednesday, monkeypatch):
    monkeypatch.setattr(config, "LEGACY_BLOCKED_APPOINTMENTS", False)
    resp = client.post(
        "/admin/blocks",
        json={"date": next_wednesday.isoformat(), "times": ["14:00"]},
        headers=admin_headers,
    )
    assert resp.status_code == 409


def test_agenda_days(client, client_headers, admin_headers, next_wednesday):
    thursday = next_wednesday + timedelta(days=1)
    client.post("/appointments", json=booking(next_wednesday), headers=client_headers)
    client.post("/appointments", json=booking(thursday, time="15:30"), headers=client_headers)

    resp = client.get(
        "/admin/agenda/days",
        params={"start": next_wednesday.isoformat(), "end": (next_wednesday + timedelta(days=6)).isoformat()},
        headers=admin_headers,
    )
    assert resp.json()["days"] == [next_wednesday.isoformat(), thursday.isoformat()]


def test_leftover_block_holds_its_slot_without_legacy_mode(client, admin_headers, client_headers, next_wednesday, monkeypatch):
    monkeypatch.setattr(config, "LEGACY_BLOCKED_APPOINTMENTS", True)
    resp = client.post("/admin/blocks", json={"date": next_wednesday.isoformat(), "times": ["10:00"]}, headers=admin_headers)
    assert resp.status_code == 201, resp.text

    monkeypatch.setattr(config, "LEGACY_BLOCKED_APPOINTMENTS", False)

    # the agenda hides it
    entries = client.get("/admin/agenda", params={"date": next_wednesday.isoformat()}, headers=admin_headers).json()["entries"]
    assert entries == []

    # but customers are never offered it
    slots = client.get("/slots", params={"date": next_wednesday.isoformat()}).json()["available"]
    assert "10:00" not in slots
    assert "10:30" in slots

    resp = client.post("/appointments", json=booking(next_wednesday), headers=client_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Time slot is no longer available"
