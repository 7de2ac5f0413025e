import pytest

from clinic_agenda.domain.appointments.service import AppointmentService


@pytest.fixture
def book(client, admin_headers, therapist, patient):
    """Post an appointment for the default therapist and client"""

    def _book(**overrides):
        payload = {
            "therapistId": therapist.id,
            "clientId": patient.id,
            "date": "2025-01-06",
            "startTime": "10:00",
            "durationMinutes": 45,
            **overrides,
        }
        return client.post("/api/appointments", json=payload, headers=admin_headers)

    return _book


@pytest.fixture
def weekly_series(book):
    response = book(frequency="semanal", occurrences=3, endTime="11:00", durationMinutes=60)
    assert response.status_code == 201
    return response.json()["series"]


def test_booking_fills_end_time_and_embeds_relations(book, therapist, patient):
    response = book()
    assert response.status_code == 201
    body = response.json()
    assert body["date"] == "2025-01-06"
    assert body["endTime"] == "10:45"
    assert body["status"] == "pending"
    assert body["frequency"] == "puntual"
    assert body["seriesId"] is None
    assert body["therapist"]["name"] == "Laura Gómez"
    assert body["client"]["firstName"] == "Mario"
    assert "series" not in body


def test_booking_defaults_to_one_hour(book):
    body = book(durationMinutes=None, startTime="9:00").json()
    assert body["startTime"] == "09:00"
    assert body["endTime"] == "10:00"
    assert body["durationMinutes"] == 60


@pytest.mark.parametrize(
    "overrides",
    [
        {"startTime": "25:00"},
        {"startTime": "09:99"},
        {"startTime": "9:00abc"},
        {"startTime": "10:00", "endTime": "11:5"},
        {"startTime": "10:00", "endTime": "09:00"},
        {"durationMinutes": 0},
        {"status": "done"},
        {"frequency": "mensual"},
        {"occurrences": 60, "frequency": "semanal"},
    ],
)
def test_booking_validation(book, overrides):
    response = book(**overrides)
    assert response.status_code == 422
    assert response.json()["error"] == "Invalid request"


def test_booking_unknown_references(book):
    assert book(therapistId="missing").json() == {"error": "Therapist not found"}
    assert book(clientId="missing").status_code == 404


def test_overlapping_booking_is_rejected(book):
    assert book().status_code == 201
    clash = book(startTime="10:30")
    assert clash.status_code == 409
    assert clash.json() == {"error": "The therapist already has an appointment at that time"}

    assert book(startTime="10:45").status_code == 201
    assert book(startTime="10:30", status="cancelled").status_code == 201


def test_cancelled_appointments_do_not_block(book):
    book(status="cancelled")
    assert book().status_code == 201


def test_other_day_or_therapist_does_not_clash(book, db_session, patient):
    from clinic_agenda.models import Therapist

    other = Therapist(name="Irene Sanz", specialty="Fisioterapia")
    db_session.add(other)
    db_session.commit()

    assert book().status_code == 201
    assert book(date="2025-01-07").status_code == 201
    assert book(therapistId=other.id).status_code == 201


def test_list_filters_and_order(client, admin_headers, book, therapist):
    book(date="2025-01-08")
    book(date="2025-01-06", startTime="12:00")
    book(date="2025-01-06", startTime="09:00")

    listed = client.get("/api/appointments", headers=admin_headers).json()
    assert [(a["date"], a["startTime"]) for a in listed] == [
        ("2025-01-06", "09:00"),
        ("2025-01-06", "12:00"),
        ("2025-01-08", "10:00"),
    ]

    filtered = client.get(
        "/api/appointments",
        params={"therapistId": therapist.id, "startDate": "2025-01-07", "endDate": "2025-01-31"},
        headers=admin_headers,
    ).json()
    assert [a["date"] for a in filtered] == ["2025-01-08"]


def test_get_update_delete(client, admin_headers, book):
    appointment_id = book().json()["id"]
    url = f"/api/appointments/{appointment_id}"

    assert client.get(url, headers=admin_headers).json()["id"] == appointment_id

    updated = client.patch(url, json={"status": "confirmed", "notes": "Trae informe"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "confirmed"
    assert updated.json()["notes"] == "Trae informe"

    assert client.delete(url, headers=admin_headers).json() == {"success": True}
    missing = client.get(url, headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Appointment not found"}


def test_update_checks_slot(client, admin_headers, book):
    first = book().json()
    book(startTime="12:00")
    url = f"/api/appointments/{first['id']}"

    inverted = client.patch(url, json={"endTime": "09:00"}, headers=admin_headers)
    assert inverted.status_code == 400

    clash = client.patch(url, json={"startTime": "12:15", "endTime": "12:45"}, headers=admin_headers)
    assert clash.status_code == 409

    # Moving within its own slot does not clash with itself
    moved = client.patch(url, json={"startTime": "10:15", "endTime": "11:00"}, headers=admin_headers)
    assert moved.status_code == 200


def test_recurring_booking_creates_series(weekly_series):
    assert [a["date"] for a in weekly_series] == ["2025-01-06", "2025-01-13", "2025-01-20"]
    series_ids = {a["seriesId"] for a in weekly_series}
    assert len(series_ids) == 1 and None not in series_ids
    assert {a["frequency"] for a in weekly_series} == {"semanal"}


def test_recurring_booking_stops_on_overlap(client, admin_headers, book):
    book(date="2025-01-20")
    response = book(frequency="quincenal", occurrences=3, date="2025-01-06")
    assert response.status_code == 409
    listed = client.get("/api/appointments", headers=admin_headers).json()
    assert len(listed) == 1


def test_series_edit_this_and_future(client, admin_headers, weekly_series):
    second = weekly_series[1]
    response = client.patch(
        f"/api/appointments/{second['id']}/series",
        params={"scope": "this_and_future"},
        json={"date": "2025-01-14", "startTime": "11:30", "endTime": "12:30", "notes": "Nuevo horario"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    updated = response.json()
    assert [(a["date"], a["startTime"], a["endTime"]) for a in updated] == [
        ("2025-01-14", "11:30", "12:30"),
        ("2025-01-21", "11:30", "12:30"),
    ]
    assert {a["notes"] for a in updated} == {"Nuevo horario"}

    first = client.get(f"/api/appointments/{weekly_series[0]['id']}", headers=admin_headers).json()
    assert (first["date"], first["startTime"]) == ("2025-01-06", "10:00")


def test_series_edit_this_only_detaches(client, admin_headers, weekly_series):
    second = weekly_series[1]
    response = client.patch(
        f"/api/appointments/{second['id']}/series",
        params={"scope": "this_only"},
        json={"startTime": "16:00", "endTime": "17:00"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["seriesId"] is None
    assert body["frequency"] == "puntual"
    assert body["startTime"] == "16:00"

    third = client.get(f"/api/appointments/{weekly_series[2]['id']}", headers=admin_headers).json()
    assert third["seriesId"] == weekly_series[0]["seriesId"]
    assert third["startTime"] == "10:00"


def test_series_edit_without_series_touches_one(client, admin_headers, book):
    appointment_id = book().json()["id"]
    response = client.patch(
        f"/api/appointments/{appointment_id}/series",
        params={"scope": "this_and_future"},
        json={"notes": "Solo esta"},
        headers=admin_headers,
    )
    assert [a["notes"] for a in response.json()] == ["Solo esta"]


def test_series_scope_is_validated(client, admin_headers, weekly_series):
    url = f"/api/appointments/{weekly_series[0]['id']}/series"
    assert client.patch(url, params={"scope": "all"}, json={}, headers=admin_headers).status_code == 422
    assert client.delete(url, headers=admin_headers).status_code == 422


def test_series_delete_this_and_future(client, admin_headers, weekly_series):
    response = client.delete(
        f"/api/appointments/{weekly_series[1]['id']}/series",
        params={"scope": "this_and_future"},
        headers=admin_headers,
    )
    assert response.status_code == 204
    remaining = client.get("/api/appointments", headers=admin_headers).json()
    assert [a["id"] for a in remaining] == [weekly_series[0]["id"]]


def test_series_delete_this_only(client, admin_headers, weekly_series):
    response = client.delete(
        f"/api/appointments/{weekly_series[0]['id']}/series",
        params={"scope": "this_only"},
        headers=admin_headers,
    )
    assert response.status_code == 204
    assert len(client.get("/api/appointments", headers=admin_headers).json()) == 2


def test_change_frequency_respaces_future(client, admin_headers, weekly_series):
    response = client.patch(
        f"/api/appointments/{weekly_series[0]['id']}/frequency",
        json={"frequency": "quincenal"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert [(a["date"], a["frequency"]) for a in response.json()] == [
        ("2025-01-06", "quincenal"),
        ("2025-01-20", "quincenal"),
        ("2025-02-03", "quincenal"),
    ]


def test_change_frequency_requires_series(client, admin_headers, book):
    appointment_id = book().json()["id"]
    url = f"/api/appointments/{appointment_id}/frequency"
    response = client.patch(url, json={"frequency": "semanal"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Appointment not found or not part of a series"}
    assert client.patch(url, json={"frequency": "puntual"}, headers=admin_headers).status_code == 422


def test_occupancy_grid(client, admin_headers, book, therapist):
    first = book(startTime="09:00", endTime="11:00").json()
    book(status="cancelled", startTime="15:00", endTime="16:00")
    book(date="2025-02-03", startTime="09:00")

    response = client.get("/api/occupancy", params={"year": 2025, "month": 1}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {
        "year": 2025,
        "month": 1,
        "slots": {
            f"{therapist.id}|2025-01-06|9": first["id"],
            f"{therapist.id}|2025-01-06|10": first["id"],
        },
    }


def test_occupancy_validates_month(client, admin_headers):
    assert client.get("/api/occupancy", params={"year": 2025, "month": 13}, headers=admin_headers).status_code == 422


def test_appointments_require_authentication(client):
    assert client.get("/api/appointments").status_code == 401


@pytest.mark.parametrize("field", ["therapistId", "clientId", "date", "status"])
def test_update_cannot_clear_required_fields(client, admin_headers, book, field):
    appointment_id = book().json()["id"]
    response = client.patch(f"/api/appointments/{appointment_id}", json={field: None}, headers=admin_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "Invalid request"

    stored = client.get(f"/api/appointments/{appointment_id}", headers=admin_headers).json()
    assert stored["status"] == "pending"
    assert stored["date"] == "2025-01-06"


def test_update_rejects_malformed_time(client, admin_headers, book):
    appointment_id = book().json()["id"]
    response = client.patch(
        f"/api/appointments/{appointment_id}", json={"startTime": "09:99"}, headers=admin_headers
    )
    assert response.status_code == 422


def test_update_can_clear_optional_fields(client, admin_headers, book):
    appointment_id = book(notes="Primera sesión").json()["id"]
    response = client.patch(f"/api/appointments/{appointment_id}", json={"notes": None}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["notes"] is None


def test_series_delete_returns_count_of_future_occurrences(db_session, weekly_series):
    deleted = AppointmentService(db_session).delete_series(weekly_series[0]["id"], "this_and_future")
    assert deleted == 3
