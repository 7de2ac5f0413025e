from clinic_agenda.models import Setting

DEFAULT_SETTINGS = {
    "centerOpensAt": "09:00",
    "centerClosesAt": "21:00",
    "appointmentOpensAt": "09:00",
    "appointmentClosesAt": "21:00",
    "openOnSaturday": False,
    "openOnSunday": False,
    "therapistCanViewOthers": False,
    "therapistCanEditOthers": False,
}


def test_defaults_when_nothing_is_stored(client, therapist_headers):
    response = client.get("/api/app-settings", headers=therapist_headers)
    assert response.status_code == 200
    assert response.json() == DEFAULT_SETTINGS


def test_malformed_stored_values_fall_back(client, admin_headers, db_session):
    db_session.add_all(
        [
            Setting(key="center_open_time", value="late"),
            Setting(key="center_close_time", value=19),
            Setting(key="center_open_saturday", value="si"),
            Setting(key="therapist_can_view_others", value="perhaps"),
        ]
    )
    db_session.commit()

    settings = client.get("/api/app-settings", headers=admin_headers).json()
    assert settings["centerOpensAt"] == "09:00"
    assert settings["centerClosesAt"] == "19:00"
    assert settings["appointmentClosesAt"] == "19:00"
    assert settings["openOnSaturday"] is True
    assert settings["therapistCanViewOthers"] is False


def test_admin_updates_are_normalized(client, admin_headers):
    response = client.put(
        "/api/app-settings",
        json={
            "centerOpensAt": "8:00",
            "centerClosesAt": "20:00:00",
            "appointmentOpensAt": "07:00",
            "openOnSaturday": "yes",
            "therapistCanEditOthers": 1,
        },
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json() == {
        **DEFAULT_SETTINGS,
        "centerOpensAt": "08:00",
        "centerClosesAt": "20:00",
        "appointmentOpensAt": "08:00",
        "appointmentClosesAt": "20:00",
        "openOnSaturday": True,
        "therapistCanEditOthers": True,
    }
    assert client.get("/api/app-settings", headers=admin_headers).json() == response.json()


def test_partial_time_update_keeps_stored_values(client, admin_headers):
    client.put(
        "/api/app-settings",
        json={"centerOpensAt": "08:00", "centerClosesAt": "18:00", "appointmentClosesAt": "17:00"},
        headers=admin_headers,
    )
    settings = client.put("/api/app-settings", json={"appointmentOpensAt": "10:00"}, headers=admin_headers).json()
    assert settings["centerOpensAt"] == "08:00"
    assert settings["appointmentOpensAt"] == "10:00"
    assert settings["appointmentClosesAt"] == "17:00"


def test_inverted_hours_are_repaired(client, admin_headers):
    settings = client.put(
        "/api/app-settings", json={"centerOpensAt": "18:00", "centerClosesAt": "10:00"}, headers=admin_headers
    ).json()
    assert settings["centerOpensAt"] == "18:00"
    assert settings["centerClosesAt"] == "19:00"


def test_update_requires_admin(client, therapist_headers):
    response = client.put("/api/app-settings", json={"openOnSunday": True}, headers=therapist_headers)
    assert response.status_code == 403


def test_empty_update_is_rejected(client, admin_headers):
    response = client.put("/api/app-settings", json={"unknown": 1}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "No settings to update"}


def test_calendar_options(client, admin_headers):
    calendar = client.get("/api/app-settings/calendar", headers=admin_headers).json()
    assert calendar["openingHour"] == 9
    assert calendar["clientClosingHour"] == 21
    assert calendar["therapistClosingHour"] == 22
    assert calendar["centerClosingHour"] == 21
    assert calendar["clientHours"] == list(range(9, 21))
    assert calendar["therapistHours"] == list(range(9, 22))
    assert [day["name"] for day in calendar["dayOptions"]] == ["Mon", "Tue", "Wed", "Thu", "Fri"]


def test_calendar_follows_weekend_settings(client, admin_headers):
    client.put("/api/app-settings", json={"openOnSaturday": True, "openOnSunday": "1"}, headers=admin_headers)
    calendar = client.get("/api/app-settings/calendar", headers=admin_headers).json()
    assert [day["value"] for day in calendar["dayOptions"]] == [1, 2, 3, 4, 5, 6, 0]
