from datetime import date

from clinic_agenda.domain.scheduling.occupancy import build_occupancy_grid


def test_each_hour_of_an_appointment_is_marked():
    appointments = [
        {"id": "a1", "therapist_id": "t1", "date": "2025-03-04", "start_time": "09:00", "end_time": "11:30"},
    ]
    assert build_occupancy_grid(appointments, 2025, 3) == {
        "t1|2025-03-04|9": "a1",
        "t1|2025-03-04|10": "a1",
    }


def test_cancelled_and_other_months_are_skipped():
    appointments = [
        {"id": "a1", "therapistId": "t1", "date": date(2025, 3, 4), "status": "cancelled",
         "startTime": "09:00", "endTime": "10:00"},
        {"id": "a2", "therapistId": "t1", "date": date(2025, 4, 1), "startTime": "09:00", "endTime": "10:00"},
        {"id": "a3", "therapistId": "t1", "date": None, "startTime": "09:00", "endTime": "10:00"},
    ]
    assert build_occupancy_grid(appointments, 2025, 3) == {}


def test_later_appointments_overwrite_shared_cells():
    appointments = [
        {"id": "a1", "therapist_id": "t1", "date": "2025-03-31", "start_time": "10:00", "end_time": "12:00"},
        {"id": "a2", "therapist_id": "t1", "date": "2025-03-31", "start_time": "11:00", "end_time": "12:00"},
        {"id": "a3", "therapist_id": "t2", "date": "2025-03-31", "start_time": "11:00", "end_time": "12:00"},
    ]
    grid = build_occupancy_grid(appointments, 2025, 3)
    assert grid["t1|2025-03-31|10"] == "a1"
    assert grid["t1|2025-03-31|11"] == "a2"
    assert grid["t2|2025-03-31|11"] == "a3"


def test_appointment_inside_one_hour_marks_nothing():
    appointments = [
        {"id": "a1", "therapist_id": "t1", "date": "2025-03-04", "start_time": "09:00", "end_time": "09:45"},
        {"id": "a2", "therapist_id": "t1", "date": "2025-03-04", "start_time": "12:00", "end_time": None},
    ]
    assert build_occupancy_grid(appointments, 2025, 3) == {}
