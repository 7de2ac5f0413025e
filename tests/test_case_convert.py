from datetime import date

from clinic_agenda.shared.case_convert import camel_to_snake, snake_to_camel, to_camel_case, to_snake_case


def test_key_conversion():
    assert snake_to_camel("first_name") == "firstName"
    assert snake_to_camel("must_change_password") == "mustChangePassword"
    assert snake_to_camel("id") == "id"
    assert camel_to_snake("dayOfWeek") == "day_of_week"
    assert camel_to_snake("email") == "email"


def test_nested_structures_are_renamed():
    payload = {
        "therapist_id": "t1",
        "working_hours": [{"day_of_week": 1, "start_time": "09:00"}],
        "client": {"first_name": "Mario", "tags": ["a_b"]},
    }
    assert to_camel_case(payload) == {
        "therapistId": "t1",
        "workingHours": [{"dayOfWeek": 1, "startTime": "09:00"}],
        "client": {"firstName": "Mario", "tags": ["a_b"]},
    }


def test_leaf_values_are_untouched():
    day = date(2025, 1, 6)
    assert to_snake_case({"startDate": day, "note": "keepThis"}) == {"start_date": day, "note": "keepThis"}
    assert to_camel_case("plain_string") == "plain_string"
    assert to_camel_case(None) is None
