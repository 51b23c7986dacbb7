from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from app.schemas.appointments.appointment import (
    AppointmentFormValues,
    AppointmentPayload,
    DATE_IN_PAST,
    DATE_REQUIRED,
    DESCRIPTION_REQUIRED,
    PET_NAME_REQUIRED,
    PHONE_REQUIRED,
    TIME_IN_PAST,
    TIME_REQUIRED,
    TIME_UNAVAILABLE,
    TUTOR_NAME_REQUIRED,
    field_errors,
    validate_appointment_form,
    validate_appointment_payload,
)

NOW = datetime(2026, 10, 17, 14, 10)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


def form_values(**overrides):
    values = {
        "tutor_name": "Ana",
        "pet_name": "Rex",
        "phone": "11987654321",
        "description": "Banho e tosa",
        "schedule_at": TOMORROW,
        "time": "10:00",
    }
    values.update(overrides)
    return values


def test_valid_form_builds_combined_payload():
    form, errors = validate_appointment_form(form_values(), now=NOW)
    assert errors == {}
    payload = form.to_payload()
    assert payload.schedule_at == datetime(2026, 10, 18, 10, 0, 0, 0)
    assert payload.phone == "11987654321"
    assert payload.tutor_name == "Ana"


def test_empty_form_reports_every_field():
    _, errors = validate_appointment_form(
        {"tutor_name": "", "pet_name": "", "phone": "", "description": "", "schedule_at": None, "time": ""},
        now=NOW,
    )
    assert errors == {
        "tutor_name": TUTOR_NAME_REQUIRED,
        "pet_name": PET_NAME_REQUIRED,
        "phone": PHONE_REQUIRED,
        "description": DESCRIPTION_REQUIRED,
        "schedule_at": DATE_REQUIRED,
        "time": TIME_REQUIRED,
    }


def test_missing_keys_use_required_messages():
    _, errors = validate_appointment_form({}, now=NOW)
    assert errors["tutor_name"] == TUTOR_NAME_REQUIRED
    assert errors["schedule_at"] == DATE_REQUIRED
    assert errors["time"] == TIME_REQUIRED


@pytest.mark.parametrize("field,value,message", [
    ("tutor_name", "Al", TUTOR_NAME_REQUIRED),
    ("pet_name", "Re", PET_NAME_REQUIRED),
    ("description", "ab", DESCRIPTION_REQUIRED),
    ("phone", "(11) 98765-432", PHONE_REQUIRED),
])
def test_short_values_are_rejected(field, value, message):
    _, errors = validate_appointment_form(form_values(**{field: value}), now=NOW)
    assert errors == {field: message}


def test_masked_phone_counts_digits_only():
    form, errors = validate_appointment_form(form_values(phone="(11) 98765-4321"), now=NOW)
    assert errors == {}
    assert form.to_payload().phone == "11987654321"


def test_today_with_past_time_fails_on_time_field():
    _, errors = validate_appointment_form(form_values(schedule_at=TODAY, time="14:00"), now=NOW)
    assert errors == {"time": TIME_IN_PAST}


def test_today_with_future_time_passes():
    form, errors = validate_appointment_form(form_values(schedule_at=TODAY, time="14:30"), now=NOW)
    assert errors == {}
    assert form.to_payload().schedule_at == datetime(2026, 10, 17, 14, 30)


def test_slot_equal_to_now_is_not_in_the_future():
    now = datetime(2026, 10, 17, 14, 30)
    _, errors = validate_appointment_form(form_values(schedule_at=TODAY, time="14:30"), now=now)
    assert errors == {"time": TIME_IN_PAST}


@pytest.mark.parametrize("time_value", ["09:00", "21:00"])
def test_past_date_fails_regardless_of_time(time_value):
    yesterday = TODAY - timedelta(days=1)
    _, errors = validate_appointment_form(form_values(schedule_at=yesterday, time=time_value), now=NOW)
    assert errors == {"schedule_at": DATE_IN_PAST}


def test_time_outside_slots_is_rejected():
    _, errors = validate_appointment_form(form_values(time="10:15"), now=NOW)
    assert errors == {"time": TIME_UNAVAILABLE}
    _, errors = validate_appointment_form(form_values(time="21:30"), now=NOW)
    assert errors == {"time": TIME_UNAVAILABLE}


def test_datetime_and_iso_string_dates_are_accepted():
    form, errors = validate_appointment_form(form_values(schedule_at=datetime(2026, 10, 18, 0, 0)), now=NOW)
    assert errors == {}
    assert form.schedule_at == date(2026, 10, 18)

    form, errors = validate_appointment_form(form_values(schedule_at="2026-10-18"), now=NOW)
    assert errors == {}


def test_unparseable_date_reports_required():
    _, errors = validate_appointment_form(form_values(schedule_at="amanhã"), now=NOW)
    assert errors == {"schedule_at": DATE_REQUIRED}


def test_payload_validation_rejects_off_slot_seconds():
    payload = AppointmentPayload(
        tutor_name="Ana",
        pet_name="Rex",
        phone="(11) 98765-4321",
        description="Banho e tosa",
        schedule_at=datetime(2026, 10, 18, 10, 0, 30),
    )
    assert validate_appointment_payload(payload, now=NOW) == {"time": TIME_UNAVAILABLE}


def test_payload_validation_accepts_slot():
    payload = AppointmentPayload(
        tutor_name="Ana",
        pet_name="Rex",
        phone="11987654321",
        description="Banho e tosa",
        schedule_at=datetime(2026, 10, 18, 10, 0),
    )
    assert validate_appointment_payload(payload, now=NOW) == {}


def test_field_errors_strip_request_location():
    errors = [
        {"loc": ("path", "appointment_id"), "msg": "Input should be a valid integer", "type": "int_parsing"},
        {"loc": ("query", "date"), "msg": "Input should be a valid date", "type": "date_from_datetime_parsing"},
        {"loc": ("body", "tutor_name"), "msg": "Field required", "type": "missing"},
    ]
    assert field_errors(errors) == {
        "appointment_id": "Input should be a valid integer",
        "date": "Input should be a valid date",
        "tutor_name": TUTOR_NAME_REQUIRED,
    }


def test_custom_errors_keep_verbatim_messages():
    with pytest.raises(ValidationError) as exc:
        AppointmentFormValues.model_validate(form_values(tutor_name="Al"), context={"now": NOW})
    err = exc.value.errors()[0]
    assert err["type"] == "required"
    assert err["msg"] == TUTOR_NAME_REQUIRED
