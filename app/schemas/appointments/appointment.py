# app/schemas/appointments/appointment.py
from datetime import date, datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from app.application.services.time_slots import TIME_OPTIONS, combine_date_and_time, split_schedule
from app.utils import unmask_phone

TUTOR_NAME_REQUIRED = "O nome do tutor é obrigatório"
PET_NAME_REQUIRED = "O nome do pet é obrigatório"
PHONE_REQUIRED = "O telefone é obrigatório"
DESCRIPTION_REQUIRED = "A descrição é obrigatória"
DATE_REQUIRED = "A data é obrigatória"
DATE_IN_PAST = "A data não pode ser no passado"
TIME_REQUIRED = "A hora é obrigatória"
TIME_UNAVAILABLE = "Selecione um horário disponível"
TIME_IN_PAST = "O horário não pode ser no passado"

MIN_TEXT_LENGTH = 3
MIN_PHONE_DIGITS = 11

# Message used when a field is missing or has the wrong type
REQUIRED_MESSAGES = {
    "tutor_name": TUTOR_NAME_REQUIRED,
    "pet_name": PET_NAME_REQUIRED,
    "phone": PHONE_REQUIRED,
    "description": DESCRIPTION_REQUIRED,
    "schedule_at": DATE_REQUIRED,
    "time": TIME_REQUIRED,
}

FORM_FIELDS = tuple(REQUIRED_MESSAGES)

_CUSTOM_ERROR_TYPES = {"required", "date_in_past", "time_unavailable", "time_in_past"}

# request parts FastAPI puts in front of the field name
_LOC_SOURCES = {"body", "path", "query", "header", "cookie"}


def _now(info: ValidationInfo) -> datetime:
    context = info.context or {}
    return context.get("now") or datetime.now()


class AppointmentFormValues(BaseModel):
    """Values typed into the appointment form.

    ``schedule_at`` is the calendar day and ``time`` one of ``TIME_OPTIONS``.
    Pass ``context={"now": datetime}`` to pin the validation instant.
    """

    tutor_name: str
    pet_name: str
    phone: str
    description: str
    schedule_at: date
    time: str

    @field_validator("tutor_name", "pet_name", "description")
    @classmethod
    def validate_text(cls, v, info: ValidationInfo):
        if len(v) < MIN_TEXT_LENGTH:
            raise PydanticCustomError("required", REQUIRED_MESSAGES[info.field_name])
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        # mask punctuation does not count
        if len(unmask_phone(v)) < MIN_PHONE_DIGITS:
            raise PydanticCustomError("required", PHONE_REQUIRED)
        return v

    @field_validator("schedule_at", mode="before")
    @classmethod
    def coerce_schedule_at(cls, v):
        if v is None or v == "":
            raise PydanticCustomError("required", DATE_REQUIRED)
        if isinstance(v, datetime):
            return v.date()
        return v

    @field_validator("schedule_at")
    @classmethod
    def validate_schedule_at(cls, v, info: ValidationInfo):
        if v < _now(info).date():
            raise PydanticCustomError("date_in_past", DATE_IN_PAST)
        return v

    @field_validator("time")
    @classmethod
    def validate_time(cls, v, info: ValidationInfo):
        if len(v) < 1:
            raise PydanticCustomError("required", TIME_REQUIRED)
        if v not in TIME_OPTIONS:
            raise PydanticCustomError("time_unavailable", TIME_UNAVAILABLE)
        # schedule_at is only present here when it passed its own validation
        day = info.data.get("schedule_at")
        if day is not None and combine_date_and_time(day, v) <= _now(info):
            raise PydanticCustomError("time_in_past", TIME_IN_PAST)
        return v

    def to_payload(self) -> "AppointmentPayload":
        return AppointmentPayload(
            tutor_name=self.tutor_name,
            pet_name=self.pet_name,
            phone=unmask_phone(self.phone),
            description=self.description,
            schedule_at=combine_date_and_time(self.schedule_at, self.time),
        )


class AppointmentPayload(BaseModel):
    tutor_name: str = Field(..., description="Name of the pet's tutor")
    pet_name: str = Field(..., description="Name of the pet")
    phone: str = Field(..., description="Phone number, masked or digits only")
    description: str = Field(..., description="Service description")
    schedule_at: datetime = Field(..., description="Appointment day and time (local)")

    @field_validator("schedule_at")
    @classmethod
    def to_local_naive(cls, v):
        # stored and compared as naive local time
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class AppointmentFormSubmission(BaseModel):
    """Raw form values as typed by staff; ``appointment_id`` selects edit mode."""

    appointment_id: Optional[int] = Field(None, description="Appointment being edited, if any")
    values: Dict[str, Any] = Field(default_factory=dict, description="Form values keyed by field name")


class AppointmentResponse(BaseModel):
    id: int
    tutor_name: str
    pet_name: str
    phone: str
    description: str
    schedule_at: datetime
    time: str
    created_at: datetime
    updated_at: datetime


def field_errors(errors: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """Map pydantic error dicts to ``{field: first message}``."""
    out: Dict[str, str] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOC_SOURCES:
            loc = loc[1:]
        field = loc[0] if loc else "__root__"
        if field in out:
            continue
        if err.get("type") in _CUSTOM_ERROR_TYPES:
            out[field] = err["msg"]
        else:
            out[field] = REQUIRED_MESSAGES.get(field, err.get("msg", ""))
    return out


def validate_appointment_form(
    values: Mapping[str, Any], now: Optional[datetime] = None
) -> Tuple[Optional[AppointmentFormValues], Dict[str, str]]:
    """Validate raw form values.

    Returns the parsed form and an empty dict, or ``None`` and the per-field
    error messages.
    """
    try:
        form = AppointmentFormValues.model_validate(dict(values), context={"now": now or datetime.now()})
    except ValidationError as e:
        return None, field_errors(e.errors())
    return form, {}


def payload_to_form_values(payload: AppointmentPayload) -> Dict[str, Any]:
    day, time_value = split_schedule(payload.schedule_at)
    if payload.schedule_at.second or payload.schedule_at.microsecond:
        # not on a slot boundary
        time_value = f"{time_value}:{payload.schedule_at.second:02d}"
    return {
        "tutor_name": payload.tutor_name,
        "pet_name": payload.pet_name,
        "phone": payload.phone,
        "description": payload.description,
        "schedule_at": day,
        "time": time_value,
    }


def validate_appointment_payload(payload: AppointmentPayload, now: Optional[datetime] = None) -> Dict[str, str]:
    """Apply the form rules to an already merged payload."""
    _, errors = validate_appointment_form(payload_to_form_values(payload), now=now)
    return errors
