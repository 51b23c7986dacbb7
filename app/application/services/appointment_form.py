"""Headless appointment form.

Holds the values typed by staff, the inline error per field, the dialog
visibility and the submission status. ``submit()`` validates, picks the
create or update mutation from the form mode, and reports the result through
the notifier.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Union
import logging

from ..ports.appointment_mutations import AppointmentMutations, MutationResult
from ..ports.appointments_repo import AppointmentDto
from ..ports.notifier import Notifier
from .time_slots import split_schedule
from app.schemas.appointments.appointment import AppointmentPayload, FORM_FIELDS, validate_appointment_form
from app.utils import mask_phone

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Agendamento criado com sucesso!"
UPDATED_MESSAGE = "Agendamento atualizado com sucesso!"


class FormStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class SubmitOutcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass(frozen=True)
class CreateMode:
    pass


@dataclass(frozen=True)
class EditMode:
    appointment_id: int


FormMode = Union[CreateMode, EditMode]


def mode_for(appointment: Optional[AppointmentDto]) -> FormMode:
    if appointment is not None and appointment.id:
        return EditMode(appointment_id=appointment.id)
    return CreateMode()


def empty_values() -> Dict[str, Any]:
    return {
        "tutor_name": "",
        "pet_name": "",
        "phone": "",
        "description": "",
        "schedule_at": None,
        "time": "",
    }


def values_from(appointment: Optional[AppointmentDto]) -> Dict[str, Any]:
    if appointment is None:
        return empty_values()
    day, time_value = split_schedule(appointment.schedule_at)
    return {
        "tutor_name": appointment.tutor_name,
        "pet_name": appointment.pet_name,
        "phone": mask_phone(appointment.phone),
        "description": appointment.description,
        "schedule_at": day,
        "time": time_value,
    }


@dataclass(frozen=True)
class FormState:
    values: Dict[str, Any] = field(default_factory=empty_values)
    errors: Dict[str, str] = field(default_factory=dict)
    touched: FrozenSet[str] = frozenset()
    status: FormStatus = FormStatus.IDLE
    is_open: bool = False
    submit_count: int = 0
    outcome: Optional[SubmitOutcome] = None

    @property
    def is_submitting(self) -> bool:
        return self.status is FormStatus.SUBMITTING

    def is_invalid(self, name: str) -> bool:
        return name in self.errors

    def error_for(self, name: str) -> Optional[str]:
        return self.errors.get(name)


class AppointmentForm:
    def __init__(
        self,
        mutations: AppointmentMutations,
        notifier: Notifier,
        appointment: Optional[AppointmentDto] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._mutations = mutations
        self._notifier = notifier
        self._clock = clock
        self._appointment: Optional[AppointmentDto] = None
        self.state = FormState()
        self.set_appointment(appointment)

    @property
    def appointment(self) -> Optional[AppointmentDto]:
        return self._appointment

    @property
    def mode(self) -> FormMode:
        return mode_for(self._appointment)

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self.state.values)

    # dialog

    def open(self) -> None:
        self.set_open(True)

    def close(self) -> None:
        self.set_open(False)

    def set_open(self, is_open: bool) -> None:
        self.state = replace(self.state, is_open=is_open)

    # fields

    def set_appointment(self, appointment: Optional[AppointmentDto]) -> None:
        """Rehydrate every field from ``appointment`` when the reference changes."""
        if appointment is self._appointment:
            return
        self._appointment = appointment
        self.state = replace(
            self.state,
            values=values_from(appointment),
            errors={},
            touched=frozenset(),
            submit_count=0,
            outcome=None,
        )

    def set_field(self, name: str, value: Any) -> None:
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown appointment field: {name}")
        if name == "phone":
            value = mask_phone(str(value)) if value else ""
        values = {**self.state.values, name: value}
        errors = self.state.errors
        if self.state.submit_count:
            # after the first submit attempt errors follow every edit
            _, errors = validate_appointment_form(values, now=self._clock())
        self.state = replace(self.state, values=values, errors=errors, touched=self.state.touched | {name})

    def reset(self) -> None:
        self.state = replace(
            self.state,
            values=empty_values(),
            errors={},
            touched=frozenset(),
            submit_count=0,
        )

    # submission

    async def submit(self) -> Optional[SubmitOutcome]:
        """Validate and send the form.

        Returns ``None`` when a submission is already in flight.
        """
        if self.state.is_submitting:
            logger.debug("Submit ignored: a submission is already in flight")
            return None

        form, errors = validate_appointment_form(self.state.values, now=self._clock())
        self.state = replace(
            self.state,
            errors=errors,
            touched=frozenset(FORM_FIELDS),
            submit_count=self.state.submit_count + 1,
        )
        if form is None:
            self.state = replace(self.state, outcome=SubmitOutcome.INVALID)
            return SubmitOutcome.INVALID

        mode = self.mode
        self.state = replace(self.state, status=FormStatus.SUBMITTING, outcome=None)
        try:
            result = await self._dispatch(mode, form.to_payload())
        except Exception:
            self.state = replace(self.state, status=FormStatus.IDLE)
            raise

        if result.error:
            self._notifier.error(result.error)
            self.state = replace(self.state, status=FormStatus.IDLE, outcome=SubmitOutcome.FAILED)
            return SubmitOutcome.FAILED

        self._notifier.success(UPDATED_MESSAGE if isinstance(mode, EditMode) else CREATED_MESSAGE)
        self.state = FormState(is_open=False, outcome=SubmitOutcome.SUCCESS)
        return SubmitOutcome.SUCCESS

    async def _dispatch(self, mode: FormMode, payload: AppointmentPayload) -> MutationResult:
        if isinstance(mode, EditMode):
            logger.info(f"Updating appointment {mode.appointment_id}")
            return await self._mutations.update(mode.appointment_id, payload)
        logger.info("Creating appointment")
        return await self._mutations.create(payload)
