from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from datetime import date, datetime, timedelta
import logging

from sqlalchemy.exc import SQLAlchemyError

from ..ports.appointments_repo import AppointmentsRepository, AppointmentData, AppointmentDto
from ..ports.appointment_mutations import MutationResult
from app.schemas.appointments.appointment import AppointmentPayload, FORM_FIELDS, validate_appointment_payload
from app.utils import unmask_phone

logger = logging.getLogger(__name__)

APPOINTMENT_NOT_FOUND = "Agendamento não encontrado"
SLOT_TAKEN = "Já existe um agendamento para este horário"
SAVE_FAILED = "Não foi possível salvar o agendamento"


def _first_error(errors: Dict[str, str]) -> str:
    for name in FORM_FIELDS:
        if name in errors:
            return errors[name]
    return next(iter(errors.values()))


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    clock: Callable[[], datetime] = field(default=datetime.now)

    def _to_data(self, payload: AppointmentPayload) -> AppointmentData:
        return AppointmentData(
            tutor_name=payload.tutor_name,
            pet_name=payload.pet_name,
            phone=unmask_phone(payload.phone),
            description=payload.description,
            schedule_at=payload.schedule_at.replace(second=0, microsecond=0),
        )

    def _validate(self, payload: AppointmentPayload) -> Optional[MutationResult]:
        errors = validate_appointment_payload(payload, now=self.clock())
        if errors:
            return MutationResult(error=_first_error(errors), status_code=400)
        return None

    def create(self, payload: AppointmentPayload) -> MutationResult:
        invalid = self._validate(payload)
        if invalid:
            return invalid

        data = self._to_data(payload)
        try:
            if self.repo.find_conflict(data.schedule_at):
                return MutationResult(error=SLOT_TAKEN, status_code=409)
            appt = self.repo.create(data)
        except SQLAlchemyError:
            logger.exception("Error creating appointment")
            return MutationResult(error=SAVE_FAILED, status_code=500)

        logger.info(f"Appointment {appt.id} created for {appt.schedule_at.isoformat()}")
        return MutationResult(appointment=appt, status_code=201)

    def update(self, appointment_id: int, payload: AppointmentPayload) -> MutationResult:
        invalid = self._validate(payload)
        if invalid:
            return invalid

        data = self._to_data(payload)
        try:
            if not self.repo.get_by_id(appointment_id):
                return MutationResult(error=APPOINTMENT_NOT_FOUND, status_code=404)
            if self.repo.find_conflict(data.schedule_at, exclude_id=appointment_id):
                return MutationResult(error=SLOT_TAKEN, status_code=409)
            appt = self.repo.update(appointment_id, data)
        except SQLAlchemyError:
            logger.exception(f"Error updating appointment {appointment_id}")
            return MutationResult(error=SAVE_FAILED, status_code=500)

        if appt is None:
            return MutationResult(error=APPOINTMENT_NOT_FOUND, status_code=404)
        logger.info(f"Appointment {appointment_id} moved to {appt.schedule_at.isoformat()}")
        return MutationResult(appointment=appt, status_code=200)

    def get(self, appointment_id: int) -> Optional[AppointmentDto]:
        return self.repo.get_by_id(appointment_id)

    def list_for_day(self, day: date) -> List[AppointmentDto]:
        start = datetime(day.year, day.month, day.day)
        return self.repo.list_between(start, start + timedelta(days=1))
