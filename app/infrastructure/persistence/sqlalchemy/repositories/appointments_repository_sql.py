from datetime import datetime
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Appointment
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentData,
    AppointmentDto,
)


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            tutor_name=a.tutor_name,
            pet_name=a.pet_name,
            phone=a.phone,
            description=a.description,
            schedule_at=a.schedule_at,
            created_at=a.created_at,
            updated_at=a.updated_at,
        )

    def _commit(self, appt: Appointment) -> Appointment:
        try:
            self.session.add(appt)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(appt)
        return appt

    def find_conflict(self, schedule_at: datetime, exclude_id: Optional[int] = None) -> bool:
        query = select(Appointment).where(Appointment.schedule_at == schedule_at)
        if exclude_id is not None:
            query = query.where(Appointment.id != exclude_id)
        return self.session.exec(query).first() is not None

    def create(self, data: AppointmentData) -> AppointmentDto:
        appt = Appointment(
            tutor_name=data.tutor_name,
            pet_name=data.pet_name,
            phone=data.phone,
            description=data.description,
            schedule_at=data.schedule_at,
        )
        return self._appt_to_dto(self._commit(appt))

    def update(self, appointment_id: int, data: AppointmentData) -> Optional[AppointmentDto]:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        if not a:
            return None
        a.tutor_name = data.tutor_name
        a.pet_name = data.pet_name
        a.phone = data.phone
        a.description = data.description
        a.schedule_at = data.schedule_at
        a.updated_at = datetime.utcnow()
        return self._appt_to_dto(self._commit(a))

    def get_by_id(self, appointment_id: int) -> Optional[AppointmentDto]:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        return self._appt_to_dto(a) if a else None

    def list_between(self, start: datetime, end: datetime) -> List[AppointmentDto]:
        rows = self.session.exec(
            select(Appointment)
            .where(Appointment.schedule_at >= start)
            .where(Appointment.schedule_at < end)
            .order_by(Appointment.schedule_at)
        ).all()
        return [self._appt_to_dto(r) for r in rows]
