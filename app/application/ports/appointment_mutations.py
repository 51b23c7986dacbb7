from dataclasses import dataclass
from typing import Optional, Protocol

from .appointments_repo import AppointmentDto
from app.schemas.appointments.appointment import AppointmentPayload


@dataclass
class MutationResult:
    error: Optional[str] = None
    appointment: Optional[AppointmentDto] = None
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return self.error is None


class AppointmentMutations(Protocol):
    async def create(self, payload: AppointmentPayload) -> MutationResult:
        ...

    async def update(self, appointment_id: int, payload: AppointmentPayload) -> MutationResult:
        ...
