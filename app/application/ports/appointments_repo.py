from dataclasses import dataclass
from typing import List, Optional, Protocol
from datetime import datetime


@dataclass
class AppointmentDto:
    id: int
    tutor_name: str
    pet_name: str
    phone: str
    description: str
    schedule_at: datetime
    created_at: datetime
    updated_at: datetime


@dataclass
class AppointmentData:
    tutor_name: str
    pet_name: str
    phone: str
    description: str
    schedule_at: datetime


class AppointmentsRepository(Protocol):
    def find_conflict(self, schedule_at: datetime, exclude_id: Optional[int] = None) -> bool:
        ...

    def create(self, data: AppointmentData) -> AppointmentDto:
        ...

    def update(self, appointment_id: int, data: AppointmentData) -> Optional[AppointmentDto]:
        ...

    def get_by_id(self, appointment_id: int) -> Optional[AppointmentDto]:
        ...

    def list_between(self, start: datetime, end: datetime) -> List[AppointmentDto]:
        ...
