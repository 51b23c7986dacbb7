import logging

from starlette.concurrency import run_in_threadpool

from ...application.ports.appointment_mutations import AppointmentMutations, MutationResult
from ...application.services.appointments_service import AppointmentsService
from ...schemas.appointments.appointment import AppointmentPayload

logger = logging.getLogger(__name__)


class ServiceAppointmentMutations(AppointmentMutations):
    """Runs the synchronous appointments service off the event loop."""

    def __init__(self, service: AppointmentsService) -> None:
        self._service = service

    async def create(self, payload: AppointmentPayload) -> MutationResult:
        result = await run_in_threadpool(self._service.create, payload)
        if not result.ok:
            logger.warning(f"Create appointment rejected: {result.error}")
        return result

    async def update(self, appointment_id: int, payload: AppointmentPayload) -> MutationResult:
        result = await run_in_threadpool(self._service.update, appointment_id, payload)
        if not result.ok:
            logger.warning(f"Update of appointment {appointment_id} rejected: {result.error}")
        return result
