from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool
import logging

from ..database import get_session
from ..application.ports.appointment_mutations import MutationResult
from ..application.services.appointment_form import AppointmentForm, SubmitOutcome
from ..application.ports.appointments_repo import AppointmentDto
from ..application.services.appointments_service import AppointmentsService, APPOINTMENT_NOT_FOUND
from ..application.services.time_slots import TIME_OPTIONS
from ..exceptions import create_error_response, create_success_response
from ..infrastructure.mutations.service_mutations import ServiceAppointmentMutations
from ..infrastructure.notifications.toast_notifier import ToastNotifier
from ..infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from ..schemas.appointments.appointment import AppointmentFormSubmission, AppointmentPayload, AppointmentResponse
from ..schemas.common.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointments_service(session: Session = Depends(get_session)) -> AppointmentsService:
    return AppointmentsService(repo=SqlAppointmentsRepository(session))


def get_toast_notifier() -> ToastNotifier:
    return ToastNotifier()


def get_appointment_form(
    appt_service: AppointmentsService = Depends(get_appointments_service),
    notifier: ToastNotifier = Depends(get_toast_notifier),
) -> AppointmentForm:
    return AppointmentForm(
        mutations=ServiceAppointmentMutations(appt_service),
        notifier=notifier,
    )


def _to_response(a: AppointmentDto) -> dict:
    return AppointmentResponse(
        id=a.id,
        tutor_name=a.tutor_name,
        pet_name=a.pet_name,
        phone=a.phone,
        description=a.description,
        schedule_at=a.schedule_at,
        time=a.schedule_at.strftime("%H:%M"),
        created_at=a.created_at,
        updated_at=a.updated_at,
    ).model_dump(mode="json")


def _unwrap(result: MutationResult) -> dict:
    if result.error:
        raise HTTPException(status_code=result.status_code, detail=result.error)
    return create_success_response({"appointment": _to_response(result.appointment)})


@router.get("/time-slots", response_model=ApiResponse)
def list_time_slots():
    return create_success_response({"time_slots": list(TIME_OPTIONS)})


@router.get("", response_model=ApiResponse)
def list_appointments(
    day: Optional[date] = Query(None, alias="date", description="Day to list (YYYY-MM-DD), defaults to today"),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    day = day or date.today()
    appts = appt_service.list_for_day(day)
    return create_success_response({
        "date": day.isoformat(),
        "appointments": [_to_response(a) for a in appts],
    })


@router.get("/{appointment_id}", response_model=ApiResponse)
def get_appointment(
    appointment_id: int,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    a = appt_service.get(appointment_id)
    if not a:
        raise HTTPException(status_code=404, detail=APPOINTMENT_NOT_FOUND)
    return create_success_response({"appointment": _to_response(a)})


@router.post("", response_model=ApiResponse, status_code=201)
def create_appointment(
    payload: AppointmentPayload,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _unwrap(appt_service.create(payload))


@router.put("/{appointment_id}", response_model=ApiResponse)
def update_appointment(
    appointment_id: int,
    payload: AppointmentPayload,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _unwrap(appt_service.update(appointment_id, payload))


@router.post("/form", response_model=ApiResponse)
async def submit_appointment_form(
    submission: AppointmentFormSubmission,
    appt_service: AppointmentsService = Depends(get_appointments_service),
    form: AppointmentForm = Depends(get_appointment_form),
    notifier: ToastNotifier = Depends(get_toast_notifier),
):
    if submission.appointment_id is not None:
        appt = await run_in_threadpool(appt_service.get, submission.appointment_id)
        if not appt:
            raise HTTPException(status_code=404, detail=APPOINTMENT_NOT_FOUND)
        form.set_appointment(appt)

    form.open()
    for name, value in submission.values.items():
        try:
            form.set_field(name, value)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    outcome = await form.submit()
    toast = notifier.latest()
    data = {
        "outcome": outcome.value,
        "errors": form.state.errors,
        "is_open": form.state.is_open,
        "toast": {"kind": toast.kind, "message": toast.message} if toast else None,
    }
    if outcome is SubmitOutcome.INVALID:
        first = next(iter(form.state.errors.values()))
        return JSONResponse(status_code=422, content=create_error_response(first, data=data))
    if outcome is SubmitOutcome.FAILED:
        return JSONResponse(status_code=400, content=create_error_response(toast.message, data=data))
    return create_success_response(data)
