# barbastore/routers/appointments_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from barbastore.availability import available_slots
from barbastore.container import Container
from barbastore.data import User
from barbastore.deps import get_container, get_current_user, require_role
from barbastore.domain import AppointmentStatus, BookingDraft, Client
from barbastore.exceptions import (
    AppointmentNotFound,
    IllegalTransition,
    InvalidDraft,
    InvalidDuration,
    SlotConflict,
)
from barbastore.schemas import AppointmentCreate, AppointmentPublic, StatusUpdate

router = APIRouter(
    tags=["appointments"],
)


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    container: Container = Depends(get_container),
    current_user: User = Depends(get_current_user),
):
    require_role(current_user, "client")

    # 1) Resolve catalog entries
    service = container.catalog.get_service(appt.service_id)
    if service is None:
        raise HTTPException(status_code=422, detail="Service not available")
    staff = container.catalog.get_staff(appt.staff_id)
    if staff is None:
        raise HTTPException(status_code=422, detail="Barber not available")

    # 2) The start must be one the availability endpoint could offer
    slots = available_slots(
        staff.id,
        appt.date,
        service.duration,
        container.manager.list_by_staff(staff.id),
        container.business_hours,
        container.slot_minutes,
    )
    if not slots.is_candidate(appt.time):
        raise HTTPException(
            status_code=422,
            detail=f"Start time must be a future {container.slot_minutes}-minute slot within business hours",
        )

    # 3) Build the draft, the client is the logged-in user
    draft = (
        BookingDraft()
        .with_service(service)
        .with_staff(staff)
        .with_slot(appt.date, appt.time)
        .with_client(Client(id=current_user.id, name=current_user.name), appt.client_phone, appt.client_name)
    )

    # 4) Create, the manager re-checks overlaps atomically
    try:
        return container.manager.create_appointment(draft)
    except SlotConflict as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (InvalidDraft, InvalidDuration) as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.put("/appointments/{appt_id}/status", response_model=AppointmentPublic)
def update_appointment_status(
    appt_id: str,
    update: StatusUpdate,
    container: Container = Depends(get_container),
    current_user: User = Depends(get_current_user),
):
    # 1) Find the appointment
    try:
        target = container.manager.get(appt_id)
    except AppointmentNotFound:
        raise HTTPException(status_code=404, detail="Appointment not found")

    # 2) Authorization: admin, the barber it belongs to, or the client cancelling it
    if current_user.role == "barber":
        if current_user.id != target.staff_id:
            raise HTTPException(status_code=403, detail="Forbidden")
    elif current_user.role == "client":
        if current_user.id != target.client_id or update.status != AppointmentStatus.cancelled:
            raise HTTPException(status_code=403, detail="Forbidden")
    elif current_user.role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")

    # 3) Apply the transition
    try:
        return container.manager.update_status(appt_id, update.status)
    except AppointmentNotFound:
        raise HTTPException(status_code=404, detail="Appointment not found")
    except IllegalTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.get("/clients/{client_id}/appointments", response_model=List[AppointmentPublic])
def list_client_appointments(
    client_id: int,
    container: Container = Depends(get_container),
    current_user: User = Depends(get_current_user),
):
    if current_user.role == "client" and current_user.id != client_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return container.manager.list_by_client(client_id)
