# barbastore/routers/barbers_routes.py

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from barbastore.auth import hash_password
from barbastore.availability import available_slots
from barbastore.container import Container
from barbastore.data import User
from barbastore.deps import get_container, get_current_user, require_role
from barbastore.exceptions import InvalidDuration
from barbastore.schemas import AppointmentPublic, AvailabilityResponse, StaffCreate, StaffPublic

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("", response_model=List[StaffPublic])
def list_barbers(container: Container = Depends(get_container)):
    return container.catalog.list_staff()


@router.post("", response_model=StaffPublic, status_code=201)
def add_barber(
    barber: StaffCreate,
    container: Container = Depends(get_container),
    current_user: User = Depends(get_current_user),
):
    require_role(current_user, "admin")

    if container.users.find_by_email(barber.email) is not None:
        raise HTTPException(status_code=409, detail="Barber email already registered")

    # the barber's login and staff profile share one id
    staff_id = container.users.next_id()
    container.users.add(User(
        id=staff_id,
        name=barber.name,
        email=barber.email,
        password_hash=hash_password(barber.password),
        role="barber",
    ))
    staff = container.catalog.add_staff(staff_id, barber.name, barber.specialty, barber.image_url)
    logger.info("Barber added", extra={"staff_id": staff_id})
    return staff


@router.delete("/{staff_id}", status_code=204)
def remove_barber(
    staff_id: int,
    container: Container = Depends(get_container),
    current_user: User = Depends(get_current_user),
):
    require_role(current_user, "admin")

    if not container.catalog.remove_staff(staff_id):
        raise HTTPException(status_code=404, detail="Barber Not Found")
    container.users.remove(staff_id)
    # their appointments stay on record
    logger.info("Barber removed", extra={"staff_id": staff_id})


@router.get("/{staff_id}/availability", response_model=AvailabilityResponse)
def barber_availability(
    staff_id: int,
    date: date,
    service_id: int,
    container: Container = Depends(get_container),
):
    if container.catalog.get_staff(staff_id) is None:
        raise HTTPException(status_code=404, detail="Barber Not Found")

    service = container.catalog.get_service(service_id)
    if service is None:
        raise HTTPException(status_code=422, detail="Service not available")

    try:
        slots = available_slots(
            staff_id,
            date,
            service.duration,
            container.manager.list_by_staff(staff_id),
            container.business_hours,
            container.slot_minutes,
        )
    except InvalidDuration as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return {
        "staff_id": staff_id,
        "date": date,
        "service_id": service.id,
        "duration": service.duration,
        "available_starts": slots.as_strings(),
    }


@router.get("/{staff_id}/appointments", response_model=List[AppointmentPublic])
def list_barber_appointments(
    staff_id: int,
    container: Container = Depends(get_container),
    current_user: User = Depends(get_current_user),
):
    # any signed-in user may read a barber's agenda, the booking flow needs it
    return container.manager.list_by_staff(staff_id)
