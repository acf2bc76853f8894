# barbastore/lifecycle.py

import logging
import threading
import uuid
from dataclasses import replace
from typing import Callable, Optional

from .availability import BusinessHours
from .core import overlaps
from .domain import Appointment, BookingDraft, can_transition, parse_status
from .exceptions import AppointmentNotFound, IllegalTransition, InvalidDraft, SlotConflict
from .store import AppointmentStore

logger = logging.getLogger(__name__)


def new_appointment_id() -> str:
    return f"apt-{uuid.uuid4().hex[:12]}"


def _chronological(appointments: list[Appointment]) -> list[Appointment]:
    return sorted(appointments, key=lambda a: (a.date, a.time, a.id))


class AppointmentManager:
    """Owns appointment records and their status transitions.

    Creation and status updates for one barber run under that barber's
    lock, so the overlap check and the write form a single step. Reads go
    straight to the store.
    """

    def __init__(
        self,
        store: AppointmentStore,
        business_hours: Optional[BusinessHours] = None,
        id_factory: Callable[[], str] = new_appointment_id,
    ) -> None:
        self._store = store
        self._business_hours = business_hours
        self._id_factory = id_factory
        self._staff_locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, staff_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._staff_locks.get(staff_id)
            if lock is None:
                lock = self._staff_locks[staff_id] = threading.Lock()
            return lock

    def create_appointment(self, draft: BookingDraft) -> Appointment:
        # raises InvalidDraft when a field is missing
        appointment = draft.to_appointment(self._id_factory())
        requested = appointment.interval

        if self._business_hours is not None and not self._business_hours.admits(requested):
            raise InvalidDraft("Appointment must be within business hours")

        with self._lock_for(appointment.staff_id):
            for existing in self._store.list_for_staff(appointment.staff_id, on_date=appointment.date):
                if not existing.occupies_time:
                    continue
                if overlaps(requested, existing.interval):
                    logger.warning(
                        "Slot already taken",
                        extra={
                            "staff_id": appointment.staff_id,
                            "appointment_id": existing.id,
                            "reason": f"{appointment.date} {appointment.time:%H:%M}",
                        },
                    )
                    raise SlotConflict(
                        "Appointment overlaps an existing appointment",
                        conflicting_id=existing.id,
                    )
            self._store.add(appointment)

        logger.info(
            "Appointment created",
            extra={
                "appointment_id": appointment.id,
                "staff_id": appointment.staff_id,
                "client_id": appointment.client_id,
            },
        )
        return appointment

    def get(self, appointment_id: str) -> Appointment:
        appointment = self._store.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")
        return appointment

    def list_by_staff(self, staff_id: int) -> list[Appointment]:
        return _chronological(self._store.list_for_staff(staff_id))

    def list_by_client(self, client_id: int) -> list[Appointment]:
        return _chronological(self._store.list_for_client(client_id))

    def update_status(self, appointment_id: str, new_status) -> Appointment:
        target = parse_status(new_status)
        staff_id = self.get(appointment_id).staff_id

        with self._lock_for(staff_id):
            # re-read under the lock, a concurrent update may have landed
            current = self.get(appointment_id)
            if not can_transition(current.status, target):
                raise IllegalTransition(
                    f"Cannot move appointment from {current.status.value} to {target.value}"
                )
            updated = replace(current, status=target)
            self._store.update(updated)

        logger.info(
            "Appointment status changed",
            extra={"appointment_id": appointment_id, "staff_id": staff_id, "status": target.value},
        )
        return updated
