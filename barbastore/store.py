# barbastore/store.py

import threading
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from sqlmodel import Session, select

from .domain import Appointment, AppointmentStatus, Service
from .models import AppointmentRecord


class AppointmentStore(ABC):
    """Mapping from appointment id to appointment record.

    Stores do no locking of their own beyond what keeps single reads and
    writes consistent; check-then-insert atomicity is the manager's job.
    """

    @abstractmethod
    def add(self, appointment: Appointment) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, appointment_id: str) -> Optional[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def update(self, appointment: Appointment) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_staff(self, staff_id: int, on_date: Optional[date] = None) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def list_for_client(self, client_id: int) -> list[Appointment]:
        raise NotImplementedError


class MemoryAppointmentStore(AppointmentStore):
    def __init__(self) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._lock = threading.Lock()

    def add(self, appointment: Appointment) -> None:
        with self._lock:
            if appointment.id in self._appointments:
                raise KeyError(f"Duplicate appointment id {appointment.id}")
            self._appointments[appointment.id] = appointment

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with self._lock:
            return self._appointments.get(appointment_id)

    def update(self, appointment: Appointment) -> None:
        with self._lock:
            if appointment.id not in self._appointments:
                raise KeyError(appointment.id)
            # records are frozen, so readers only ever see a whole old or new record
            self._appointments[appointment.id] = appointment

    def list_for_staff(self, staff_id: int, on_date: Optional[date] = None) -> list[Appointment]:
        with self._lock:
            snapshot = list(self._appointments.values())
        return [
            a for a in snapshot
            if a.staff_id == staff_id and (on_date is None or a.date == on_date)
        ]

    def list_for_client(self, client_id: int) -> list[Appointment]:
        with self._lock:
            snapshot = list(self._appointments.values())
        return [a for a in snapshot if a.client_id == client_id]


def _to_record(appointment: Appointment) -> AppointmentRecord:
    return AppointmentRecord(
        id=appointment.id,
        client_id=appointment.client_id,
        staff_id=appointment.staff_id,
        date=appointment.date,
        start_time=appointment.time,
        service_id=appointment.service.id,
        service_name=appointment.service.name,
        service_description=appointment.service.description,
        service_price=appointment.service.price,
        service_duration=appointment.service.duration,
        client_name=appointment.client_name,
        client_phone=appointment.client_phone,
        status=appointment.status.value,
    )


def _from_record(record: AppointmentRecord) -> Appointment:
    return Appointment(
        id=record.id,
        client_id=record.client_id,
        service=Service(
            id=record.service_id,
            name=record.service_name,
            description=record.service_description,
            price=record.service_price,
            duration=record.service_duration,
        ),
        staff_id=record.staff_id,
        date=record.date,
        time=record.start_time,
        client_name=record.client_name,
        client_phone=record.client_phone,
        status=AppointmentStatus(record.status),
    )


class SqlAppointmentStore(AppointmentStore):
    def __init__(self, engine) -> None:
        self._engine = engine

    def add(self, appointment: Appointment) -> None:
        with Session(self._engine) as session:
            session.add(_to_record(appointment))
            session.commit()

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with Session(self._engine) as session:
            record = session.get(AppointmentRecord, appointment_id)
            return _from_record(record) if record is not None else None

    def update(self, appointment: Appointment) -> None:
        with Session(self._engine) as session:
            record = session.get(AppointmentRecord, appointment.id)
            if record is None:
                raise KeyError(appointment.id)
            record.status = appointment.status.value
            session.add(record)
            session.commit()

    def list_for_staff(self, staff_id: int, on_date: Optional[date] = None) -> list[Appointment]:
        stmt = select(AppointmentRecord).where(AppointmentRecord.staff_id == staff_id)
        if on_date is not None:
            stmt = stmt.where(AppointmentRecord.date == on_date)
        stmt = stmt.order_by(AppointmentRecord.date, AppointmentRecord.start_time)
        with Session(self._engine) as session:
            return [_from_record(r) for r in session.exec(stmt).all()]

    def list_for_client(self, client_id: int) -> list[Appointment]:
        stmt = (
            select(AppointmentRecord)
            .where(AppointmentRecord.client_id == client_id)
            .order_by(AppointmentRecord.date, AppointmentRecord.start_time)
        )
        with Session(self._engine) as session:
            return [_from_record(r) for r in session.exec(stmt).all()]
