# barbastore/domain.py

from dataclasses import dataclass, replace
from datetime import date as Date, time as Time
from enum import Enum
from typing import Optional

from .core import Interval, make_interval
from .exceptions import IllegalTransition, InvalidDraft


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"
    cancelled = "cancelled"


# Statuses that occupy the barber's time
ACTIVE_STATUSES = frozenset({AppointmentStatus.pending, AppointmentStatus.confirmed})

TRANSITIONS = {
    AppointmentStatus.pending: frozenset({
        AppointmentStatus.confirmed,
        AppointmentStatus.rejected,
        AppointmentStatus.cancelled,
    }),
    AppointmentStatus.confirmed: frozenset({AppointmentStatus.cancelled}),
    AppointmentStatus.rejected: frozenset(),
    AppointmentStatus.cancelled: frozenset(),
}


def parse_status(value) -> AppointmentStatus:
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise IllegalTransition(f"Unknown appointment status: {value!r}")


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return new in TRANSITIONS[current]


@dataclass(frozen=True)
class Service:
    id: int
    name: str
    price: float
    duration: int  # minutes
    description: str = ""


@dataclass(frozen=True)
class Staff:
    id: int
    name: str
    specialty: str
    image_url: str = ""


@dataclass(frozen=True)
class Client:
    id: int
    name: str


@dataclass(frozen=True)
class Appointment:
    id: str
    client_id: int
    service: Service
    staff_id: int
    date: Date
    time: Time
    client_name: str
    client_phone: str
    status: AppointmentStatus = AppointmentStatus.pending

    @property
    def interval(self) -> Interval:
        return make_interval(self.date, self.time, self.service.duration)

    @property
    def occupies_time(self) -> bool:
        return self.status in ACTIVE_STATUSES


@dataclass(frozen=True)
class BookingDraft:
    """An appointment under construction.

    Fields are filled in one step at a time. Only a draft for which
    ``missing_fields()`` is empty can be turned into an appointment.
    """

    service: Optional[Service] = None
    staff: Optional[Staff] = None
    date: Optional[Date] = None
    time: Optional[Time] = None
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None

    def with_service(self, service: Service) -> "BookingDraft":
        return replace(self, service=service)

    def with_staff(self, staff: Staff) -> "BookingDraft":
        return replace(self, staff=staff)

    def with_slot(self, day: Date, start_time: Time) -> "BookingDraft":
        return replace(self, date=day, time=start_time)

    def with_client(self, client: Client, phone: str, name: Optional[str] = None) -> "BookingDraft":
        return replace(self, client_id=client.id, client_name=name or client.name, client_phone=phone)

    def missing_fields(self) -> list[str]:
        missing = []
        for name in ("service", "staff", "date", "time", "client_id", "client_name", "client_phone"):
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing

    def to_appointment(self, appointment_id: str) -> Appointment:
        missing = self.missing_fields()
        if missing:
            raise InvalidDraft("Missing booking fields: " + ", ".join(missing))
        return Appointment(
            id=appointment_id,
            client_id=self.client_id,
            service=self.service,
            staff_id=self.staff.id,
            date=self.date,
            time=self.time,
            client_name=self.client_name.strip(),
            client_phone=self.client_phone.strip(),
            status=AppointmentStatus.pending,
        )
