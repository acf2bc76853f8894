# barbastore/schemas.py

from datetime import date, time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .domain import Appointment, AppointmentStatus, Service, Staff


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    client = "client"
    barber = "barber"
    admin = "admin"


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=8, max_length=72)


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str = ""
    price: float
    duration: int

    def to_domain(self) -> Service:
        return Service(**self.model_dump())


class StaffPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty: str
    image_url: str = ""

    def to_domain(self) -> Staff:
        return Staff(**self.model_dump())


class StaffCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=8, max_length=72)
    specialty: str
    image_url: str = ""


class AppointmentCreate(BaseModel):
    service_id: int
    staff_id: int
    date: date
    time: time
    client_phone: str
    client_name: Optional[str] = None  # defaults to the caller's name


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: int
    service: ServicePublic
    staff_id: int
    date: date
    time: time
    client_name: str
    client_phone: str
    status: AppointmentStatus

    def to_domain(self) -> Appointment:
        return Appointment(
            id=self.id,
            client_id=self.client_id,
            service=self.service.to_domain(),
            staff_id=self.staff_id,
            date=self.date,
            time=self.time,
            client_name=self.client_name,
            client_phone=self.client_phone,
            status=self.status,
        )


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class AvailabilityResponse(BaseModel):
    staff_id: int
    date: date
    service_id: int
    duration: int
    available_starts: List[str]
