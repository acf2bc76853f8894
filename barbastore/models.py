# barbastore/models.py

from datetime import date as Date, time

from sqlmodel import SQLModel, Field


class AppointmentRecord(SQLModel, table=True):
    __tablename__ = "appointment"

    id: str = Field(primary_key=True)

    client_id: int = Field(index=True)
    staff_id: int = Field(index=True)
    date: Date = Field(index=True)
    start_time: time

    # service captured by value at booking time
    service_id: int
    service_name: str
    service_description: str = ""
    service_price: float
    service_duration: int

    client_name: str
    client_phone: str
    status: str = "pending"
