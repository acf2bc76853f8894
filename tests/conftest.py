import os

# cheap hashing and a process-lifetime store for the whole test session
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORE_PROVIDER", "memory")

from datetime import date, time

import pytest
from fastapi.testclient import TestClient

from barbastore.availability import BusinessHours
from barbastore.config import Settings
from barbastore.container import build_container
from barbastore.data import SERVICES, STAFF, Catalog
from barbastore.deps import get_container
from barbastore.domain import BookingDraft, Client
from barbastore.lifecycle import AppointmentManager
from barbastore.main import app
from barbastore.store import MemoryAppointmentStore

HAIRCUT = SERVICES[0]  # 30 min
SHAVE = SERVICES[1]  # 45 min
FULL_PACKAGE = SERVICES[3]  # 75 min
JAVIER, CARLOS, LUIS = STAFF
ANDRES = Client(id=101, name="Andrés Cliente")


def make_draft(service, staff, day, start, client=ANDRES, phone="600111222"):
    return (
        BookingDraft()
        .with_service(service)
        .with_staff(staff)
        .with_slot(day, start)
        .with_client(client, phone)
    )


@pytest.fixture
def hours():
    return BusinessHours(open=time(9, 0), close=time(18, 0))


@pytest.fixture
def store():
    return MemoryAppointmentStore()


@pytest.fixture
def manager(store, hours):
    return AppointmentManager(store, business_hours=hours)


@pytest.fixture
def catalog():
    return Catalog()


@pytest.fixture
def container():
    return build_container(Settings(STORE_PROVIDER="memory"))


@pytest.fixture
def api(container):
    app.dependency_overrides[get_container] = lambda: container
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def login(client, email, password="password123"):
    response = client.post("/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


# a Monday well in the future, so "today" filtering never kicks in
FUTURE_DAY = date(2031, 1, 6)
