# barbastore/container.py

import logging
from dataclasses import dataclass

from .auth import hash_password
from .availability import BusinessHours
from .config import Settings
from .data import SEED_USERS, Catalog, User, UserDirectory
from .db import make_engine
from .lifecycle import AppointmentManager
from .store import AppointmentStore, MemoryAppointmentStore, SqlAppointmentStore

logger = logging.getLogger(__name__)


@dataclass
class Container:
    catalog: Catalog
    users: UserDirectory
    store: AppointmentStore
    manager: AppointmentManager
    business_hours: BusinessHours
    slot_minutes: int


def build_store(settings: Settings) -> AppointmentStore:
    provider = settings.STORE_PROVIDER.lower()
    if provider == "memory":
        return MemoryAppointmentStore()
    if provider == "sql":
        return SqlAppointmentStore(make_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO))
    raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")


def seed_users(users: UserDirectory) -> None:
    for user_id, name, email, password, role in SEED_USERS:
        users.add(User(id=user_id, name=name, email=email, password_hash=hash_password(password), role=role))


def build_container(settings: Settings) -> Container:
    business_hours = BusinessHours(open=settings.BUSINESS_OPEN, close=settings.BUSINESS_CLOSE)
    store = build_store(settings)
    users = UserDirectory()
    seed_users(users)

    logger.info(
        "Booking container ready (store=%s, hours=%s-%s, slot=%smin)",
        settings.STORE_PROVIDER,
        business_hours.open.strftime("%H:%M"),
        business_hours.close.strftime("%H:%M"),
        settings.SLOT_MINUTES,
    )
    return Container(
        catalog=Catalog(),
        users=users,
        store=store,
        manager=AppointmentManager(store, business_hours=business_hours),
        business_hours=business_hours,
        slot_minutes=settings.SLOT_MINUTES,
    )
