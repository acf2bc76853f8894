# barbastore/data.py

import itertools
import threading
from dataclasses import dataclass
from typing import Optional

from .domain import Service, Staff

SERVICES = [
    Service(
        id=1,
        name="Corte de Cabello Clásico",
        description="Un corte de precisión adaptado a tu estilo, finalizado con un peinado profesional.",
        price=25,
        duration=30,
    ),
    Service(
        id=2,
        name="Afeitado con Toalla Caliente",
        description="La experiencia de afeitado definitiva con navaja, aceites y toallas calientes.",
        price=30,
        duration=45,
    ),
    Service(
        id=3,
        name="Arreglo de Barba",
        description="Define y dale forma a tu barba con un recorte experto, perfilado y aceite para barba.",
        price=20,
        duration=30,
    ),
    Service(
        id=4,
        name="Paquete Completo",
        description="El servicio premium: corte de cabello, arreglo de barba y afeitado con toalla caliente.",
        price=65,
        duration=75,
    ),
]

STAFF = [
    Staff(id=1, name="Javier 'El Navaja' Ríos", specialty="Afeitados clásicos y fade",
          image_url="https://picsum.photos/seed/javier/400/400"),
    Staff(id=2, name="Carlos 'El Estilista' Mendoza", specialty="Cortes modernos y peinados",
          image_url="https://picsum.photos/seed/carlos/400/400"),
    Staff(id=3, name="Luis 'El Barbas' González", specialty="Diseño y cuidado de barbas",
          image_url="https://picsum.photos/seed/luis/400/400"),
]

# (id, name, email, password, role); barbers share their id with their staff profile
SEED_USERS = [
    (999, "Admin", "admin@barbastore.com", "admin123", "admin"),
    (1, "Javier 'El Navaja' Ríos", "javier@barbastore.com", "password123", "barber"),
    (2, "Carlos 'El Estilista' Mendoza", "carlos@barbastore.com", "password123", "barber"),
    (3, "Luis 'El Barbas' González", "luis@barbastore.com", "password123", "barber"),
    (101, "Andrés Cliente", "andres@cliente.com", "password123", "client"),
]


class Catalog:
    """Services and barbers. Services never change; barbers can be added or removed by an admin."""

    def __init__(self, services=None, staff=None):
        self._services = {s.id: s for s in (services if services is not None else SERVICES)}
        self._staff = {s.id: s for s in (staff if staff is not None else STAFF)}
        self._lock = threading.Lock()

    def list_services(self) -> list[Service]:
        return list(self._services.values())

    def get_service(self, service_id: int) -> Optional[Service]:
        return self._services.get(service_id)

    def list_staff(self) -> list[Staff]:
        with self._lock:
            return list(self._staff.values())

    def get_staff(self, staff_id: int) -> Optional[Staff]:
        with self._lock:
            return self._staff.get(staff_id)

    def add_staff(self, staff_id: int, name: str, specialty: str, image_url: str = "") -> Staff:
        with self._lock:
            if staff_id in self._staff:
                raise KeyError(f"Staff {staff_id} already exists")
            staff = Staff(id=staff_id, name=name, specialty=specialty, image_url=image_url)
            self._staff[staff_id] = staff
            return staff

    def remove_staff(self, staff_id: int) -> bool:
        with self._lock:
            return self._staff.pop(staff_id, None) is not None


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    password_hash: str
    role: str  # "client", "barber" or "admin"


class UserDirectory:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1000)

    def next_id(self) -> int:
        with self._lock:
            while True:
                candidate = next(self._ids)
                if candidate not in self._users:
                    return candidate

    def add(self, user: User) -> User:
        with self._lock:
            if user.id in self._users:
                raise KeyError(f"User {user.id} already exists")
            if any(u.email == user.email for u in self._users.values()):
                raise KeyError(f"Email {user.email} already registered")
            self._users[user.id] = user
            return user

    def get(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    def remove(self, user_id: int) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None
