# barbastore/flow.py

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime, time
from enum import Enum
from typing import Callable, Optional

import httpx

from .availability import BusinessHours, SlotSequence, available_slots
from .data import Catalog
from .domain import Appointment, BookingDraft, Client, Service, Staff
from .exceptions import BackendRejected, BackendUnavailable, InvalidDraft, InvalidFlowStep, SlotConflict
from .lifecycle import AppointmentManager
from .schemas import AppointmentPublic, StaffPublic

logger = logging.getLogger(__name__)


class BookingBackend(ABC):
    @abstractmethod
    async def get_staff_list(self) -> list[Staff]:
        raise NotImplementedError

    @abstractmethod
    async def get_appointments_for_staff(self, staff_id: int) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    async def create_appointment(self, draft: BookingDraft) -> Appointment:
        """Submit a complete draft.

        Raises SlotConflict, InvalidDraft, BackendRejected or BackendUnavailable.
        """
        raise NotImplementedError


class LocalBookingBackend(BookingBackend):
    """Calls the manager in process, off the event loop."""

    def __init__(self, manager: AppointmentManager, catalog: Catalog) -> None:
        self._manager = manager
        self._catalog = catalog

    async def get_staff_list(self) -> list[Staff]:
        return await asyncio.to_thread(self._catalog.list_staff)

    async def get_appointments_for_staff(self, staff_id: int) -> list[Appointment]:
        return await asyncio.to_thread(self._manager.list_by_staff, staff_id)

    async def create_appointment(self, draft: BookingDraft) -> Appointment:
        return await asyncio.to_thread(self._manager.create_appointment, draft)


class HttpBookingBackend(BookingBackend):
    """Talks to the booking API over HTTP."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = headers

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, headers=self._headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Booking API unreachable", extra={"reason": str(exc)})
            raise BackendUnavailable(f"Booking API unreachable: {exc}") from exc

        if response.status_code == 409:
            raise SlotConflict(_detail(response))
        if response.status_code == 422:
            raise InvalidDraft(_detail(response))
        if response.is_client_error:
            logger.warning(
                "Booking API refused request",
                extra={"reason": f"{response.status_code} {_detail(response)}"},
            )
            raise BackendRejected(_detail(response), status_code=response.status_code)
        if response.is_error:
            logger.warning(
                "Booking API error",
                extra={"reason": f"{response.status_code} {_detail(response)}"},
            )
            raise BackendUnavailable(f"Booking API returned {response.status_code}")
        return response

    async def get_staff_list(self) -> list[Staff]:
        response = await self._request("GET", "/barbers")
        return [StaffPublic.model_validate(item).to_domain() for item in response.json()]

    async def get_appointments_for_staff(self, staff_id: int) -> list[Appointment]:
        response = await self._request("GET", f"/barbers/{staff_id}/appointments")
        return [AppointmentPublic.model_validate(item).to_domain() for item in response.json()]

    async def create_appointment(self, draft: BookingDraft) -> Appointment:
        missing = draft.missing_fields()
        if missing:
            raise InvalidDraft("Missing booking fields: " + ", ".join(missing))

        payload = {
            "service_id": draft.service.id,
            "staff_id": draft.staff.id,
            "date": draft.date.isoformat(),
            "time": draft.time.strftime("%H:%M:%S"),
            "client_phone": draft.client_phone,
            "client_name": draft.client_name,
        }
        response = await self._request("POST", "/appointments", json=payload)
        return AppointmentPublic.model_validate(response.json()).to_domain()


def _detail(response: httpx.Response) -> str:
    try:
        return str(response.json().get("detail", response.text))
    except ValueError:
        return response.text


class BookingStep(str, Enum):
    SERVICE = "SERVICE"
    BARBER = "BARBER"
    DATETIME = "DATETIME"
    CONFIRM = "CONFIRM"
    SUCCESS = "SUCCESS"


class BookingFlow:
    """One client's walk through service -> barber -> date/time -> confirm.

    Backend calls suspend the transition that made them. Going back or
    resetting bumps a generation counter, and any result that comes back
    for an older generation is dropped instead of touching the draft.
    """

    def __init__(
        self,
        backend: BookingBackend,
        client: Client,
        business_hours: BusinessHours,
        slot_minutes: int = 30,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._backend = backend
        self._client = client
        self._business_hours = business_hours
        self._slot_minutes = slot_minutes
        self._clock = clock

        self._generation = 0
        self._step = BookingStep.SERVICE
        self._draft = BookingDraft()
        self._staff_options: list[Staff] = []
        self._staff_appointments: Optional[list[Appointment]] = None
        self._appointment: Optional[Appointment] = None
        # generation of the booking currently being submitted
        self._submitting: Optional[int] = None

    @property
    def step(self) -> BookingStep:
        return self._step

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def staff_options(self) -> list[Staff]:
        return list(self._staff_options)

    @property
    def appointment(self) -> Optional[Appointment]:
        return self._appointment

    def _expect(self, *steps: BookingStep) -> None:
        if self._step not in steps:
            expected = ", ".join(s.value for s in steps)
            raise InvalidFlowStep(f"Expected step {expected}, flow is at {self._step.value}")

    def _is_current(self, generation: int, what: str) -> bool:
        if generation == self._generation:
            return True
        logger.debug("Discarding stale %s result", what, extra={"step": self._step.value})
        return False

    # -- SERVICE -------------------------------------------------------------

    def select_service(self, service: Service) -> None:
        self._expect(BookingStep.SERVICE)
        self._draft = self._draft.with_service(service)
        self._step = BookingStep.BARBER

    # -- BARBER --------------------------------------------------------------

    async def load_staff(self) -> list[Staff]:
        self._expect(BookingStep.BARBER)
        generation = self._generation
        staff = await self._backend.get_staff_list()
        if self._is_current(generation, "staff list"):
            self._staff_options = list(staff)
        return list(staff)

    async def select_staff(self, staff: Staff) -> None:
        self._expect(BookingStep.BARBER)
        generation = self._generation
        previous = self._draft

        self._draft = self._draft.with_staff(staff)
        self._staff_appointments = None
        self._step = BookingStep.DATETIME

        try:
            appointments = await self._backend.get_appointments_for_staff(staff.id)
        except (BackendUnavailable, BackendRejected):
            if self._is_current(generation, "failed agenda"):
                # stay on barber selection, keep the chosen service
                self._draft = previous
                self._step = BookingStep.BARBER
            raise

        if self._is_current(generation, "agenda"):
            self._staff_appointments = list(appointments)

    # -- DATETIME ------------------------------------------------------------

    async def refresh_availability(self) -> None:
        self._expect(BookingStep.DATETIME)
        generation = self._generation
        appointments = await self._backend.get_appointments_for_staff(self._draft.staff.id)
        if self._is_current(generation, "agenda"):
            self._staff_appointments = list(appointments)

    def available_slots(self, day: date) -> SlotSequence:
        self._expect(BookingStep.DATETIME)
        if self._staff_appointments is None:
            raise InvalidFlowStep("Barber agenda is not loaded yet")
        return available_slots(
            self._draft.staff.id,
            day,
            self._draft.service.duration,
            self._staff_appointments,
            self._business_hours,
            self._slot_minutes,
            now=self._clock,
        )

    def select_slot(self, day: date, start_time: time) -> None:
        if start_time not in self.available_slots(day):
            raise InvalidDraft(f"{day} {start_time:%H:%M} is not available")
        self._draft = self._draft.with_slot(day, start_time)
        self._step = BookingStep.CONFIRM

    # -- CONFIRM -------------------------------------------------------------

    async def confirm(self, phone: str, name: Optional[str] = None) -> Optional[Appointment]:
        """Submit the booking.

        Returns the created appointment, or None when the user navigated
        away before the answer arrived. A second call while one is in
        flight raises InvalidFlowStep. On SlotConflict the flow goes back
        to DATETIME, tries to reload the agenda, and the conflict is
        re-raised either way.
        """
        self._expect(BookingStep.CONFIRM)
        if self._submitting == self._generation:
            raise InvalidFlowStep("Booking is already being submitted")
        draft = self._draft.with_client(self._client, phone, name)
        missing = draft.missing_fields()
        if missing:
            raise InvalidDraft("Missing booking fields: " + ", ".join(missing))

        generation = self._generation
        self._submitting = generation
        try:
            appointment = await self._backend.create_appointment(draft)
        except SlotConflict:
            if self._is_current(generation, "conflict"):
                logger.info("Slot taken while confirming, back to slot selection",
                            extra={"staff_id": draft.staff.id, "step": BookingStep.DATETIME.value})
                self._draft = replace(self._draft, date=None, time=None)
                self._step = BookingStep.DATETIME
                self._staff_appointments = None
                try:
                    await self.refresh_availability()
                except (BackendUnavailable, BackendRejected) as exc:
                    # agenda stays unloaded until refresh_availability() succeeds
                    logger.warning("Could not reload agenda after conflict",
                                   extra={"staff_id": draft.staff.id, "reason": str(exc)})
            raise
        finally:
            if self._submitting == generation:
                self._submitting = None

        if not self._is_current(generation, "booking"):
            return None

        self._draft = draft
        self._appointment = appointment
        self._step = BookingStep.SUCCESS
        return appointment

    # -- navigation ----------------------------------------------------------

    def go_back(self) -> None:
        self._expect(BookingStep.BARBER, BookingStep.DATETIME, BookingStep.CONFIRM)
        self._generation += 1

        if self._step == BookingStep.BARBER:
            self._draft = replace(self._draft, service=None)
            self._step = BookingStep.SERVICE
        elif self._step == BookingStep.DATETIME:
            self._draft = replace(self._draft, staff=None)
            self._staff_appointments = None
            self._step = BookingStep.BARBER
        else:
            self._draft = replace(self._draft, date=None, time=None)
            self._step = BookingStep.DATETIME

    def reset(self) -> None:
        self._generation += 1
        self._step = BookingStep.SERVICE
        self._draft = BookingDraft()
        self._staff_options = []
        self._staff_appointments = None
        self._appointment = None
