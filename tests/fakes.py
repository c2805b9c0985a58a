"""
Fakes and fixed data shared by the booking workflow tests.
"""

from __future__ import annotations

import asyncio
from datetime import date
from zoneinfo import ZoneInfo

from booking.application.dto.booking_request import BookingRequestDTO
from booking.application.ports.availability import AvailabilityServicePort
from booking.domain.entities.provider import Provider, Service

TODAY = date(2025, 6, 1)
BOOKING_DATE = date(2025, 6, 10)
UTC = ZoneInfo("UTC")

CLEANING = Service(id="s1", name="Cleaning", duration_minutes=30, price=200)
WHITENING = Service(id="s2", name="Whitening", duration_minutes=60, price=1500)

DENTIST = Provider(
    id="d1",
    name="Dr. Amrani",
    specialty="General dentistry",
    phone="0522000000",
    address="1 Rue Atlas",
    city="Rabat",
    services=(CLEANING, WHITENING),
)

OTHER_DENTIST = Provider(
    id="d2",
    name="Dr. Idrissi",
    specialty="Orthodontics",
    phone="0522111111",
    address="5 Avenue Hassan II",
    city="Fes",
    services=(WHITENING,),
)


class FakeAvailabilityService(AvailabilityServicePort):
    """
    In-memory backend whose answers can be held back until released,
    so tests decide the order in which responses arrive.
    """

    def __init__(self, providers: list[Provider] | None = None) -> None:
        self.providers = {p.id: p for p in (providers if providers is not None else [DENTIST, OTHER_DENTIST])}
        self.slots: dict[tuple[str, date], list[str] | Exception] = {}
        self.slot_calls: list[tuple[str, date]] = []
        self.booking_calls: list[BookingRequestDTO] = []
        self.booking_error: Exception | None = None
        self.booking_gate: asyncio.Event | None = None
        self.gated = False
        self._gates: dict[tuple[str, date], asyncio.Event] = {}

    async def get_provider(self, provider_id: str) -> Provider | None:
        return self.providers.get(provider_id)

    async def get_available_slots(self, provider_id: str, day: date) -> list[str]:
        self.slot_calls.append((provider_id, day))
        if self.gated:
            await self._gate(provider_id, day).wait()
        result = self.slots.get((provider_id, day), [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def book_appointment(self, request: BookingRequestDTO) -> str | None:
        self.booking_calls.append(request)
        if self.booking_gate is not None:
            await self.booking_gate.wait()
        if self.booking_error is not None:
            raise self.booking_error
        return f"ref-{len(self.booking_calls)}"

    def release(self, provider_id: str, day: date) -> None:
        self._gate(provider_id, day).set()

    def _gate(self, provider_id: str, day: date) -> asyncio.Event:
        if (provider_id, day) not in self._gates:
            self._gates[(provider_id, day)] = asyncio.Event()
        return self._gates[(provider_id, day)]
