from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from booking.application.dto.booking_request import BookingRequestDTO
from booking.application.exceptions import SubmissionError
from booking.application.ports.availability import AvailabilityServicePort
from booking.domain.entities.provider import Provider, Service

DEMO_PROVIDER = Provider(
    id="demo-dentist",
    name="Dr. Salma Bennani",
    specialty="Chirurgien-dentiste",
    phone="+212 5 22 00 00 00",
    address="12 Boulevard d'Anfa",
    city="Casablanca",
    email="cabinet@example.com",
    bio="Soins dentaires généraux et esthétiques.",
    services=(
        Service(id="cleaning", name="Détartrage", duration_minutes=30, price=200),
        Service(id="checkup", name="Consultation", duration_minutes=20, price=150, description="Examen complet"),
        Service(id="whitening", name="Blanchiment", duration_minutes=60, price=1500),
    ),
)


class MockAvailabilityService(AvailabilityServicePort):
    def __init__(
        self,
        providers: list[Provider] | None = None,
        start_hour: int = 9,
        end_hour: int = 17,
        step_minutes: int = 30,
    ) -> None:
        self._providers = {p.id: p for p in (providers if providers is not None else [DEMO_PROVIDER])}
        self._start_hour = start_hour
        self._end_hour = end_hour
        self._step_minutes = step_minutes
        self._bookings: dict[str, BookingRequestDTO] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def bookings(self) -> dict[str, BookingRequestDTO]:
        return dict(self._bookings)

    async def get_provider(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    async def get_available_slots(self, provider_id: str, day: date) -> list[str]:
        if provider_id not in self._providers:
            return []
        taken = self._taken_times(provider_id, day)
        slots: list[str] = []
        current = datetime.combine(day, datetime.min.time().replace(hour=self._start_hour))
        end_time = datetime.combine(day, datetime.min.time().replace(hour=self._end_hour))
        while current < end_time:
            value = current.strftime("%H:%M")
            if value not in taken:
                slots.append(value)
            current += timedelta(minutes=self._step_minutes)
        return slots

    async def book_appointment(self, request: BookingRequestDTO) -> str:
        provider = self._providers.get(request.provider_id)
        if provider is None:
            raise SubmissionError("provider_not_found")
        if provider.find_service(request.service_id) is None:
            raise SubmissionError("unknown_service")

        day = datetime.fromisoformat(request.date).date()
        if request.time in self._taken_times(request.provider_id, day):
            raise SubmissionError("slot_taken")

        reference = f"mock_booking_{len(self._bookings) + 1}"
        self._bookings[reference] = request
        self._logger.info(
            "Mock appointment created",
            extra={
                "reference": reference,
                "provider_id": request.provider_id,
                "date": day.isoformat(),
                "time": request.time,
            },
        )
        return reference

    def _taken_times(self, provider_id: str, day: date) -> set[str]:
        return {
            booking.time
            for booking in self._bookings.values()
            if booking.provider_id == provider_id and datetime.fromisoformat(booking.date).date() == day
        }
