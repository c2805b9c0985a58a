from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from booking.application.dto.booking_request import BookingRequestDTO
from booking.domain.entities.provider import Provider


class AvailabilityServicePort(ABC):
    @abstractmethod
    async def get_provider(self, provider_id: str) -> Provider | None:
        """Load a provider profile. Returns None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    async def get_available_slots(self, provider_id: str, day: date) -> list[str]:
        """
        Return the free start times ("HH:MM") for a provider on a date.

        An empty list means no availability. Raises SlotFetchError when the
        query cannot be answered.
        """
        raise NotImplementedError

    @abstractmethod
    async def book_appointment(self, request: BookingRequestDTO) -> str | None:
        """
        Create the appointment. Returns the booking reference if the backend
        provides one. Raises SubmissionError with a reason on rejection.
        """
        raise NotImplementedError
