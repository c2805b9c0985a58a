from __future__ import annotations

import pytest

from booking.application.use_cases.workflow import BookingWorkflow
from fakes import BOOKING_DATE, DENTIST, TODAY, UTC, FakeAvailabilityService


@pytest.fixture
def service() -> FakeAvailabilityService:
    fake = FakeAvailabilityService()
    fake.slots[(DENTIST.id, BOOKING_DATE)] = ["09:30", "09:00"]
    return fake


@pytest.fixture
def make_workflow(service: FakeAvailabilityService):
    def _make(provider_id: str = DENTIST.id) -> BookingWorkflow:
        return BookingWorkflow(
            provider_id=provider_id,
            service=service,
            timezone=UTC,
            today=lambda: TODAY,
            session_id="test-session",
        )

    return _make
