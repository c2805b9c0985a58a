"""
Tests for the HTTP availability adapter against a mocked transport.
"""

from __future__ import annotations

import json

import httpx
import pytest

from booking.application.dto.booking_request import BookingRequestDTO
from booking.application.exceptions import AvailabilityServiceError, SlotFetchError, SubmissionError
from booking.infrastructure.availability.http_service import HttpAvailabilityService
from fakes import BOOKING_DATE

BASE_URL = "https://availability.test/api"

PROVIDER_PAYLOAD = {
    "id": "d1",
    "name": "Dr. Amrani",
    "specialty": "General dentistry",
    "phone": "0522000000",
    "address": "1 Rue Atlas",
    "city": "Rabat",
    "email": "",
    "services": [
        {"id": "s1", "name": "Cleaning", "duration": 30, "price": 200},
        {"id": "s1", "name": "Duplicate", "duration": 30, "price": 200},
        {"id": "s2", "name": "Whitening", "duration": 60, "price": 1500, "description": "Laser"},
    ],
}


def _service(handler) -> HttpAvailabilityService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpAvailabilityService(base_url=BASE_URL, api_token="secret", client=client)


def _request() -> BookingRequestDTO:
    return BookingRequestDTO(
        provider_id="d1",
        service_id="s1",
        date="2025-06-10T00:00:00+00:00",
        time="09:00",
        patient_name="Amina",
        patient_phone="0600000000",
    )


@pytest.mark.asyncio
async def test_get_provider_parses_payload():
    """Provider payloads are parsed into entities with deduplicated services."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/providers/d1"
        assert request.headers["Authorization"] == "Bearer secret"
        return httpx.Response(200, json=PROVIDER_PAYLOAD)

    provider = await _service(handler).get_provider("d1")

    assert provider is not None
    assert provider.email is None
    assert [s.id for s in provider.services] == ["s1", "s2"]
    assert provider.find_service("s2").description == "Laser"
    assert provider.find_service("s1").duration_minutes == 30


@pytest.mark.asyncio
async def test_missing_provider_returns_none():
    """A 404 means the provider does not exist."""
    service = _service(lambda request: httpx.Response(404, json={"detail": "not found"}))

    assert await service.get_provider("nope") is None


@pytest.mark.asyncio
async def test_provider_server_error_raises():
    """Server errors on provider lookup raise AvailabilityServiceError."""
    service = _service(lambda request: httpx.Response(500))

    with pytest.raises(AvailabilityServiceError):
        await service.get_provider("d1")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [["09:00", "09:30"], {"slots": ["09:00", "09:30"]}])
async def test_get_available_slots_accepts_list_or_object(body):
    """Slots may be returned as a bare list or under a slots key."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/providers/d1/slots"
        assert request.url.params["date"] == "2025-06-10"
        return httpx.Response(200, json=body)

    assert await _service(handler).get_available_slots("d1", BOOKING_DATE) == ["09:00", "09:30"]


@pytest.mark.asyncio
async def test_slot_errors_raise_slot_fetch_error():
    """HTTP errors on slot lookup raise SlotFetchError."""
    service = _service(lambda request: httpx.Response(503))

    with pytest.raises(SlotFetchError):
        await service.get_available_slots("d1", BOOKING_DATE)


@pytest.mark.asyncio
async def test_unexpected_slots_payload_raises():
    """A slots payload that is not a list raises SlotFetchError."""
    service = _service(lambda request: httpx.Response(200, json={"slots": "09:00"}))

    with pytest.raises(SlotFetchError):
        await service.get_available_slots("d1", BOOKING_DATE)


@pytest.mark.asyncio
async def test_book_appointment_posts_camel_case_payload():
    """Bookings are posted with camelCase keys and without empty optionals."""
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "apt-7"})

    reference = await _service(handler).book_appointment(_request())

    assert reference == "apt-7"
    assert seen["path"] == "/api/appointments"
    assert seen["body"]["providerId"] == "d1"
    assert seen["body"]["time"] == "09:00"
    assert "patientEmail" not in seen["body"]


@pytest.mark.asyncio
async def test_book_appointment_rejection_carries_reason():
    """The backend's error code is kept as the rejection reason."""
    service = _service(lambda request: httpx.Response(409, json={"error": "slot_taken"}))

    with pytest.raises(SubmissionError) as exc_info:
        await service.book_appointment(_request())

    assert exc_info.value.reason == "slot_taken"


@pytest.mark.asyncio
async def test_book_appointment_network_error():
    """Transport failures on booking raise SubmissionError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SubmissionError):
        await _service(handler).book_appointment(_request())


def test_base_url_is_required():
    """The HTTP adapter refuses to start without a base URL."""
    with pytest.raises(ValueError):
        HttpAvailabilityService(base_url="", client=httpx.AsyncClient())


@pytest.mark.asyncio
async def test_provider_id_is_escaped_as_one_path_segment():
    """A provider id cannot climb out of its path segment or add a query string."""
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        if request.url.path.endswith("/slots"):
            return httpx.Response(200, json=[])
        return httpx.Response(404)

    service = _service(handler)
    assert await service.get_provider("../admin/users?x=") is None
    assert await service.get_available_slots("../admin", BOOKING_DATE) == []

    assert seen[0].raw_path == b"/api/providers/..%2Fadmin%2Fusers%3Fx%3D"
    assert seen[0].query == b""
    assert seen[1].raw_path == b"/api/providers/..%2Fadmin/slots?date=2025-06-10"
