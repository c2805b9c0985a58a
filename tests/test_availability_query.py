"""
Tests for slot query tagging, normalization and staleness.
"""

from __future__ import annotations

from datetime import date

import pytest

from booking.application.exceptions import SlotFetchError
from booking.application.use_cases.availability_query import AvailabilityQueryClient
from fakes import BOOKING_DATE, DENTIST, FakeAvailabilityService


@pytest.mark.asyncio
async def test_fetch_returns_normalized_slot_set():
    """Fetched times come back as a normalized SlotSet for the query's key."""
    service = FakeAvailabilityService()
    service.slots[(DENTIST.id, BOOKING_DATE)] = ["10:00", "09:00", "09:00"]
    client = AvailabilityQueryClient(service)

    query = client.issue(DENTIST.id, BOOKING_DATE)
    slot_set = await client.fetch(query)

    assert slot_set.times == ("09:00", "10:00")
    assert slot_set.key == (DENTIST.id, BOOKING_DATE)
    assert service.slot_calls == [(DENTIST.id, BOOKING_DATE)]


@pytest.mark.asyncio
async def test_backend_failure_becomes_slot_fetch_error():
    """Any backend exception surfaces as SlotFetchError."""
    service = FakeAvailabilityService()
    service.slots[(DENTIST.id, BOOKING_DATE)] = RuntimeError("connection reset")
    client = AvailabilityQueryClient(service)

    with pytest.raises(SlotFetchError):
        await client.fetch(client.issue(DENTIST.id, BOOKING_DATE))


@pytest.mark.asyncio
async def test_malformed_payload_becomes_slot_fetch_error():
    """Unparseable time values surface as SlotFetchError."""
    service = FakeAvailabilityService()
    service.slots[(DENTIST.id, BOOKING_DATE)] = ["09:00", "later"]
    client = AvailabilityQueryClient(service)

    with pytest.raises(SlotFetchError):
        await client.fetch(client.issue(DENTIST.id, BOOKING_DATE))


def test_only_latest_query_is_current():
    """Issuing a new query makes the previous one stale."""
    client = AvailabilityQueryClient(FakeAvailabilityService())
    first = client.issue(DENTIST.id, date(2025, 6, 10))
    second = client.issue(DENTIST.id, date(2025, 6, 11))

    assert second.sequence > first.sequence
    assert client.current is second
    assert not client.is_current(first, (DENTIST.id, date(2025, 6, 10)))
    assert client.is_current(second, (DENTIST.id, date(2025, 6, 11)))


def test_query_must_match_draft_key():
    """A query is current only for the draft key it was issued for."""
    client = AvailabilityQueryClient(FakeAvailabilityService())
    query = client.issue(DENTIST.id, date(2025, 6, 10))

    assert not client.is_current(query, (DENTIST.id, date(2025, 6, 12)))
    assert not client.is_current(query, ("d2", date(2025, 6, 10)))


def test_abandon_and_close_make_queries_stale():
    """Abandoned or closed clients treat every query as stale."""
    client = AvailabilityQueryClient(FakeAvailabilityService())
    query = client.issue(DENTIST.id, BOOKING_DATE)
    client.abandon()
    assert not client.is_current(query, query.key)

    query = client.issue(DENTIST.id, BOOKING_DATE)
    client.close()
    assert not client.is_current(query, query.key)
