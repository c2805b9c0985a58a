from __future__ import annotations

import logging
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from booking.application.dto.booking_request import BookingRequestDTO
from booking.application.dto.provider_payload import ProviderPayloadDTO
from booking.application.exceptions import AvailabilityServiceError, SlotFetchError, SubmissionError
from booking.application.ports.availability import AvailabilityServicePort
from booking.core.config import settings
from booking.domain.entities.provider import Provider


class HttpAvailabilityService(AvailabilityServicePort):
    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.AVAILABILITY_API_BASE_URL or "").rstrip("/")
        self._api_token = api_token or settings.AVAILABILITY_API_TOKEN
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.AVAILABILITY_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("AVAILABILITY_API_BASE_URL is required for the HTTP availability service")

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def get_provider(self, provider_id: str) -> Provider | None:
        url = f"{self._base_url}/providers/{quote(provider_id, safe='')}"
        try:
            response = await self._client.get(url, headers=self._headers())
            if response.status_code == 404:
                self._logger.info("Provider not found", extra={"provider_id": provider_id})
                return None
            response.raise_for_status()
            return ProviderPayloadDTO.model_validate(response.json()).to_entity()
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            self._logger.error("Error loading provider", extra={"provider_id": provider_id, "reason": str(e)})
            raise AvailabilityServiceError(str(e)) from e

    async def get_available_slots(self, provider_id: str, day: date) -> list[str]:
        url = f"{self._base_url}/providers/{quote(provider_id, safe='')}/slots"
        try:
            response = await self._client.get(url, params={"date": day.isoformat()}, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(
                "Error finding available slots",
                extra={"provider_id": provider_id, "date": day.isoformat(), "reason": str(e)},
            )
            raise SlotFetchError(str(e)) from e

        slots = data.get("slots") if isinstance(data, dict) else data
        if not isinstance(slots, list):
            raise SlotFetchError("Unexpected slots payload")
        return [str(slot) for slot in slots]

    async def book_appointment(self, request: BookingRequestDTO) -> str | None:
        url = f"{self._base_url}/appointments"
        try:
            response = await self._client.post(url, json=request.to_payload(), headers=self._headers())
        except httpx.HTTPError as e:
            self._logger.error("Error creating booking", extra={"provider_id": request.provider_id, "reason": str(e)})
            raise SubmissionError(str(e) or "network_error") from e

        if response.status_code >= 400:
            reason = _error_reason(response)
            self._logger.error(
                "Booking request failed",
                extra={"provider_id": request.provider_id, "status": response.status_code, "reason": reason},
            )
            raise SubmissionError(reason)

        try:
            data: Any = response.json() if response.content else {}
        except ValueError:
            data = {}
        reference = None
        if isinstance(data, dict):
            reference = data.get("id") or data.get("appointmentId")
        self._logger.info("Appointment created", extra={"provider_id": request.provider_id, "reference": reference})
        return str(reference) if reference else None

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_reason(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"http_{response.status_code}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            error = error.get("message") or error.get("code")
        return str(error or body.get("detail") or body.get("message") or f"http_{response.status_code}")
    return f"http_{response.status_code}"
