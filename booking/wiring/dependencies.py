from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booking.core.config import settings
from booking.application.ports.availability import AvailabilityServicePort
from booking.application.ports.session_store import SessionStorePort
from booking.application.use_cases.confirmation import ConfirmationPresenter
from booking.application.use_cases.workflow import BookingWorkflow
from booking.infrastructure.availability.http_service import HttpAvailabilityService
from booking.infrastructure.availability.mock_service import MockAvailabilityService
from booking.infrastructure.store.memory_store import MemorySessionStore


_session_store: MemorySessionStore | None = None


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_availability_service() -> AvailabilityServicePort:
    logger = logging.getLogger(__name__)
    if not settings.AVAILABILITY_API_BASE_URL or settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockAvailabilityService", extra={"reason": f"ENV={settings.ENV}"})
        return MockAvailabilityService()
    logger.info("Using HttpAvailabilityService")
    return HttpAvailabilityService()


def get_session_store() -> SessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStore(session_limit=settings.SESSION_LIMIT)
    return _session_store


def get_confirmation_presenter() -> ConfirmationPresenter:
    return ConfirmationPresenter(locale=settings.DISPLAY_LOCALE)


def create_workflow(
    provider_id: str,
    service: AvailabilityServicePort | None = None,
    session_id: str | None = None,
    actor: str | None = None,
) -> BookingWorkflow:
    return BookingWorkflow(
        provider_id=provider_id,
        service=service or get_availability_service(),
        timezone=get_timezone(),
        actor=actor,
        session_id=session_id,
        locale=settings.DISPLAY_LOCALE,
    )
