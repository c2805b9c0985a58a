import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from booking.api.v1.schemas import (
    ConfirmationSchema,
    ContactUpdateSchema,
    CreateSessionRequestSchema,
    DateSelectionSchema,
    DraftSchema,
    NoticeSchema,
    ProviderChangeSchema,
    ProviderSchema,
    ServiceSchema,
    ServiceSelectionSchema,
    SessionSchema,
    TimeSelectionSchema,
)
from booking.application.exceptions import InvalidSelectionError, WorkflowStateError
from booking.application.ports.availability import AvailabilityServicePort
from booking.application.ports.session_store import SessionStorePort
from booking.application.use_cases.confirmation import ConfirmationPresenter
from booking.application.use_cases.workflow import BookingWorkflow
from booking.application.utils.calendar_dates import today_in
from booking.core.config import settings
from booking.domain.entities.workflow_state import WorkflowStatus
from booking.wiring.dependencies import (
    create_workflow,
    get_availability_service,
    get_confirmation_presenter,
    get_session_store,
    get_timezone,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_workflow(session_id: str, store: SessionStorePort) -> BookingWorkflow:
    workflow = store.get(session_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return workflow


def _to_schema(session_id: str, workflow: BookingWorkflow, presenter: ConfirmationPresenter) -> SessionSchema:
    provider = workflow.provider
    draft = workflow.draft
    slot_set = workflow.slot_set
    confirmation = None
    if workflow.confirmation is not None:
        confirmed = workflow.confirmation
        summary = presenter.render(confirmed)
        confirmation = ConfirmationSchema(
            title=summary.title,
            message=summary.message,
            date=confirmed.date,
            date_label=summary.date_label,
            time=summary.time,
            service_name=summary.service_name,
            patient_name=summary.patient_name,
            reference=confirmed.reference,
            lines=[{"label": label, "value": value} for label, value in summary.lines],
        )

    return SessionSchema(
        session_id=session_id,
        status=workflow.status.value,
        failure=workflow.failure,
        provider=(
            ProviderSchema(
                id=provider.id,
                name=provider.name,
                specialty=provider.specialty,
                phone=provider.phone,
                address=provider.address,
                city=provider.city,
                email=provider.email,
                bio=provider.bio,
                photo=provider.photo,
                currency=settings.CURRENCY,
                services=[
                    ServiceSchema(
                        id=s.id,
                        name=s.name,
                        duration_minutes=s.duration_minutes,
                        price=s.price,
                        description=s.description,
                    )
                    for s in provider.services
                ],
            )
            if provider
            else None
        ),
        draft=DraftSchema(
            provider_id=draft.provider_id,
            service_id=draft.service_id,
            date=draft.date,
            time=draft.time,
            patient_name=draft.patient_name,
            patient_phone=draft.patient_phone,
            patient_email=draft.patient_email,
            notes=draft.notes,
        ),
        slots=list(slot_set.times) if slot_set is not None else None,
        can_submit=workflow.can_submit,
        notices=[NoticeSchema(level=n.level, code=n.code, message=n.message) for n in workflow.drain_notices()],
        confirmation=confirmation,
    )


@router.post("/sessions", response_model=SessionSchema, status_code=201)
async def create_session(
    req: CreateSessionRequestSchema,
    response: Response,
    store: SessionStorePort = Depends(get_session_store),
    service: AvailabilityServicePort = Depends(get_availability_service),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    session_id = store.new_session_id()
    workflow = create_workflow(req.provider_id, service=service, session_id=session_id)

    initial_date = req.date
    if initial_date is None and settings.PRESELECT_TODAY:
        initial_date = today_in(get_timezone())
    try:
        await workflow.load(initial_date=initial_date)
    except InvalidSelectionError as e:
        workflow.close()
        raise HTTPException(status_code=400, detail=str(e))
    store.put(session_id, workflow)

    if workflow.status is WorkflowStatus.failed:
        response.status_code = 404
    return _to_schema(session_id, workflow, presenter)


@router.get("/sessions/{session_id}", response_model=SessionSchema)
async def get_session(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    return _to_schema(session_id, workflow, presenter)


@router.put("/sessions/{session_id}/service", response_model=SessionSchema)
async def select_service(
    session_id: str,
    req: ServiceSelectionSchema,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    try:
        workflow.select_service(req.service_id)
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(session_id, workflow, presenter)


@router.put("/sessions/{session_id}/date", response_model=SessionSchema)
async def select_date(
    session_id: str,
    req: DateSelectionSchema,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    try:
        await workflow.select_date(req.date)
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(session_id, workflow, presenter)


@router.put("/sessions/{session_id}/time", response_model=SessionSchema)
async def select_time(
    session_id: str,
    req: TimeSelectionSchema,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    try:
        workflow.select_time(req.time)
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(session_id, workflow, presenter)


@router.patch("/sessions/{session_id}/contact", response_model=SessionSchema)
async def update_contact(
    session_id: str,
    req: ContactUpdateSchema,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    try:
        workflow.update_contact(**req.model_dump(exclude_unset=True))
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(session_id, workflow, presenter)


@router.put("/sessions/{session_id}/provider", response_model=SessionSchema)
async def change_provider(
    session_id: str,
    req: ProviderChangeSchema,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    try:
        await workflow.change_provider(req.provider_id)
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(session_id, workflow, presenter)


@router.post("/sessions/{session_id}/slots/retry", response_model=SessionSchema)
async def retry_slots(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    try:
        await workflow.retry_slots()
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(session_id, workflow, presenter)


@router.post("/sessions/{session_id}/submit", response_model=SessionSchema)
async def submit(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
    presenter: ConfirmationPresenter = Depends(get_confirmation_presenter),
):
    workflow = _get_workflow(session_id, store)
    await workflow.submit()
    return _to_schema(session_id, workflow, presenter)


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
) -> Response:
    workflow = store.remove(session_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    workflow.close()
    logger.info("Booking session closed", extra={"session_id": session_id})
    return Response(status_code=204)
