from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from starlette.datastructures import UploadFile

from crewdesk.constants import today
from crewdesk.models.event import Event
from crewdesk.services.event_service import EventService
from web.deps import get_event_service
from web.schemas import EventIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events")


def _get_event_or_404(event_service: EventService, event_uuid: str) -> Event:
    event = event_service.get_event_by_uuid(event_uuid)
    if event is None:
        logger.warning("Event not found: uuid=%s", event_uuid)
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/")
async def event_list(request: Request):
    events = get_event_service(request).list_events()
    logger.info("GET /events/ - %d events", len(events))
    return [e.model_dump(mode="json") for e in events]


@router.post("/", status_code=201)
async def event_create(request: Request, body: EventIn):
    logger.info("POST /events/ - title=%s crew=%d", body.title, len(body.crew_ids))
    event_service = get_event_service(request)
    try:
        event = event_service.create_event(
            body.title,
            body.start_date,
            body.end_date,
            job_id=body.job_id,
            level=body.level,
            notes=body.notes,
            vehicles=body.vehicles,
            crew_ids=body.crew_ids,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return event.model_dump(mode="json")


@router.get("/active")
async def event_active(request: Request):
    active = get_event_service(request).list_active(today())
    return [
        {
            "event": item.event.model_dump(mode="json"),
            "crew": [m.model_dump(mode="json") for m in item.crew],
            "current_day": item.current_day,
        }
        for item in active
    ]


@router.get("/{event_uuid}")
async def event_detail(request: Request, event_uuid: str):
    return _get_event_or_404(get_event_service(request), event_uuid).model_dump(mode="json")


@router.put("/{event_uuid}")
async def event_update(request: Request, event_uuid: str, body: EventIn):
    logger.info("PUT /events/%s", event_uuid)
    event_service = get_event_service(request)
    event = _get_event_or_404(event_service, event_uuid)
    updated = event.model_copy(update=body.model_dump())
    updated.crew_ids = list(dict.fromkeys(updated.crew_ids))
    try:
        result = event_service.update_event(updated)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return result.model_dump(mode="json")


@router.delete("/{event_uuid}", status_code=204)
async def event_delete(request: Request, event_uuid: str):
    logger.info("DELETE /events/%s", event_uuid)
    event_service = get_event_service(request)
    event = _get_event_or_404(event_service, event_uuid)
    event_service.delete_event(event.id)


@router.post("/{event_uuid}/file")
async def event_file_upload(request: Request, event_uuid: str):
    logger.info("POST /events/%s/file", event_uuid)
    event_service = get_event_service(request)
    event = _get_event_or_404(event_service, event_uuid)

    form = await request.form()
    upload = form.get("file")
    if not isinstance(upload, UploadFile) or not upload.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    data = await upload.read()

    try:
        url = event_service.attach_file(event, upload.filename, data, upload.content_type or "")
    except ValueError as exc:
        logger.warning("Event file rejected for event=%s: %s", event_uuid, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"file_url": url}
