from __future__ import annotations

import logging
import unicodedata
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile

from crewdesk.constants import today
from crewdesk.models.crew import CrewMember
from crewdesk.services.crew_service import CrewService
from crewdesk.services.job_order_service import stage_change
from web.deps import get_crew_service, get_invoice_service, get_job_order_service
from web.schemas import CrewMemberIn, InvoiceRequest, JobOrderBatch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/crew")


def _member_json(member: CrewMember) -> dict:
    data = member.model_dump(mode="json")
    data["avatar_url"] = CrewService.avatar_or_placeholder(member)
    return data


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 name in RFC 5987 form."""
    stem = filename.removesuffix(".pdf")
    ascii_stem = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
    ascii_stem = " ".join(ascii_stem.split()).rstrip("-") or "Invoice"
    return f"attachment; filename=\"{ascii_stem}.pdf\"; filename*=UTF-8''{quote(filename, safe='')}"


def _get_member_or_404(crew_service: CrewService, crew_uuid: str) -> CrewMember:
    member = crew_service.get_crew_member_by_uuid(crew_uuid)
    if member is None:
        logger.warning("Crew member not found: uuid=%s", crew_uuid)
        raise HTTPException(status_code=404, detail="Crew member not found")
    return member


@router.get("/")
async def crew_list(request: Request):
    crew_service = get_crew_service(request)
    members = crew_service.list_crew_members()
    logger.info("GET /crew/ - %d members", len(members))
    return [_member_json(m) for m in members]


@router.post("/", status_code=201)
async def crew_create(request: Request, body: CrewMemberIn):
    logger.info("POST /crew/ - name=%s", body.full_name)
    crew_service = get_crew_service(request)
    try:
        member = crew_service.create_crew_member(body.full_name, role=body.role, status=body.status, type=body.type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _member_json(member)


@router.get("/roster")
async def crew_roster(request: Request):
    crew_service = get_crew_service(request)
    roster = crew_service.list_roster(today())
    logger.info("GET /crew/roster - %d members", len(roster))
    return [
        {
            "member": _member_json(entry.member),
            "project_names": entry.project_names,
            "teammate_ids": entry.teammate_ids,
        }
        for entry in roster
    ]


@router.get("/{crew_uuid}")
async def crew_detail(request: Request, crew_uuid: str):
    crew_service = get_crew_service(request)
    return _member_json(_get_member_or_404(crew_service, crew_uuid))


@router.put("/{crew_uuid}")
async def crew_update(request: Request, crew_uuid: str, body: CrewMemberIn):
    logger.info("PUT /crew/%s", crew_uuid)
    crew_service = get_crew_service(request)
    member = _get_member_or_404(crew_service, crew_uuid)
    updated = member.model_copy(update=body.model_dump())
    try:
        result = crew_service.update_crew_member(updated)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _member_json(result)


@router.post("/{crew_uuid}/avatar")
async def crew_avatar_upload(request: Request, crew_uuid: str):
    logger.info("POST /crew/%s/avatar", crew_uuid)
    crew_service = get_crew_service(request)
    member = _get_member_or_404(crew_service, crew_uuid)

    form = await request.form()
    upload = form.get("file")
    if not isinstance(upload, UploadFile) or not upload.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    data = await upload.read()

    try:
        url = crew_service.upload_avatar(member, upload.filename, data, upload.content_type or "")
    except ValueError as exc:
        logger.warning("Avatar rejected for crew=%s: %s", crew_uuid, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"avatar_url": url}


@router.get("/{crew_uuid}/job-orders")
async def job_order_list(request: Request, crew_uuid: str):
    member = _get_member_or_404(get_crew_service(request), crew_uuid)
    job_orders = get_job_order_service(request).list_for_crew(member.id)
    return [j.model_dump(mode="json") for j in job_orders]


@router.put("/{crew_uuid}/job-orders")
async def job_order_save(request: Request, crew_uuid: str, body: JobOrderBatch):
    logger.info("PUT /crew/%s/job-orders - %d changes", crew_uuid, len(body.job_orders))
    member = _get_member_or_404(get_crew_service(request), crew_uuid)
    job_order_service = get_job_order_service(request)

    staged = job_order_service.list_for_crew(member.id)
    try:
        for change in body.job_orders:
            staged = stage_change(staged, change.id, rate=change.rate, currency=change.currency, unit=change.unit)
    except ValueError as exc:
        logger.warning("Job order change rejected for crew=%s: %s", crew_uuid, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    changed_ids = {change.id for change in body.job_orders}
    try:
        saved = job_order_service.save_job_orders([j for j in staged if j.id in changed_ids])
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [j.model_dump(mode="json") for j in saved]


@router.post("/{crew_uuid}/invoices")
async def invoice_generate(request: Request, crew_uuid: str, body: InvoiceRequest):
    logger.info("POST /crew/%s/invoices - %s..%s", crew_uuid, body.start_date, body.end_date)
    member = _get_member_or_404(get_crew_service(request), crew_uuid)
    invoice_service = get_invoice_service(request)

    try:
        run = invoice_service.generate_invoice(member, body.start_date, body.end_date)
    except ValueError as exc:
        logger.warning("Invoice rejected for crew=%s: %s", crew_uuid, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    headers = {
        "Content-Disposition": _content_disposition(run.filename),
        "X-Invoice-Saved": "true" if run.saved else "false",
        "X-Invoice-UUID": run.invoice.uuid,
    }
    if run.error:
        headers["X-Invoice-Error"] = run.error
    return Response(content=run.pdf, media_type="application/pdf", headers=headers)


@router.get("/{crew_uuid}/invoices")
async def invoice_list(request: Request, crew_uuid: str):
    member = _get_member_or_404(get_crew_service(request), crew_uuid)
    invoices = get_invoice_service(request).list_invoices(member.id)
    return [i.model_dump(mode="json") for i in invoices]
