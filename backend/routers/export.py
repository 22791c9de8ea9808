import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from core.dependencies import get_store
from schemas.report import AuditReport
from services.export_service import build_audit_report, export_to_excel, export_to_csv, export_to_pdf
from services.record_store import RecordStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["export"])


async def _get_report(audit_id: int, store: RecordStore) -> AuditReport:
    audit = await store.get_audit(audit_id).once()
    if not audit:
        raise HTTPException(status_code=404, detail="Audit not found")
    questions = await store.get_all_questions().once()
    answers = await store.get_answers_for_audit_once(audit_id)
    return build_audit_report(audit, questions, answers)


@router.post("/audits/{audit_id}/export/excel")
async def export_excel(audit_id: int, store: RecordStore = Depends(get_store)):
    report = await _get_report(audit_id, store)
    content = export_to_excel(report)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=audit_report_{audit_id}.xlsx"},
    )


@router.post("/audits/{audit_id}/export/csv")
async def export_csv_route(audit_id: int, store: RecordStore = Depends(get_store)):
    report = await _get_report(audit_id, store)
    content = export_to_csv(report)
    return Response(
        content=content, media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=audit_report_{audit_id}.csv"},
    )


@router.post("/audits/{audit_id}/export/pdf")
async def export_pdf_route(audit_id: int, store: RecordStore = Depends(get_store)):
    report = await _get_report(audit_id, store)
    content = export_to_pdf(report)
    logger.info("Exported PDF report for audit %s", audit_id)
    return Response(
        content=content, media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=audit_report_{audit_id}.pdf"},
    )
