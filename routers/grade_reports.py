import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_clock, require_identity
from schemas.common import ErrorResponse
from schemas.grade_reports import (
    CreateReportRequest,
    CreateReportResponse,
    ReportEnvelope,
    ReportSummaryEnvelope,
)
from services.errors import InternalError
from services.grade_reports import ReportIssuer, ReportRenderer, build_summary, report_url
from services.identity import Identity
from services.pdf_service import PDFService, get_pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/grade-reports", tags=["Boletim temporário"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Relatório inexistente ou expirado"}}


# ==========================================================
# [CREATE] boletim temporário (exige ID token)
# ==========================================================
@router.post(
    "/create",
    response_model=CreateReportResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_grade_report(
    body: CreateReportRequest,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
    clock=Depends(get_clock),
):
    report = ReportIssuer(db, clock=clock).create_report(identity, body.grades_data)
    return CreateReportResponse(
        report_id=report.id,
        expires_at=report.expires_at,
        report_url=report_url(report.id),
    ).model_dump(by_alias=True)


# ==========================================================
# [READ] leitura pública (sem login)
# ==========================================================
@router.get("/{report_id}", response_model=ReportEnvelope, responses=NOT_FOUND)
def get_grade_report(report_id: str, db: Session = Depends(get_db), clock=Depends(get_clock)):
    snapshot = ReportRenderer(db, clock=clock).get_report(report_id)
    return ReportEnvelope(report=snapshot).model_dump(by_alias=True)


# ✅ resumo agregado (médias, situação por disciplina)
@router.get("/{report_id}/summary", response_model=ReportSummaryEnvelope, responses=NOT_FOUND)
def get_grade_report_summary(report_id: str, db: Session = Depends(get_db), clock=Depends(get_clock)):
    return ReportRenderer(db, clock=clock).get_summary(report_id).model_dump(by_alias=True)


# ✅ boletim em PDF com QR code
@router.get("/{report_id}/pdf", responses=NOT_FOUND)
def get_grade_report_pdf(
    report_id: str,
    db: Session = Depends(get_db),
    clock=Depends(get_clock),
    pdf: PDFService = Depends(get_pdf_service),
):
    snapshot = ReportRenderer(db, clock=clock).get_report(report_id)
    envelope = build_summary(snapshot)
    try:
        content = pdf.generate_grade_report_pdf(envelope, report_url(report_id))
    except (OSError, ValueError) as e:
        logger.error(f"Falha ao gerar PDF do boletim {report_id}: {e}")
        raise InternalError("Erro ao gerar PDF")

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="boletim_{report_id}.pdf"'},
    )
