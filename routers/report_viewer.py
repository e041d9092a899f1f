import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_clock
from services.errors import ReportServiceError
from services.grade_reports import ReportRenderer, report_url
from services.pdf_service import PDFService, get_pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/report", tags=["Boletim público"])


# ✅ página pública do boletim (link do QR code)
@router.get("/{report_id}", response_class=HTMLResponse)
def view_grade_report(
    report_id: str,
    db: Session = Depends(get_db),
    clock=Depends(get_clock),
    pages: PDFService = Depends(get_pdf_service),
):
    try:
        envelope = ReportRenderer(db, clock=clock).get_summary(report_id)
    except ReportServiceError as e:
        # cartão genérico; não distingue expirado de inexistente
        return HTMLResponse(pages.render_error_html(), status_code=e.status_code)

    return HTMLResponse(pages.render_report_html(envelope, report_url(report_id)))
