import base64
from datetime import datetime
from pathlib import Path
from typing import Dict, Any

import qrcode
import qrcode.image.svg
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings
from schemas.grade_reports import GradeStatus
from services.grade_aggregation import BIMESTERS, classify
from utils.formatting import BRT, format_cpf, format_date_ms, format_grade, format_turma

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

STATUS_CSS = {
    GradeStatus.APPROVED: "approved",
    GradeStatus.RECOVERY: "recovery",
    GradeStatus.FAILED: "failed",
}


def qr_code_data_uri(url: str) -> str:
    """QR code em SVG (data URI), embutido direto no HTML do PDF."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        border=1,
        image_factory=qrcode.image.svg.SvgPathImage,
    )
    qr.add_data(url)
    qr.make(fit=True)
    svg = qr.make_image().to_string()
    return "data:image/svg+xml;base64," + base64.b64encode(svg).decode("ascii")


class PDFService:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        # ambiente de templates
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["grade"] = format_grade
        self.env.filters["turma"] = format_turma
        self.env.filters["cpf"] = format_cpf
        self.env.filters["date_ms"] = format_date_ms
        self.env.filters["status_css"] = lambda status: STATUS_CSS.get(status, "empty")
        self.env.filters["status_class"] = lambda grade: STATUS_CSS[classify(grade)]
        self.env.globals["bimesters"] = BIMESTERS
        self.env.globals["school_name"] = settings.SCHOOL_NAME

    def render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """Renderiza o template e devolve o HTML"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """Converte HTML em PDF"""
        from weasyprint import HTML  # depende de Pango no sistema; carregado só quando usado

        base_url = settings.WEASYPRINT_FONT_DIR or str(self.template_dir)
        return HTML(string=html_content, base_url=base_url).write_pdf()

    def report_context(self, envelope, report_url: str) -> Dict[str, Any]:
        return {
            "report": envelope,
            "summary": envelope.summary,
            "report_url": report_url,
            "school_year": datetime.now(tz=BRT).year,
        }

    def render_report_html(self, envelope, report_url: str) -> str:
        """Página pública do boletim"""
        return self.render_template("report_viewer.html", self.report_context(envelope, report_url))

    def render_error_html(self) -> str:
        return self.render_template("report_error.html", {})

    def generate_grade_report_pdf(self, envelope, report_url: str) -> bytes:
        """Boletim em PDF com QR code apontando para a página pública"""
        data = self.report_context(envelope, report_url)
        data["qr_code"] = qr_code_data_uri(report_url)
        html = self.render_template("grade_report_pdf.html", data)
        return self._html_to_pdf(html)


pdf_service = PDFService()


def get_pdf_service() -> PDFService:
    return pdf_service
