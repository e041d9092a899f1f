"""
services/grade_reports.py

Fluxo do boletim temporário compartilhável:
- ReportIssuer: grava um snapshot imutável das notas do aluno com validade fixa
- ReportRenderer: lê o snapshot pelo reportId público, com expiração preguiçosa

Expirado e inexistente são indistinguíveis para quem consulta.
"""

import logging
import re
import secrets
import time
from typing import Any, Callable, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import settings
from models.grade_reports import GradeReport as GradeReportModel
from models.grades import GradeEntry as GradeEntryModel
from schemas.grade_reports import ReportSnapshot, ReportSummaryEnvelope
from services.errors import InternalError, ReportNotFound
from services.grade_aggregation import parse_records, summarize
from services.identity import Identity, lookup_profile
from services.report_store import ReportStore

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000
REPORT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,128}$")

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def new_report_id() -> str:
    # 24 bytes → 32 caracteres URL-safe
    return secrets.token_urlsafe(24)


def report_url(report_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL}/report/{report_id}"


class ReportIssuer:
    def __init__(
        self,
        db: Session,
        clock: Clock = now_ms,
        ttl_days: int = None,
        trust_client_grades: bool = None,
    ):
        self.db = db
        self.store = ReportStore(db)
        self.clock = clock
        self.ttl_ms = (ttl_days or settings.REPORT_TTL_DAYS) * DAY_MS
        self.trust_client_grades = (
            settings.REPORT_TRUST_CLIENT_GRADES if trust_client_grades is None else trust_client_grades
        )

    def _authoritative_grades(self, uid: str) -> List[dict]:
        try:
            rows = (
                self.db.query(GradeEntryModel)
                .filter(GradeEntryModel.student_uid == uid)
                .order_by(GradeEntryModel.id)
                .all()
            )
        except SQLAlchemyError:
            logger.exception(f"Falha ao carregar notas oficiais de {uid}")
            raise InternalError("Erro ao criar relatório")
        return [
            {
                "id": r.id,
                "subject": r.subject,
                "bimester": r.bimester,
                "grade": r.grade,
                "date": r.date,
            }
            for r in rows
        ]

    def create_report(self, identity: Identity, grades: Sequence[Dict[str, Any]]) -> GradeReportModel:
        profile = lookup_profile(self.db, identity)

        if self.trust_client_grades:
            # itens já validados; gravados como vieram (chaves e tipos originais)
            grades_data = [dict(g) for g in grades]
        else:
            grades_data = self._authoritative_grades(identity.uid)

        created_at = self.clock()
        report = GradeReportModel(
            id=new_report_id(),
            student_uid=identity.uid,
            student_name=profile.name,
            student_cpf=profile.cpf,
            student_grade=profile.turma,
            grades_data=grades_data,
            created_at=created_at,
            expires_at=created_at + self.ttl_ms,
        )
        self.store.put(report)
        logger.info(f"Boletim temporário {report.id} criado para {identity.uid} ({len(grades_data)} notas)")
        return report


class ReportRenderer:
    def __init__(self, db: Session, clock: Clock = now_ms):
        self.store = ReportStore(db)
        self.clock = clock

    def get_report(self, report_id: str) -> ReportSnapshot:
        if not report_id or not REPORT_ID_PATTERN.match(report_id):
            raise ReportNotFound()

        report = self.store.get(report_id)
        if report is None:
            raise ReportNotFound()

        # válido até expires_at inclusive
        if self.clock() > report.expires_at:
            logger.info(f"Boletim {report_id} expirado; removendo")
            self.store.delete(report)
            raise ReportNotFound()

        return ReportSnapshot.from_model(report)

    def get_summary(self, report_id: str) -> ReportSummaryEnvelope:
        snapshot = self.get_report(report_id)
        return build_summary(snapshot)


def build_summary(snapshot: ReportSnapshot) -> ReportSummaryEnvelope:
    try:
        records = parse_records(snapshot.grades_data)
    except ValueError:
        # snapshot gravado fora do formato esperado; não renderiza parcialmente
        logger.exception(f"Boletim {snapshot.report_id} com notas inválidas")
        raise InternalError("Erro ao carregar relatório")
    return ReportSummaryEnvelope(
        report_id=snapshot.report_id,
        student_name=snapshot.student_name,
        student_cpf=snapshot.student_cpf,
        student_grade=snapshot.student_grade,
        expires_at=snapshot.expires_at,
        summary=summarize(records),
    )
