import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.grade_reports import GradeReport as GradeReportModel
from services.errors import InternalError

logger = logging.getLogger(__name__)


class ReportStore:
    """Persistência dos snapshots de boletim (gravar por chave / ler por chave)."""

    def __init__(self, db: Session):
        self.db = db

    def put(self, report: GradeReportModel) -> GradeReportModel:
        try:
            self.db.add(report)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Falha ao gravar boletim {report.id}")
            raise InternalError("Erro ao criar relatório")
        return report

    def get(self, report_id: str) -> Optional[GradeReportModel]:
        try:
            return self.db.get(GradeReportModel, report_id)
        except SQLAlchemyError:
            logger.exception(f"Falha ao ler boletim {report_id}")
            raise InternalError("Erro ao buscar relatório")

    def delete(self, report: GradeReportModel) -> None:
        try:
            self.db.delete(report)
            self.db.commit()
        except SQLAlchemyError:
            # remoção preguiçosa; o script de limpeza tenta de novo depois
            self.db.rollback()
            logger.warning(f"Não foi possível remover boletim expirado {report.id}")

    def purge_expired(self, now_ms: int) -> int:
        """Remove todos os boletins com expires_at < now_ms; devolve a quantidade."""
        try:
            deleted = (
                self.db.query(GradeReportModel)
                .filter(GradeReportModel.expires_at < now_ms)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Falha na limpeza de boletins expirados")
            raise InternalError("Erro na limpeza de relatórios")
        return deleted
