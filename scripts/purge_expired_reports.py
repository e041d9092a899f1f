from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from services.grade_reports import now_ms
from services.report_store import ReportStore

def purge_expired_reports() -> int:
    """Remove em lote os boletins vencidos (a leitura já os trata como inexistentes)."""
    init_db()
    db: Session = SessionLocal()
    try:
        deleted = ReportStore(db).purge_expired(now_ms())
    finally:
        db.close()
    print(f"✅ {deleted} boletins expirados removidos")
    return deleted

if __name__ == "__main__":
    purge_expired_reports()
