from sqlalchemy import create_engine               # criação do engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings               # ✅ configuração carregada do .env


def _engine_kwargs(url: str) -> dict:
    # SQLite é usado em dev/testes; em memória precisa de uma única conexão compartilhada
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


# ✅ engine criado a partir da URL efetiva
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

# ✅ fábrica de sessões
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ classe base dos modelos (declarativa)
Base = declarative_base()


def get_db():
    """Sessão por requisição (dependência do FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # importa os modelos para registrá-los no metadata antes do create_all
    from models import grade_reports, grades, students  # noqa: F401

    Base.metadata.create_all(bind=engine)
