"""
config/settings.py

- Lê as variáveis de ambiente definidas no .env e as expõe como configuração global.
- Usa pydantic v2 / pydantic-settings v2.
- A URL do banco pode vir pronta (DB_URL) ou ser montada a partir das partes
  DB_USER/DB_PASSWORD/DB_HOST/DB_PORT/DB_NAME (MySQL). Sem nenhuma das duas,
  cai no SQLite local (desenvolvimento).
"""

from typing import List, Optional, Literal
from pydantic import field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================
    # App / runtime
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "EduTok Grade Report API"
    APP_DESCRIPTION: str = "Boletins escolares temporários e compartilháveis do EduTok"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # String separada por vírgula → List[str]
    CORS_ORIGINS: List[str] = ["http://localhost:5000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" → ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # Database
    # =========================
    DB_URL: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_NAME: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def DATABASE_URL(self) -> str:
        """
        URL efetiva do SQLAlchemy.
        Prioridade: DB_URL > partes do MySQL > SQLite local.
        """
        if self.DB_URL:
            return self.DB_URL
        if self.DB_HOST and self.DB_USER and self.DB_NAME:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD or ''}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return "sqlite:///./edutok.db"

    # =========================
    # Firebase (verificação de ID token)
    # =========================
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # JSON da service account; None → credenciais padrão
    FIREBASE_CHECK_REVOKED: bool = False

    # =========================
    # Boletim temporário
    # =========================
    REPORT_TTL_DAYS: int = 15  # mesmo prazo de resposta LGPD usado no restante do produto
    REPORT_TRUST_CLIENT_GRADES: bool = True
    PUBLIC_BASE_URL: str = "https://edutok.online"
    SCHOOL_NAME: str = "EduTok"

    @field_validator("REPORT_TTL_DAYS")
    @classmethod
    def _positive_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("REPORT_TTL_DAYS deve ser positivo")
        return v

    @field_validator("PUBLIC_BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # =========================
    # PDF / WeasyPrint (opcional)
    # =========================
    WEASYPRINT_FONT_DIR: Optional[str] = None

    # =========================
    # Logging
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# ✅ objeto settings acessível de qualquer lugar
settings = Settings()
