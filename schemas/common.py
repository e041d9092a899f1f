"""
schemas/common.py

- Esquemas compartilhados pelos routers
- Pydantic v2
- Conteúdo:
  1) padrão de resposta de erro: ErrorDetail, ErrorResponse
  2) modelo base com aliases camelCase (formato usado pelo cliente web)
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =========================================================
# 1) Resposta de erro padrão
# =========================================================

class ErrorDetail(BaseModel):
    """Unidade mínima com código/mensagem do erro"""
    code: str = Field(..., description="Código do erro (ex: REPORT_NOT_FOUND, UNAUTHORIZED)")
    message: str = Field(..., description="Mensagem legível para o usuário")

class ErrorResponse(BaseModel):
    """
    Resposta de erro devolvida pelo handler global
    - middlewares/error_handler.py monta esta estrutura
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Momento de geração da resposta (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) Base camelCase
# =========================================================

class CamelModel(BaseModel):
    """Campos em snake_case no Python, camelCase no JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
