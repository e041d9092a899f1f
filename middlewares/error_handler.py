import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from datetime import datetime, timezone

from services.errors import ReportServiceError

logger = logging.getLogger(__name__)


def _now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_body(code: str, message: str) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message},
        "generated_at": _now_iso(),
    }


def add_error_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Requisição inválida em {request.url.path}: {len(exc.errors())} erro(s)")
        return JSONResponse(
            status_code=422,
            content=error_body("VALIDATION_ERROR", "Dados da requisição inválidos"),
        )

    @app.exception_handler(ReportServiceError)
    async def report_error_handler(request: Request, exc: ReportServiceError):
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # detalhes só no log, nunca na resposta
        logger.exception(f"Erro não tratado em {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body("INTERNAL_ERROR", "Erro interno do servidor"),
        )
