class ReportServiceError(Exception):
    """Erro de domínio com status HTTP e código estáveis."""

    status_code = 500
    code = "INTERNAL_ERROR"
    message = "Erro interno"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class Unauthorized(ReportServiceError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Não autorizado"


class ReportNotFound(ReportServiceError):
    # inexistente e expirado usam a mesma mensagem
    status_code = 404
    code = "REPORT_NOT_FOUND"
    message = "Relatório não encontrado"


class InternalError(ReportServiceError):
    status_code = 500
    code = "INTERNAL_ERROR"
    message = "Erro ao processar o relatório"
