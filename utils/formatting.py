import re
from datetime import datetime
from decimal import Decimal, ROUND_DOWN
from typing import Optional
from zoneinfo import ZoneInfo

BRT = ZoneInfo("America/Sao_Paulo")

_TURMA_REGULAR = re.compile(r"(\d+)(RE)(\d+)", re.IGNORECASE)


def format_turma(turma: Optional[str]) -> str:
    """"3re1" → "3 REG 1"; vazio → "Não informada"."""
    if not turma:
        return "Não informada"
    return _TURMA_REGULAR.sub(r"\1 REG \3", turma.upper(), count=1)


def format_cpf(cpf: Optional[str]) -> str:
    return cpf or "Não informado"


def format_grade(grade: Optional[float]) -> str:
    # padrão pt-BR: uma casa decimal com vírgula, truncada (14,96 não pode virar 15,0)
    if grade is None:
        return "-"
    shown = Decimal(str(grade)).quantize(Decimal("0.1"), rounding=ROUND_DOWN)
    return f"{shown:.1f}".replace(".", ",")


def format_date_ms(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=BRT).strftime("%d/%m/%Y")
