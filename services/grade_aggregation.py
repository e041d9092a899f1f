"""
services/grade_aggregation.py

Agregação do boletim: nota vigente por (disciplina, bimestre), média por
disciplina, média geral e contagem por situação. Funções puras, usadas pela
API de resumo, pela página pública e pelo PDF.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from schemas.grade_reports import GradeRecord, GradeStatus, ReportSummary, SubjectSummary

APPROVED_MIN = 15.0    # >= 15 → Aprovado
RECOVERY_MIN = 12.5    # 12.5 <= x < 15 → Recuperação
BIMESTERS = (1, 2, 3, 4)


def classify(grade: float) -> GradeStatus:
    if grade >= APPROVED_MIN:
        return GradeStatus.APPROVED
    if grade >= RECOVERY_MIN:
        return GradeStatus.RECOVERY
    return GradeStatus.FAILED


def _recency_key(record: GradeRecord, position: int) -> Tuple[int, int, int]:
    # registros sem data perdem para os datados; empate → o que vem depois na lista
    if record.date is None:
        return (0, 0, position)
    return (1, record.date, position)


def latest_grades(records: Iterable[GradeRecord]) -> Dict[str, Dict[int, GradeRecord]]:
    """Mantém apenas o lançamento mais recente de cada (disciplina, bimestre)."""
    chosen: Dict[str, Dict[int, Tuple[Tuple[int, int, int], GradeRecord]]] = {}
    for position, record in enumerate(records):
        key = _recency_key(record, position)
        by_bimester = chosen.setdefault(record.subject, {})
        current = by_bimester.get(record.bimester)
        if current is None or key > current[0]:
            by_bimester[record.bimester] = (key, record)

    return {
        subject: {bim: rec for bim, (_, rec) in by_bimester.items()}
        for subject, by_bimester in chosen.items()
    }


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_subject(subject: str, by_bimester: Dict[int, GradeRecord]) -> SubjectSummary:
    cells: Dict[int, Optional[float]] = {}
    for bim in BIMESTERS:
        record = by_bimester.get(bim)
        cells[bim] = record.grade if record is not None else None

    present = [g for g in cells.values() if g is not None]
    average = _mean(present)
    return SubjectSummary(
        subject=subject,
        bimesters=cells,
        average=average,
        status=classify(average) if present else None,
    )


def summarize(records: Iterable[GradeRecord]) -> ReportSummary:
    """Resumo completo do boletim; disciplinas sem nota ficam fora dos denominadores."""
    grouped = latest_grades(records)
    subjects = [summarize_subject(name, grouped[name]) for name in sorted(grouped)]

    graded = [s for s in subjects if s.status is not None]
    return ReportSummary(
        subjects=subjects,
        overall_average=_mean([s.average for s in graded]),
        total_subjects=len(graded),
        approved=sum(1 for s in graded if s.status is GradeStatus.APPROVED),
        recovery=sum(1 for s in graded if s.status is GradeStatus.RECOVERY),
        failed=sum(1 for s in graded if s.status is GradeStatus.FAILED),
    )


def parse_records(raw: Iterable[dict]) -> List[GradeRecord]:
    """Reconstrói GradeRecord a partir do JSON armazenado no snapshot."""
    return [GradeRecord.model_validate(item) for item in raw]
