from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from schemas.common import CamelModel

# ==========================================================
# [Entrada] nota individual
# ==========================================================
class GradeRecord(BaseModel):
    subject: str = Field(..., min_length=1, max_length=100)       # disciplina (texto livre)
    bimester: int = Field(
        ..., ge=1, le=4,
        validation_alias=AliasChoices("bimester", "bimestre"),    # cliente antigo envia "bimestre"
    )
    grade: Optional[float] = Field(default=None, ge=0, le=25, allow_inf_nan=False)  # escala 0~25
    date: Optional[int] = Field(default=None, ge=0)               # epoch ms, desempate "mais recente"

    # campos extras (id da nota, professor, ...) são preservados no snapshot
    model_config = ConfigDict(extra="allow")

    @field_validator("subject")
    @classmethod
    def _subject_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("subject não pode ser vazio")
        return v


class CreateReportRequest(CamelModel):
    # cada item é validado como GradeRecord, mas o snapshot guarda o dict original
    grades_data: List[Dict[str, Any]]

    @field_validator("grades_data")
    @classmethod
    def _validate_records(cls, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        for position, item in enumerate(items):
            try:
                GradeRecord.model_validate(item)
            except ValidationError as e:
                problems = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc']) or 'item'}: {err['msg']}" for err in e.errors()
                )
                raise ValueError(f"gradesData[{position}] inválido: {problems}")
        return items


# ==========================================================
# [Saída] criação / snapshot
# ==========================================================
class CreateReportResponse(CamelModel):
    success: bool = True
    report_id: str
    expires_at: int
    report_url: str


class ReportSnapshot(CamelModel):
    report_id: str
    student_uid: str
    student_name: str
    student_cpf: str = ""
    student_grade: str = ""           # turma
    grades_data: List[Dict[str, Any]]
    created_at: int
    expires_at: int

    @classmethod
    def from_model(cls, row) -> "ReportSnapshot":
        return cls(
            report_id=row.id,
            student_uid=row.student_uid,
            student_name=row.student_name,
            student_cpf=row.student_cpf or "",
            student_grade=row.student_grade or "",
            grades_data=list(row.grades_data or []),
            created_at=row.created_at,
            expires_at=row.expires_at,
        )


class ReportEnvelope(CamelModel):
    success: bool = True
    report: ReportSnapshot


# ==========================================================
# [Saída] agregação por disciplina/bimestre
# ==========================================================
class GradeStatus(str, Enum):
    APPROVED = "Aprovado"
    RECOVERY = "Recuperação"
    FAILED = "Reprovado"


class SubjectSummary(CamelModel):
    subject: str
    bimesters: Dict[int, Optional[float]]   # 1~4 → nota vigente (ou None)
    average: float
    status: Optional[GradeStatus] = None    # None quando não há nota


class ReportSummary(CamelModel):
    subjects: List[SubjectSummary]
    overall_average: float
    total_subjects: int
    approved: int
    recovery: int
    failed: int


class ReportSummaryEnvelope(CamelModel):
    success: bool = True
    report_id: str
    student_name: str
    student_cpf: str
    student_grade: str
    expires_at: int
    summary: ReportSummary
