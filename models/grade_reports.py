from sqlalchemy import Column, String, BigInteger, JSON
from database.db import Base

class GradeReport(Base):
    __tablename__ = "grade_reports"  # boletins temporários (snapshot imutável)

    id = Column(String(64), primary_key=True, index=True)          # reportId público (aleatório)
    student_uid = Column(String(128), nullable=False, index=True)  # dono do boletim

    # campos de perfil copiados na criação (não são relidos depois)
    student_name = Column(String(100), nullable=False)
    student_cpf = Column(String(14), nullable=False, default="")
    student_grade = Column(String(20), nullable=False, default="")  # turma

    grades_data = Column(JSON, nullable=False)                     # lista de notas como recebida
    created_at = Column(BigInteger, nullable=False)                # epoch ms
    expires_at = Column(BigInteger, nullable=False, index=True)    # epoch ms
