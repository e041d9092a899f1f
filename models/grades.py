from sqlalchemy import Column, Integer, Float, String, BigInteger
from database.db import Base

class GradeEntry(Base):
    __tablename__ = "grades"  # notas lançadas pelos professores (fonte oficial)

    id = Column(Integer, primary_key=True, index=True)           # ID da nota
    student_uid = Column(String(128), nullable=False, index=True)  # UID do aluno
    subject = Column(String(100), nullable=False)                # disciplina (texto livre)
    bimester = Column(Integer, nullable=False)                   # bimestre (1~4)
    grade = Column(Float)                                        # nota na escala 0~25
    date = Column(BigInteger)                                    # lançamento (epoch ms)
