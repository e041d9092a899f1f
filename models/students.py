from sqlalchemy import Column, String
from database.db import Base

class StudentProfile(Base):
    __tablename__ = "student_profiles"  # perfil do aluno (campos exibidos no boletim)

    uid = Column(String(128), primary_key=True, index=True)   # UID do Firebase Auth
    display_name = Column(String(100))                        # nome do aluno
    cpf = Column(String(14))                                  # CPF (com ou sem máscara)
    turma = Column(String(20))                                # turma, ex: "3re1"
