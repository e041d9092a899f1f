import csv
import sys
from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from models.students import StudentProfile as StudentProfileModel  # ✅ modelo

CSV_PATH = "data/students.csv"  # ✅ colunas: uid, display_name, cpf, turma

def migrate_students(csv_path: str = CSV_PATH):
    init_db()
    db: Session = SessionLocal()

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            profile = StudentProfileModel(
                uid=row["uid"].strip(),                       # UID do Firebase
                display_name=row["display_name"].strip(),     # nome do aluno
                cpf=(row.get("cpf") or "").strip(),           # CPF
                turma=(row.get("turma") or "").strip(),       # turma (ex: 3re1)
            )
            db.merge(profile)  # reimportar atualiza o perfil existente

    db.commit()
    db.close()
    print("✅ Perfis de alunos CSV → DB importados")

if __name__ == "__main__":
    migrate_students(*sys.argv[1:2])
