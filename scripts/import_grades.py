import csv
import sys
from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from models.grades import GradeEntry as GradeEntryModel  # ✅ modelo

CSV_PATH = "data/grades.csv"  # ✅ colunas: student_uid, subject, bimester, grade, date

def migrate_grades(csv_path: str = CSV_PATH):
    init_db()
    db: Session = SessionLocal()

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            bimester = int(row["bimester"])
            if bimester not in (1, 2, 3, 4):
                print(f"⚠️ bimestre inválido ignorado: {row}")
                continue
            grade = GradeEntryModel(
                student_uid=row["student_uid"].strip(),                  # UID do aluno
                subject=row["subject"].strip(),                          # disciplina
                bimester=bimester,                                       # bimestre (1~4)
                grade=float(row["grade"]) if row["grade"] else None,     # nota 0~25
                date=int(row["date"]) if row.get("date") else None,      # epoch ms
            )
            db.add(grade)

    db.commit()
    db.close()
    print("✅ Notas CSV → DB importadas")

if __name__ == "__main__":
    migrate_grades(*sys.argv[1:2])
