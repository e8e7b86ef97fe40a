import csv
import sys
from typing import Optional

from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.subjects import Subject as SubjectModel  # ✅ model import

CSV_PATH = "data/subjects.csv"  # ✅ columns: id, grade, name, category, timetable_aliases ("Maths 1|Maths 2")


def parse_aliases(raw: Optional[str]):
    return [a for a in (raw or "").split("|") if a]


def import_subjects(csv_path: str = CSV_PATH, db: Optional[Session] = None) -> int:
    own_session = db is None
    db = db or SessionLocal()
    count = 0
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                db.merge(SubjectModel(
                    id=int(row["id"]),
                    grade=int(row["grade"]),
                    name=row["name"],
                    category=row.get("category") or None,
                    timetable_aliases=parse_aliases(row.get("timetable_aliases")),
                ))
                count += 1
        db.commit()
    finally:
        if own_session:
            db.close()
    return count


if __name__ == "__main__":
    n = import_subjects(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
    print(f"✅ subjects CSV -> DB: {n} rows")
