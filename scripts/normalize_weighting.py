"""
One-off migration: legacy rows stored weighting either as a fraction (0.25)
or as a percentage (25). Everything is stored as a fraction from now on.
"""

from typing import Optional

from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.assessments import Assessment as AssessmentModel


def normalize_weighting(db: Optional[Session] = None) -> int:
    own_session = db is None
    db = db or SessionLocal()
    try:
        rows = db.query(AssessmentModel).filter(AssessmentModel.weighting > 1).all()
        for row in rows:
            row.weighting = round(row.weighting / 100, 4)
        db.commit()
    finally:
        if own_session:
            db.close()
    return len(rows)


if __name__ == "__main__":
    n = normalize_weighting()
    print(f"✅ weighting normalized to fractions: {n} assessments")
