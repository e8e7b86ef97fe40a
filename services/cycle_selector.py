from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from models.assessment_cycles import AssessmentCycle as AssessmentCycleModel
from services.exceptions import hard_fail


def list_cycles(db: Session, grade: int) -> List[AssessmentCycleModel]:
    """All cycles of a grade, ascending by cycle number."""
    with hard_fail(db, "fetch assessment cycles"):
        return (
            db.query(AssessmentCycleModel)
            .filter(AssessmentCycleModel.grade == grade)
            .order_by(AssessmentCycleModel.cycle.asc(), AssessmentCycleModel.year.asc())
            .all()
        )


def select_cycle(cycles, explicit_cycle: Optional[int] = None, today: Optional[date] = None):
    """
    Pick the applicable grading cycle.

    - explicit_cycle given -> the cycle with that number or None (date is ignored)
    - otherwise the first cycle whose [start_date, end_date] contains today
    - otherwise the first cycle of the list, None when the list is empty
    """
    if explicit_cycle is not None:
        return next((c for c in cycles if c.cycle == explicit_cycle), None)

    today = today or date.today()
    for c in cycles:
        if c.start_date <= today <= c.end_date:
            return c
    return cycles[0] if cycles else None
