from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from services.assessment_service import get_assessments_for_student

router = APIRouter(prefix="/student", tags=["Student assessments"])


# ✅ [READ] assessments + published marks of one student for one cycle
@router.get("/assessments")
def read_student_assessments(
    student_number: int = Query(..., alias="studentNumber", ge=1),
    grade: int = Query(..., ge=1),
    cycle: Optional[int] = Query(None, ge=1),
    alias: Optional[str] = Query(None, description="Timetable label to resolve to a subject"),
    db: Session = Depends(get_db),
):
    result = get_assessments_for_student(db, student_number, grade, cycle=cycle, alias=alias or None)
    return {
        "success": True,
        "data": result.model_dump(mode="json", by_alias=True),
        "message": "Student assessments loaded" if result.subjects else "No assessments to show",
    }
