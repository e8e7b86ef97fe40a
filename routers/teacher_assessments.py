from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_teacher_access
from schemas.assessments import AssessmentCreate, AssessmentUpdate
from services.assessment_service import (
    create_assessment,
    delete_assessment,
    get_assessments_for_teacher,
    update_assessment,
)

router = APIRouter(
    prefix="/teacher/assessments",
    tags=["Teacher assessments"],
    dependencies=[Depends(require_teacher_access)],
)


# ✅ [READ] a teacher's assessments (optional subject / cycle filter)
@router.get("/")
def read_teacher_assessments(
    email: str = Query(..., min_length=3),
    subject: Optional[str] = None,
    cycle: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    assessments = get_assessments_for_teacher(db, email, subject_name=subject, cycle=cycle)
    return {
        "success": True,
        "data": [a.model_dump(mode="json") for a in assessments],
        "message": f"{len(assessments)} assessments loaded",
    }


# ✅ [CREATE]
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_teacher_assessment(new_assessment: AssessmentCreate, db: Session = Depends(get_db)):
    assessment = create_assessment(db, new_assessment)
    return {
        "success": True,
        "data": assessment.model_dump(mode="json"),
        "message": "Assessment created",
    }


# ✅ [UPDATE] only the fields sent are changed
@router.put("/{assessment_id}")
def update_teacher_assessment(assessment_id: int, updated: AssessmentUpdate, db: Session = Depends(get_db)):
    assessment = update_assessment(db, assessment_id, updated)
    return {
        "success": True,
        "data": assessment.model_dump(mode="json"),
        "message": "Assessment updated",
    }


# ✅ [DELETE] marks first, then the assessment
@router.delete("/{assessment_id}")
def delete_teacher_assessment(assessment_id: int, db: Session = Depends(get_db)):
    marks_deleted = delete_assessment(db, assessment_id)
    return {
        "success": True,
        "data": {"assessment_id": assessment_id, "marks_deleted": marks_deleted},
        "message": "Assessment deleted",
    }
