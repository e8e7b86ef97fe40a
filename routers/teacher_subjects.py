from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_teacher_access
from services.subject_directory import list_teacher_subjects

router = APIRouter(
    prefix="/teacher/subjects",
    tags=["Teacher subjects"],
    dependencies=[Depends(require_teacher_access)],
)


# ✅ [READ] subjects a teacher teaches
@router.get("/")
def read_teacher_subjects(email: str = Query(..., min_length=3), db: Session = Depends(get_db)):
    subjects = list_teacher_subjects(db, email)
    return {
        "success": True,
        "data": [s.model_dump() for s in subjects],
        "message": "Teacher subjects loaded",
    }
