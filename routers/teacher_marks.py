from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_teacher_access
from schemas.marks import MarkPublish, MarkUpsert
from services.mark_service import list_marks_for_assessment, publish_marks, record_mark

router = APIRouter(
    prefix="/teacher/marks",
    tags=["Teacher marks"],
    dependencies=[Depends(require_teacher_access)],
)


# ✅ [READ] marking roster of one assessment
@router.get("/{assessment_id}")
def read_assessment_marks(assessment_id: int, db: Session = Depends(get_db)):
    roster = list_marks_for_assessment(db, assessment_id)
    return {
        "success": True,
        "data": [r.model_dump(mode="json") for r in roster],
        "message": f"{len(roster)} students loaded",
    }


# ✅ [UPSERT] 201 when the mark is new, 200 when overwritten
@router.post("/")
def upsert_mark(payload: MarkUpsert, db: Session = Depends(get_db)):
    mark, created = record_mark(db, payload)
    return JSONResponse(
        status_code=201 if created else 200,
        content={
            "success": True,
            "data": mark.model_dump(mode="json"),
            "message": "Mark recorded" if created else "Mark updated",
        },
    )


# ✅ [BULK] publish / unpublish every mark of an assessment
@router.put("/{assessment_id}/publish")
def set_marks_published(assessment_id: int, payload: MarkPublish, db: Session = Depends(get_db)):
    updated = publish_marks(db, assessment_id, payload.is_published)
    return {
        "success": True,
        "data": {"assessment_id": assessment_id, "updated": updated},
        "message": "Marks published" if payload.is_published else "Marks unpublished",
    }
