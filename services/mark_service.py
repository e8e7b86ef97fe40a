import logging
from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.assessment_marks import AssessmentMark as AssessmentMarkModel
from models.assessments import Assessment as AssessmentModel
from models.enrollments import Enrollment as EnrollmentModel
from models.students import Student as StudentModel
from schemas.marks import Mark, MarkUpsert, RosterEntry
from services.exceptions import ConflictError, InvalidInput, NotFoundError, hard_fail

logger = logging.getLogger(__name__)


def _get_assessment(db: Session, assessment_id: int) -> AssessmentModel:
    with hard_fail(db, "fetch assessment"):
        assessment = db.get(AssessmentModel, assessment_id)
    if assessment is None:
        raise NotFoundError(f"Assessment {assessment_id} not found")
    return assessment


def _find_mark(db: Session, assessment_id: int, student_num: int):
    return (
        db.query(AssessmentMarkModel)
        .filter(
            AssessmentMarkModel.assessment_id == assessment_id,
            AssessmentMarkModel.student_num == student_num,
        )
        .first()
    )


def _overwrite(mark: AssessmentMarkModel, payload: MarkUpsert):
    # only fields the teacher actually sent; publication is toggled on its own
    for key in ("mark_obtained", "teacher_comments", "is_published"):
        if key in payload.model_fields_set:
            setattr(mark, key, getattr(payload, key))
    mark.updated_at = datetime.now(timezone.utc)


def record_mark(db: Session, payload: MarkUpsert) -> Tuple[Mark, bool]:
    """
    Create or overwrite the mark of one student for one assessment.
    Returns (mark, created).
    """
    assessment = _get_assessment(db, payload.assessment_id)
    if (
        payload.mark_obtained is not None
        and assessment.max_marks is not None
        and payload.mark_obtained > assessment.max_marks
    ):
        raise InvalidInput(f"mark_obtained {payload.mark_obtained} exceeds max_marks {assessment.max_marks}")

    with hard_fail(db, "record mark"):
        mark = _find_mark(db, payload.assessment_id, payload.student_num)
        created = mark is None
        if created:
            mark = AssessmentMarkModel(**payload.model_dump())
            db.add(mark)
            try:
                db.commit()
            except IntegrityError:
                # another request stored this (assessment, student) first
                db.rollback()
                mark = _find_mark(db, payload.assessment_id, payload.student_num)
                if mark is None:
                    raise ConflictError(
                        f"Mark for student {payload.student_num} on assessment {payload.assessment_id} could not be saved"
                    )
                created = False
                _overwrite(mark, payload)
                db.commit()
        else:
            _overwrite(mark, payload)
            db.commit()
        db.refresh(mark)
    return Mark.model_validate(mark), created


def publish_marks(db: Session, assessment_id: int, is_published: bool) -> int:
    """Toggle publication for every mark of an assessment. Scores are left untouched."""
    _get_assessment(db, assessment_id)
    with hard_fail(db, "update marks"):
        updated = (
            db.query(AssessmentMarkModel)
            .filter(AssessmentMarkModel.assessment_id == assessment_id)
            .update(
                {"is_published": is_published, "updated_at": datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )
        db.commit()
    logger.info(f"Assessment {assessment_id}: {updated} marks set is_published={is_published}")
    return updated


def list_marks_for_assessment(db: Session, assessment_id: int) -> List[RosterEntry]:
    """Marking roster: every student taking the subject, by surname, with their stored mark (if any)."""
    assessment = _get_assessment(db, assessment_id)
    with hard_fail(db, "fetch students"):
        students = (
            db.query(StudentModel)
            .join(EnrollmentModel, EnrollmentModel.student_num == StudentModel.student_num)
            .filter(EnrollmentModel.subject_id == assessment.subject_id)
            .order_by(StudentModel.surname.asc(), StudentModel.first_name.asc())
            .all()
        )
    with hard_fail(db, "fetch marks"):
        marks = (
            db.query(AssessmentMarkModel)
            .filter(AssessmentMarkModel.assessment_id == assessment_id)
            .all()
        )
    marks_by_student = {m.student_num: m for m in marks}

    roster = []
    for s in students:
        mark = marks_by_student.get(s.student_num)
        roster.append(
            RosterEntry(
                student_num=s.student_num,
                student_name=s.full_name or f"{s.first_name or ''} {s.surname or ''}".strip(),
                mark_id=mark.id if mark else None,
                mark_obtained=mark.mark_obtained if mark else None,
                teacher_comments=mark.teacher_comments if mark else None,
                is_published=mark.is_published if mark else False,
            )
        )
    return roster
