"""
services/assessment_service.py

Student view
- aggregate(): enrolled subjects x cycle assessments x the student's marks
- get_assessments_for_student(): cycles -> enrollment -> aliases -> aggregate

Teacher view
- get_assessments_for_teacher() and create/update/delete

Marks are redacted here, before anything leaves the server:
an unpublished mark never carries its score or comment.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.assessment_marks import AssessmentMark as AssessmentMarkModel
from models.assessments import Assessment as AssessmentModel
from models.subjects import Subject as SubjectModel
from schemas.assessments import (
    Assessment,
    AssessmentCreate,
    AssessmentUpdate,
    AssessmentWithMark,
    MarkView,
    StudentAssessments,
    SubjectAssessments,
)
from schemas.cycles import AssessmentCycle
from services.cycle_selector import list_cycles, select_cycle
from services.enrollment import resolve_enrollment
from services.exceptions import ConflictError, InvalidInput, NotFoundError, hard_fail
from services.subject_directory import load_aliases, resolve_alias

logger = logging.getLogger(__name__)

# columns that may not be cleared through a partial update
_REQUIRED_FIELDS = ("subject_id", "title", "due_date", "is_test", "cycle")


def redact_mark(mark: Optional[AssessmentMarkModel]) -> Optional[MarkView]:
    if mark is None:
        return None
    if not mark.is_published:
        return MarkView(obtained=None, is_published=False, comments=None)
    return MarkView(obtained=mark.mark_obtained, is_published=True, comments=mark.teacher_comments)


# ==========================================================
# [1] Aggregation
# ==========================================================

def aggregate(
    db: Session,
    subject_names: List[str],
    subject_ids: List[int],
    cycle_number: int,
    student_num: int,
    aliases: Optional[Dict[str, List[str]]] = None,
) -> List[SubjectAssessments]:
    aliases = aliases or {}

    with hard_fail(db, "fetch assessments"):
        assessments = (
            db.query(AssessmentModel)
            .filter(AssessmentModel.subject_id.in_(subject_ids), AssessmentModel.cycle == cycle_number)
            .order_by(AssessmentModel.due_date.asc(), AssessmentModel.id.asc())
            .all()
        )

    marks_by_assessment: Dict[int, AssessmentMarkModel] = {}
    assessment_ids = [a.id for a in assessments]
    # no assessments -> no mark query at all
    if assessment_ids:
        with hard_fail(db, "fetch marks"):
            marks = (
                db.query(AssessmentMarkModel)
                .filter(
                    AssessmentMarkModel.assessment_id.in_(assessment_ids),
                    AssessmentMarkModel.student_num == student_num,
                )
                .all()
            )
        marks_by_assessment = {m.assessment_id: m for m in marks}

    by_subject: Dict[int, List[AssessmentWithMark]] = {}
    for a in assessments:
        item = AssessmentWithMark.model_validate(a).model_copy(
            update={"mark": redact_mark(marks_by_assessment.get(a.id))}
        )
        by_subject.setdefault(a.subject_id, []).append(item)

    return [
        SubjectAssessments(
            subject_name=name,
            subject_id=subject_id,
            timetable_aliases=aliases.get(name, []),
            assessments=by_subject.get(subject_id, []),
        )
        for name, subject_id in zip(subject_names, subject_ids)
    ]


# ==========================================================
# [2] Student entry point
# ==========================================================

def _require_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInput(f"{name} must be a positive integer")
    return value


def get_assessments_for_student(
    db: Session,
    student_num: int,
    grade: int,
    cycle: Optional[int] = None,
    alias: Optional[str] = None,
    today: Optional[date] = None,
) -> StudentAssessments:
    _require_positive_int(student_num, "studentNumber")
    _require_positive_int(grade, "grade")

    cycles = list_cycles(db, grade)
    resolved_subject = resolve_alias(db, grade, alias) if alias else None
    current = select_cycle(cycles, cycle, today)

    result = StudentAssessments(
        current_cycle=AssessmentCycle.model_validate(current) if current is not None else None,
        cycles=[AssessmentCycle.model_validate(c) for c in cycles],
        subjects=[],
        resolved_subject=resolved_subject,
    )
    if current is None:
        logger.info(f"No cycle resolvable for grade={grade} cycle={cycle}")
        return result

    enrollment = resolve_enrollment(db, student_num, grade)
    if not enrollment.subject_names:
        return result

    aliases = load_aliases(db, grade, enrollment.subject_names)
    result.subjects = aggregate(
        db,
        enrollment.subject_names,
        enrollment.subject_ids,
        current.cycle,
        student_num,
        aliases,
    )
    return result


# ==========================================================
# [3] Teacher view + mutations
# ==========================================================

def get_assessments_for_teacher(
    db: Session,
    teacher_email: str,
    subject_name: Optional[str] = None,
    cycle: Optional[int] = None,
) -> List[Assessment]:
    with hard_fail(db, "fetch assessments"):
        query = db.query(AssessmentModel).filter(AssessmentModel.teacher_email == teacher_email)
        if subject_name:
            query = (
                query.join(SubjectModel, SubjectModel.id == AssessmentModel.subject_id)
                .filter(SubjectModel.name == subject_name)
            )
        if cycle is not None:
            query = query.filter(AssessmentModel.cycle == cycle)
        rows = query.order_by(AssessmentModel.due_date.desc(), AssessmentModel.id.desc()).all()
    return [Assessment.model_validate(r) for r in rows]


def _get_subject(db: Session, subject_id: int) -> SubjectModel:
    with hard_fail(db, "fetch subject"):
        subject = db.get(SubjectModel, subject_id)
    if subject is None:
        raise NotFoundError(f"Subject {subject_id} not found")
    return subject


def _get_assessment(db: Session, assessment_id: int) -> AssessmentModel:
    with hard_fail(db, "fetch assessment"):
        assessment = db.get(AssessmentModel, assessment_id)
    if assessment is None:
        raise NotFoundError(f"Assessment {assessment_id} not found")
    return assessment


def create_assessment(db: Session, payload: AssessmentCreate) -> Assessment:
    subject = _get_subject(db, payload.subject_id)
    with hard_fail(db, "create assessment"):
        row = AssessmentModel(**payload.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)
    logger.info(f"Assessment {row.id} created for {subject.name} by {row.teacher_email}")
    return Assessment.model_validate(row)


def update_assessment(db: Session, assessment_id: int, payload: AssessmentUpdate) -> Assessment:
    changes = payload.model_dump(exclude_unset=True)
    for key in _REQUIRED_FIELDS:
        if key in changes and changes[key] is None:
            raise InvalidInput(f"{key} cannot be null")

    assessment = _get_assessment(db, assessment_id)
    if "subject_id" in changes:
        _get_subject(db, changes["subject_id"])

    if changes.get("max_marks") is not None:
        with hard_fail(db, "fetch marks"):
            highest = (
                db.query(func.max(AssessmentMarkModel.mark_obtained))
                .filter(AssessmentMarkModel.assessment_id == assessment_id)
                .scalar()
            )
        if highest is not None and highest > changes["max_marks"]:
            raise ConflictError(f"max_marks {changes['max_marks']} is below a recorded mark of {highest}")

    with hard_fail(db, "update assessment"):
        for key, value in changes.items():
            setattr(assessment, key, value)
        db.commit()
        db.refresh(assessment)
    return Assessment.model_validate(assessment)


def delete_assessment(db: Session, assessment_id: int) -> int:
    """Delete an assessment and every mark recorded for it. Returns the number of marks removed."""
    assessment = _get_assessment(db, assessment_id)
    with hard_fail(db, "delete assessment"):
        removed = (
            db.query(AssessmentMarkModel)
            .filter(AssessmentMarkModel.assessment_id == assessment_id)
            .delete(synchronize_session=False)
        )
        db.delete(assessment)
        db.commit()
    logger.info(f"Assessment {assessment_id} deleted with {removed} marks")
    return removed
