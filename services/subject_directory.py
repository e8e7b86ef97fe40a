"""
services/subject_directory.py

Subject catalog lookups for a grade:
- load_aliases: timetable aliases of the enrolled subjects only
- resolve_alias: timetable label ("Maths 2") -> canonical subject name
- list_teacher_subjects: subjects a teacher teaches
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.assessments import Assessment as AssessmentModel
from models.subjects import Subject as SubjectModel
from models.teacher_subjects import TeacherSubject as TeacherSubjectModel
from schemas.subjects import TeacherSubject
from services.exceptions import hard_fail

logger = logging.getLogger(__name__)


def load_aliases(db: Session, grade: int, subject_names: List[str]) -> Dict[str, List[str]]:
    if not subject_names:
        return {}
    try:
        rows = (
            db.query(SubjectModel.name, SubjectModel.timetable_aliases)
            .filter(SubjectModel.grade == grade, SubjectModel.name.in_(subject_names))
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Alias lookup failed for grade={grade}: {e}")
        return {}
    return {name: list(aliases or []) for name, aliases in rows}


def match_alias(subjects: Iterable[Tuple[str, Optional[List[str]]]], alias_text: str) -> Optional[str]:
    """
    First (name, aliases) pair whose name or any alias equals alias_text,
    ignoring case only. Whitespace and punctuation are compared as-is.
    """
    wanted = alias_text.casefold()
    for name, aliases in subjects:
        if name.casefold() == wanted or any(a.casefold() == wanted for a in aliases or []):
            return name
    return None


def resolve_alias(db: Session, grade: int, alias_text: str) -> Optional[str]:
    try:
        catalog = (
            db.query(SubjectModel.name, SubjectModel.timetable_aliases)
            .filter(SubjectModel.grade == grade)
            .order_by(SubjectModel.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Alias resolution failed for grade={grade} alias={alias_text!r}: {e}")
        return None
    return match_alias(catalog, alias_text)


def list_teacher_subjects(db: Session, teacher_email: str) -> List[TeacherSubject]:
    """
    Subjects assigned to a teacher. A teacher without assignments still sees
    the subjects they have set assessments for.
    """
    with hard_fail(db, "fetch teacher subjects"):
        rows = (
            db.query(SubjectModel.id, SubjectModel.name)
            .join(TeacherSubjectModel, TeacherSubjectModel.subject_id == SubjectModel.id)
            .filter(TeacherSubjectModel.teacher_email == teacher_email)
            .order_by(SubjectModel.name.asc())
            .all()
        )
        if not rows:
            rows = (
                db.query(SubjectModel.id, SubjectModel.name)
                .join(AssessmentModel, AssessmentModel.subject_id == SubjectModel.id)
                .filter(AssessmentModel.teacher_email == teacher_email)
                .distinct()
                .order_by(SubjectModel.name.asc())
                .all()
            )
    return [TeacherSubject(subject_id=subject_id, subject_name=name) for subject_id, name in rows]
