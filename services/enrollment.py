import logging
from typing import List, NamedTuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.enrollments import Enrollment as EnrollmentModel
from models.subjects import Subject as SubjectModel

logger = logging.getLogger(__name__)


class Enrollment(NamedTuple):
    subject_names: List[str]     # subject_names[i] belongs to subject_ids[i]
    subject_ids: List[int]


def resolve_enrollment(db: Session, student_num: int, grade: int) -> Enrollment:
    """
    Subjects a student takes in a grade, in the student's enrollment order.
    No rows, or a failing lookup, both give an empty enrollment.
    """
    try:
        rows = (
            db.query(SubjectModel.name, SubjectModel.id)
            .join(EnrollmentModel, EnrollmentModel.subject_id == SubjectModel.id)
            .filter(EnrollmentModel.student_num == student_num, EnrollmentModel.grade == grade)
            .order_by(EnrollmentModel.position.asc(), EnrollmentModel.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Enrollment lookup failed for student={student_num} grade={grade}: {e}")
        return Enrollment([], [])

    return Enrollment([name for name, _ in rows], [subject_id for _, subject_id in rows])
