from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class AssessmentMark(Base):
    __tablename__ = "assessment_marks"  # one row per (assessment, student)
    __table_args__ = (UniqueConstraint("assessment_id", "student_num", name="uq_marks_assessment_student"),)

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False, index=True)
    student_num = Column(Integer, nullable=False, index=True)
    mark_obtained = Column(Float)                  # null = not graded yet
    teacher_comments = Column(Text)
    is_published = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
