from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from database.db import Base

class TeacherSubject(Base):
    __tablename__ = "teacher_subjects"  # which subjects a teacher teaches
    __table_args__ = (UniqueConstraint("teacher_email", "subject_id", name="uq_teacher_subjects"),)

    id = Column(Integer, primary_key=True, index=True)
    teacher_email = Column(String(255), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
