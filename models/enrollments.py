from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from database.db import Base

class Enrollment(Base):
    __tablename__ = "enrollments"  # student -> subject rows, one per enrolled subject
    __table_args__ = (UniqueConstraint("student_num", "subject_id", name="uq_enrollments_student_subject"),)

    id = Column(Integer, primary_key=True, index=True)
    student_num = Column(Integer, nullable=False, index=True)
    grade = Column(Integer, nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)  # display order of the subject for this student
