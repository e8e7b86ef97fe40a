from sqlalchemy import Column, Integer, String, Date, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class Assessment(Base):
    __tablename__ = "assessments"  # tests and assignments

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    teacher_email = Column(String(255), index=True)       # owning teacher (optional)
    title = Column(String(200), nullable=False)
    due_date = Column(Date, nullable=False)
    max_marks = Column(Float)                              # no cap when null
    weighting = Column(Float)                              # fraction in (0, 1]
    is_test = Column(Boolean, nullable=False, default=False)  # formal test vs assignment
    cycle = Column(Integer, nullable=False, index=True)    # assessment_cycles.cycle

    subject = relationship("Subject", lazy="joined")

    @property
    def subject_name(self):
        # always the subject's current name, so renames show up everywhere
        return self.subject.name if self.subject is not None else None
