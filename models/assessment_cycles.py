from sqlalchemy import Column, Integer, Date, UniqueConstraint
from database.db import Base

class AssessmentCycle(Base):
    __tablename__ = "assessment_cycles"  # grading periods (terms)
    __table_args__ = (UniqueConstraint("grade", "year", "cycle", name="uq_cycles_grade_year_cycle"),)

    id = Column(Integer, primary_key=True, index=True)
    cycle = Column(Integer, nullable=False)                # cycle number 1..N
    grade = Column(Integer, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)              # inclusive
    end_date = Column(Date, nullable=False)                # inclusive
