from sqlalchemy import Column, Integer, String, JSON, UniqueConstraint
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # per-grade subject catalog
    __table_args__ = (UniqueConstraint("grade", "name", name="uq_subjects_grade_name"),)

    id = Column(Integer, primary_key=True, index=True)         # subject id (catalog order)
    grade = Column(Integer, nullable=False, index=True)       # grade the subject is taught in
    name = Column(String(100), nullable=False)                # canonical name (e.g. Mathematics)
    category = Column(String(50))                             # e.g. core, elective
    timetable_aliases = Column(JSON, nullable=False, default=list)  # labels used in timetable cells (e.g. "Maths 2")
