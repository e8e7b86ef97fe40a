from sqlalchemy import Column, Integer, String
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # learner register

    student_num = Column(Integer, primary_key=True, autoincrement=False)  # school issued student number
    full_name = Column(String(150))
    first_name = Column(String(100))
    surname = Column(String(100), index=True)
    grade = Column(Integer, nullable=False, index=True)
