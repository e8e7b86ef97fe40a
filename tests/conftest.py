import os

# settings are read at import time: configure before importing the app
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_NAME", "portal_test")
os.environ["DB_URL_OVERRIDE"] = "sqlite://"
os.environ["PORTAL_INTERNAL_TOKEN"] = "test-token"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from models.assessment_cycles import AssessmentCycle
from models.assessment_marks import AssessmentMark
from models.assessments import Assessment
from models.enrollments import Enrollment
from models.students import Student
from models.subjects import Subject
from models.teacher_subjects import TeacherSubject

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

AUTH = {"Authorization": "Bearer test-token"}
TEACHER = "teacher@school.test"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def _get_test_db():
        yield db

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seeded(db):
    """
    Grade 10, cycle 1 = 2026-01-01..2026-03-31, cycle 2 = 2026-04-01..2026-06-30.
    Student 100001 takes Mathematics then English; 100002 takes Mathematics.
    One Mathematics test in cycle 1 with a published 85/100 for 100001.
    """
    db.add_all([
        Subject(id=1, grade=10, name="Mathematics", category="core", timetable_aliases=["Maths 1", "Maths 2"]),
        Subject(id=2, grade=10, name="English", category="core", timetable_aliases=["Eng HL"]),
        Subject(id=3, grade=10, name="Afrikaans", category="core", timetable_aliases=["Afr 2"]),
        AssessmentCycle(id=1, cycle=1, grade=10, year=2026, start_date=date(2026, 1, 1), end_date=date(2026, 3, 31)),
        AssessmentCycle(id=2, cycle=2, grade=10, year=2026, start_date=date(2026, 4, 1), end_date=date(2026, 6, 30)),
        Student(student_num=100001, full_name="Thandi Mokoena", first_name="Thandi", surname="Mokoena", grade=10),
        Student(student_num=100002, full_name=None, first_name="Pieter", surname="Botha", grade=10),
        Enrollment(student_num=100001, grade=10, subject_id=1, position=0),
        Enrollment(student_num=100001, grade=10, subject_id=2, position=1),
        Enrollment(student_num=100002, grade=10, subject_id=1, position=0),
        TeacherSubject(teacher_email=TEACHER, subject_id=1),
    ])
    db.flush()
    db.add(Assessment(
        id=1, subject_id=1, teacher_email=TEACHER,
        title="Test 1 - Algebra", due_date=date(2026, 2, 15), max_marks=100,
        weighting=0.25, is_test=True, cycle=1,
    ))
    db.flush()
    db.add(AssessmentMark(
        assessment_id=1, student_num=100001, mark_obtained=85,
        teacher_comments="Good work!", is_published=True,
    ))
    db.commit()
    return db


class MarksUnavailableSession:
    """Real session whose mark table is unreachable; every other query goes through."""

    def __init__(self, session):
        self._session = session

    def query(self, *entities, **kwargs):
        if any(e is AssessmentMark for e in entities):
            raise OperationalError("SELECT assessment_marks", {}, Exception("connection lost"))
        return self._session.query(*entities, **kwargs)

    def __getattr__(self, name):
        return getattr(self._session, name)


@pytest.fixture
def marks_unavailable(seeded):
    return MarksUnavailableSession(seeded)
