"""
schemas/assessments.py

- Teacher side: AssessmentCreate / AssessmentUpdate / Assessment
- Student side: MarkView / AssessmentWithMark / SubjectAssessments / StudentAssessments
  (camelCase keys on the wire for the student payload, matching the portal front end)
- weighting is always a fraction in (0, 1]
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.cycles import AssessmentCycle


# =========================================================
# Teacher side
# =========================================================

# ✅ create schema (id comes from the DB, subject_name is derived from subject_id)
class AssessmentCreate(BaseModel):
    subject_id: int = Field(..., ge=1)
    teacher_email: str = Field(..., min_length=3)
    title: str = Field(..., min_length=1, max_length=200)
    due_date: date
    max_marks: Optional[float] = Field(default=None, gt=0)
    weighting: Optional[float] = Field(default=None, gt=0, le=1)
    is_test: bool = False
    cycle: int = Field(..., ge=1)


# ✅ partial update schema (only the fields sent are written)
class AssessmentUpdate(BaseModel):
    subject_id: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    due_date: Optional[date] = None
    max_marks: Optional[float] = Field(default=None, gt=0)
    weighting: Optional[float] = Field(default=None, gt=0, le=1)
    is_test: Optional[bool] = None
    cycle: Optional[int] = Field(default=None, ge=1)


# ✅ response schema
class Assessment(BaseModel):
    id: int
    subject_id: int
    subject_name: str
    teacher_email: Optional[str] = None
    title: str
    due_date: date
    max_marks: Optional[float] = None
    weighting: Optional[float] = None
    is_test: bool = False
    cycle: int

    model_config = ConfigDict(from_attributes=True)


# =========================================================
# Student side
# =========================================================

class MarkView(BaseModel):
    """A mark as the student may see it: obtained/comments are null until published"""
    obtained: Optional[float] = None
    is_published: bool = Field(False, serialization_alias="isPublished")
    comments: Optional[str] = None


class AssessmentWithMark(Assessment):
    mark: Optional[MarkView] = None


class SubjectAssessments(BaseModel):
    subject_name: str = Field(..., serialization_alias="subjectName")
    subject_id: int = Field(..., serialization_alias="subjectId")
    timetable_aliases: List[str] = Field(default_factory=list, serialization_alias="timetableAliases")
    assessments: List[AssessmentWithMark] = Field(default_factory=list)


class StudentAssessments(BaseModel):
    current_cycle: Optional[AssessmentCycle] = Field(None, serialization_alias="currentCycle")
    cycles: List[AssessmentCycle] = Field(default_factory=list)
    subjects: List[SubjectAssessments] = Field(default_factory=list)
    resolved_subject: Optional[str] = Field(None, serialization_alias="resolvedSubject")
