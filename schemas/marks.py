from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

# ✅ upsert schema: one mark per (assessment_id, student_num)
class MarkUpsert(BaseModel):
    assessment_id: int = Field(..., ge=1)
    student_num: int = Field(..., ge=1)
    mark_obtained: Optional[float] = Field(default=None, ge=0)   # null = not graded yet
    teacher_comments: Optional[str] = None
    is_published: bool = False


# ✅ bulk publish / unpublish for one assessment
class MarkPublish(BaseModel):
    is_published: bool


# ✅ stored mark (teacher view, never redacted)
class Mark(BaseModel):
    id: int
    assessment_id: int
    student_num: int
    mark_obtained: Optional[float] = None
    teacher_comments: Optional[str] = None
    is_published: bool = False
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ one row of the marking roster
class RosterEntry(BaseModel):
    student_num: int
    student_name: str
    mark_id: Optional[int] = None
    mark_obtained: Optional[float] = None
    teacher_comments: Optional[str] = None
    is_published: bool = False
