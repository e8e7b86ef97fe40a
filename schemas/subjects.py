from pydantic import BaseModel
from typing import Optional

# ✅ teacher subject list item
class TeacherSubject(BaseModel):
    subject_id: Optional[int] = None
    subject_name: str
