from pydantic import BaseModel, ConfigDict
from datetime import date

# ✅ response schema
class AssessmentCycle(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cycle: int                               # cycle number within grade + year
    grade: int
    year: int
    start_date: date                         # inclusive
    end_date: date                           # inclusive
