# tutoring/schemas/grade.py
from datetime import date as dt_date
from typing import Optional

from pydantic import BaseModel, Field


class GradeCreate(BaseModel):
    student_id: int
    exam_name: str
    score: int = Field(ge=0)
    total_score: int = Field(100, gt=0)
    lesson_number: int = 1


class GradeUpdate(BaseModel):
    exam_name: Optional[str] = None
    score: Optional[int] = Field(None, ge=0)
    total_score: Optional[int] = Field(None, gt=0)
    lesson_number: Optional[int] = None


class GradeOut(BaseModel):
    id: int
    student_id: int
    student_name: str
    exam_name: str
    score: int
    total_score: int
    date: dt_date
    lesson_number: int
    group_name: Optional[str] = None
    performance_indicator: str

    class Config:
        from_attributes = True
