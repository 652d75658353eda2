# tutoring/schemas/book.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from tutoring.schemas.student import GradeLevel


class BookCreate(BaseModel):
    title: str
    url: str
    grade: GradeLevel


class BookUpdate(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    grade: Optional[GradeLevel] = None


class BookOut(BaseModel):
    id: int
    title: str
    url: str
    grade: GradeLevel
    upload_date: Optional[datetime] = None

    class Config:
        from_attributes = True
