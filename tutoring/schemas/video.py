# tutoring/schemas/video.py
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from tutoring.schemas.student import GradeLevel


class VideoCreate(BaseModel):
    title: str
    url: str
    grade: GradeLevel
    is_youtube: bool = False
    password: Optional[str] = None


class VideoOut(BaseModel):
    id: int
    title: str
    url: Optional[str] = None  # hidden from students until unlocked
    grade: GradeLevel
    is_youtube: bool
    requires_password: bool
    blocked_students: List[int] = []


class VideoUnlock(BaseModel):
    password: str


class BlockCandidatesRequest(BaseModel):
    reason: Literal["absent", "nonpayer"]
    calendar_month: int = Field(ge=1, le=12)


class BlockedUpdate(BaseModel):
    student_ids: List[int]
