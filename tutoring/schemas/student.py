# tutoring/schemas/student.py
from datetime import date as dt_date
from typing import List, Literal, Optional

from pydantic import BaseModel

from tutoring.schemas.attendance import AttendanceView
from tutoring.schemas.grade import GradeOut
from tutoring.schemas.payment import NonPayingStats, PaymentOut

GradeLevel = Literal["first", "second", "third"]


class StudentCreate(BaseModel):
    name: str
    phone: str
    parent_phone: Optional[str] = None
    group_name: Optional[str] = None
    grade: GradeLevel


class StudentUpdate(StudentCreate):
    password: Optional[str] = None  # keeps the old one when empty


class StudentOut(BaseModel):
    id: int
    name: str
    code: str
    group_name: Optional[str] = None
    grade: GradeLevel
    phone: str
    parent_phone: Optional[str] = None

    class Config:
        from_attributes = True


class StudentCreated(StudentOut):
    # plain password, shown once
    password: str


class StudentOverview(BaseModel):
    student: StudentOut
    attendance: List[AttendanceView]
    payments: List[PaymentOut]
    paid_periods: List[int]
    grades: List[GradeOut]
    next_lesson_number: int
    next_billing_period: int
    next_lesson_paid: bool
    generated_on: dt_date


class NonPayingReport(BaseModel):
    group: Optional[str] = None
    month: Optional[str] = None
    students: List[StudentOut]
    statistics: NonPayingStats
