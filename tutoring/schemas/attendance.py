# tutoring/schemas/attendance.py
from datetime import date as dt_date
from typing import Literal, Optional

from pydantic import BaseModel

AttendanceStatus = Literal["present", "absent"]


class AttendanceOut(BaseModel):
    id: int
    student_id: int
    student_name: str
    date: dt_date
    time: Optional[str] = None
    status: AttendanceStatus
    lesson_number: int

    class Config:
        from_attributes = True


class AttendanceView(AttendanceOut):
    display_lesson_number: int
    billing_period: int


class ScanRequest(BaseModel):
    code: str


class ManualAttendance(BaseModel):
    student_id: int
    status: AttendanceStatus = "present"


class BulkAbsenceRequest(BaseModel):
    group: str
    date: dt_date


class BulkAbsenceResult(BaseModel):
    count: int
    message: str


class ScanResult(BaseModel):
    attendance: AttendanceOut
    student_name: str
    lesson_number: int
    display_lesson_number: int
    billing_period: int
    paid: bool
    previous_lesson_absent: bool
