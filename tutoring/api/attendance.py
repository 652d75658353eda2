import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import get_db, get_scanner, require_admin
from tutoring.core.scan_service import AttendanceScanner, DuplicateScan, UnknownStudentCode
from tutoring.db.models.attendance import Attendance
from tutoring.db.models.student import Student
from tutoring.schemas.attendance import (
    AttendanceOut,
    BulkAbsenceRequest,
    BulkAbsenceResult,
    ManualAttendance,
    ScanRequest,
    ScanResult,
)
from tutoring.schemas.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/scan", response_model=ScanResult)
async def scan(
    body: ScanRequest,
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    code = body.code.strip()
    if not code:
        raise HTTPException(status_code=400, detail="الكود فارغ")
    try:
        return await scanner.scan(code)
    except UnknownStudentCode:
        raise HTTPException(status_code=404, detail="كود الطالب غير موجود")
    except DuplicateScan as e:
        raise HTTPException(status_code=409, detail=f"تم تسجيل حضور {e} منذ قليل")


@router.post("/manual", response_model=AttendanceOut)
async def manual_attendance(
    body: ManualAttendance,
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    student = await scanner.get_student(body.student_id)
    if student is None:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")
    return await scanner.record(student, status=body.status)


@router.post("/bulk-absence", response_model=BulkAbsenceResult)
async def bulk_absence(
    body: BulkAbsenceRequest,
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    if not body.group.strip():
        raise HTTPException(status_code=400, detail="اسم المجموعة مطلوب")
    count = await scanner.register_bulk_absence(body.group, body.date)
    return BulkAbsenceResult(count=count, message=f"تم تسجيل غياب {count} طالب")


@router.get("/", response_model=List[AttendanceOut])
def list_attendance(
    student_id: Optional[int] = None,
    group: Optional[str] = None,
    on: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    query = db.query(Attendance)
    if student_id is not None:
        query = query.filter(Attendance.student_id == student_id)
    if group:
        query = query.join(Student).filter(Student.group_name.ilike(f"%{group.strip()}%"))
    if on is not None:
        query = query.filter(Attendance.date == on)
    return query.order_by(Attendance.date.desc(), Attendance.id.desc()).all()


@router.delete("/{attendance_id}")
def delete_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    record = db.query(Attendance).filter(Attendance.id == attendance_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="السجل غير موجود")
    db.delete(record)
    db.commit()
    return {"message": "تم حذف سجل الحضور"}
