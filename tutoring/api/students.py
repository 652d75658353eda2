# tutoring/api/students.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import can_view_student, get_current_user, get_db, get_scanner, require_admin
from tutoring.core import billing
from tutoring.core.config import settings
from tutoring.core.scan_service import AttendanceScanner
from tutoring.crud import people
from tutoring.db.models.attendance import Attendance
from tutoring.db.models.grade import Grade
from tutoring.db.models.payment import Payment
from tutoring.schemas.attendance import AttendanceView
from tutoring.schemas.grade import GradeOut
from tutoring.schemas.payment import PaymentOut
from tutoring.schemas.student import StudentCreate, StudentCreated, StudentOut, StudentOverview, StudentUpdate
from tutoring.schemas.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=StudentCreated)
def create_student(
    student_in: StudentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    try:
        student, password = people.create_student(db, student_in)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Student creation failed: {e}")
        raise HTTPException(status_code=500, detail="تعذر إضافة الطالب")
    # the code may have been looked up (and cached as unknown) before it existed
    scanner.invalidate_student(student.code)
    logger.info(f"Student {student.name} created with code {student.code}")
    return StudentCreated(**StudentOut.model_validate(student).model_dump(), password=password)


@router.get("/", response_model=List[StudentOut])
def list_students(
    grade: Optional[str] = None,
    group: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return people.list_students(db, grade=grade, group=group)


@router.get("/by-code/{code}", response_model=StudentOut)
async def get_student_by_code(
    code: str,
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    student = await scanner.find_student(code)
    if student is None:
        raise HTTPException(status_code=404, detail="كود الطالب غير موجود")
    return student


@router.get("/{student_id}", response_model=StudentOut)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not can_view_student(current_user, student_id):
        raise HTTPException(status_code=403, detail="غير مسموح")
    student = people.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")
    return student


@router.put("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: int,
    student_in: StudentUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    student = people.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")
    try:
        student = people.update_student(db, student, student_in)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Student {student_id} update failed: {e}")
        raise HTTPException(status_code=500, detail="تعذر تحديث الطالب")
    scanner.invalidate_student(student.code)
    return student


@router.delete("/{student_id}")
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    student = people.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")
    code = student.code
    try:
        people.delete_student(db, student)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Student {student_id} delete failed: {e}")
        raise HTTPException(status_code=500, detail="تعذر حذف الطالب")
    scanner.invalidate_student(code)
    scanner.invalidate_payments(student_id)
    logger.info(f"🗑️ Student {student_id} deleted with all records")
    return {"message": "تم حذف الطالب وكل بياناته"}


@router.get("/{student_id}/overview", response_model=StudentOverview)
def student_overview(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Everything the student (or their parent) page shows, in one call."""
    if not can_view_student(current_user, student_id):
        raise HTTPException(status_code=403, detail="غير مسموح")
    student = people.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")

    bucket = settings.LESSONS_PER_MONTH
    records = (
        db.query(Attendance)
        .filter(Attendance.student_id == student_id)
        .order_by(Attendance.lesson_number)
        .all()
    )
    payments = (
        db.query(Payment)
        .filter(Payment.student_id == student_id)
        .order_by(Payment.date.desc())
        .all()
    )
    grades = db.query(Grade).filter(Grade.student_id == student_id).order_by(Grade.date.desc()).all()

    attendance = [
        AttendanceView(
            id=r.id,
            student_id=r.student_id,
            student_name=r.student_name,
            date=r.date,
            time=r.time,
            status=r.status,
            lesson_number=r.lesson_number,
            display_lesson_number=billing.display_lesson_number(r.lesson_number, bucket),
            billing_period=billing.billing_period(r.lesson_number, bucket),
        )
        for r in records
    ]
    next_lesson = billing.next_lesson_number(records)

    return StudentOverview(
        student=StudentOut.model_validate(student),
        attendance=attendance,
        payments=[PaymentOut.model_validate(p) for p in payments],
        paid_periods=billing.paid_periods(payments),
        grades=[GradeOut.model_validate(g) for g in grades],
        next_lesson_number=next_lesson,
        next_billing_period=billing.billing_period(next_lesson, bucket),
        next_lesson_paid=billing.has_paid_for_lesson(payments, next_lesson, bucket),
        generated_on=date.today(),
    )
