# tutoring/api/payments.py
import logging
from datetime import date
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import can_view_student, get_current_user, get_db, get_scanner, require_admin
from tutoring.core import billing
from tutoring.core.config import settings
from tutoring.core.months import month_label, resolve_month_label
from tutoring.core.scan_service import AttendanceScanner
from tutoring.crud import people
from tutoring.db.models.payment import PaidMonth, Payment
from tutoring.db.models.student import Student
from tutoring.schemas.payment import NonPayingStats, PaymentCreate, PaymentOut, PaymentStatus, PaymentUpdate
from tutoring.schemas.student import NonPayingReport, StudentOut
from tutoring.schemas.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_month(month: Union[int, str]) -> str:
    """Month numbers become the canonical label; text is kept as entered."""
    if isinstance(month, int):
        if not 1 <= month <= 12:
            raise HTTPException(status_code=400, detail="رقم الشهر يجب أن يكون بين 1 و 12")
        return month_label(month)
    label = month.strip()
    if not label:
        raise HTTPException(status_code=400, detail="الشهر مطلوب")
    return label


@router.post("/", response_model=PaymentOut)
def create_payment(
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    student = people.get_student(db, payment_in.student_id)
    if not student:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")

    label = normalize_month(payment_in.month)
    paid_on = payment_in.date or date.today()
    payment = Payment(
        student_id=student.id,
        student_name=student.name,
        student_code=student.code,
        student_group=student.group_name,
        month=label,
        date=paid_on,
        amount=payment_in.amount,
    )
    # one paid month per payment event
    payment.paid_months.append(PaidMonth(month=label, date=paid_on))

    try:
        db.add(payment)
        db.commit()
        db.refresh(payment)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Payment for student {student.id} failed: {e}")
        raise HTTPException(status_code=500, detail="تعذر تسجيل الدفع")

    scanner.invalidate_payments(student.id)
    logger.info(f"💰 {student.name} paid {label} (period {resolve_month_label(label)})")
    return payment


@router.get("/", response_model=List[PaymentOut])
def list_payments(
    student_id: Optional[int] = None,
    group: Optional[str] = None,
    month: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    query = db.query(Payment)
    if student_id is not None:
        query = query.filter(Payment.student_id == student_id)
    if group:
        query = query.filter(Payment.student_group.ilike(f"%{group.strip()}%"))
    if month:
        query = query.filter(Payment.month == month)
    return query.order_by(Payment.date.desc(), Payment.id.desc()).all()


@router.get("/status", response_model=PaymentStatus)
def payment_status(
    student_id: int,
    lesson_number: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not can_view_student(current_user, student_id):
        raise HTTPException(status_code=403, detail="غير مسموح")
    bucket = settings.LESSONS_PER_MONTH
    payments = db.query(Payment).filter(Payment.student_id == student_id).all()
    period = billing.billing_period(lesson_number, bucket)
    return PaymentStatus(
        student_id=student_id,
        lesson_number=lesson_number,
        billing_period=period,
        first_lesson=billing.first_lesson_of(period, bucket),
        last_lesson=billing.last_lesson_of(period, bucket),
        paid=billing.has_paid_for_lesson(payments, lesson_number, bucket),
    )


@router.get("/non-paying", response_model=NonPayingReport)
def non_paying_students(
    group: Optional[str] = None,
    month: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    """
    Students without a payment for ``month`` (any label the resolver
    understands). Without a month: students with no payments at all.
    """
    query = db.query(Student)
    if group:
        query = query.filter(Student.group_name.ilike(f"%{group.strip()}%"))
    students = query.order_by(Student.name).all()

    if month:
        period = resolve_month_label(month)
        if period == 0:
            raise HTTPException(status_code=400, detail="الشهر غير معروف")
        non_paying = [s for s in students if period not in billing.paid_periods(s.payments)]
    else:
        non_paying = [s for s in students if not s.payments]

    total = len(students)
    paying = total - len(non_paying)
    return NonPayingReport(
        group=group,
        month=month,
        students=[StudentOut.model_validate(s) for s in non_paying],
        statistics=NonPayingStats(
            total_students=total,
            paying_students=paying,
            non_paying_students=len(non_paying),
            payment_percentage=round(paying * 100 / total) if total else 0,
        ),
    )


@router.put("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: int,
    payment_in: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise HTTPException(status_code=404, detail="الدفعة غير موجودة")

    if payment_in.month is not None:
        old_label = payment.month
        payment.month = normalize_month(payment_in.month)
        for paid_month in payment.paid_months:
            if paid_month.month == old_label:
                paid_month.month = payment.month
    if payment_in.amount is not None:
        payment.amount = payment_in.amount
    if payment_in.date is not None:
        payment.date = payment_in.date
        for paid_month in payment.paid_months:
            paid_month.date = payment_in.date

    try:
        db.commit()
        db.refresh(payment)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="تعذر تحديث الدفعة")

    scanner.invalidate_payments(payment.student_id)
    return payment


@router.delete("/{payment_id}")
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    scanner: AttendanceScanner = Depends(get_scanner),
):
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise HTTPException(status_code=404, detail="الدفعة غير موجودة")
    student_id = payment.student_id
    db.delete(payment)
    db.commit()
    scanner.invalidate_payments(student_id)
    return {"message": "تم حذف الدفعة"}
