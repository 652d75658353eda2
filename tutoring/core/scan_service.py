# tutoring/core/scan_service.py
"""
Attendance scanning.

All database access happens here, through the gateway; the numbering and
payment decisions are delegated to the pure functions in ``billing``.
Student lookups and payment lists are memoized per process.
"""
import asyncio
import logging
from datetime import date, datetime
from typing import List, Optional

from tutoring.core import billing
from tutoring.core.cache import MISSING, EvictionCache, now_ms
from tutoring.db.gateway import GatewayError, QueryGateway
from tutoring.schemas.attendance import AttendanceOut, ScanResult
from tutoring.schemas.payment import PaidMonthOut, PaymentOut
from tutoring.schemas.student import StudentOut

logger = logging.getLogger(__name__)

STUDENT_COLUMNS = "id, name, code, group_name, grade, phone, parent_phone"
ATTENDANCE_COLUMNS = "id, student_id, student_name, date, time, status, lesson_number"
PAYMENT_COLUMNS = "id, student_id, student_name, student_code, student_group, month, date, amount"


class ScanRejected(Exception):
    pass


class UnknownStudentCode(ScanRejected):
    pass


class DuplicateScan(ScanRejected):
    pass


class AttendanceScanner:
    def __init__(
        self,
        gateway: QueryGateway,
        lessons_per_month: int = billing.LESSONS_PER_MONTH,
        student_ttl_ms: float = 10 * 60 * 1000,
        payment_ttl_ms: float = 5 * 60 * 1000,
        cache_max_size: int = 100,
        debounce_ms: float = 10 * 1000,
        clock=now_ms,
    ):
        self.gateway = gateway
        self.lessons_per_month = lessons_per_month
        self.students = EvictionCache(student_ttl_ms, cache_max_size, clock)
        self.payments = EvictionCache(payment_ttl_ms, cache_max_size, clock)
        self.recent_scans = EvictionCache(debounce_ms, cache_max_size, clock)

    @classmethod
    def from_settings(cls, gateway: QueryGateway, settings) -> "AttendanceScanner":
        return cls(
            gateway,
            lessons_per_month=settings.LESSONS_PER_MONTH,
            student_ttl_ms=settings.STUDENT_CACHE_TTL_MS,
            payment_ttl_ms=settings.PAYMENT_CACHE_TTL_MS,
            cache_max_size=settings.CACHE_MAX_SIZE,
            debounce_ms=settings.SCAN_DEBOUNCE_MS,
        )

    # === Lookups ===

    async def find_student(self, code: str) -> Optional[StudentOut]:
        cached = self.students.get(code)
        if cached is not MISSING:
            logger.debug(f"✅ Student {code} served from cache")
            return cached

        result = await self.gateway.execute(
            f"SELECT {STUDENT_COLUMNS} FROM students WHERE code = ?", [code], "Student lookup"
        )
        student = StudentOut(**result.rows[0]) if result.rows else None
        # "not found" is cached too
        self.students.set(code, student)
        return student

    async def get_student(self, student_id: int) -> Optional[StudentOut]:
        result = await self.gateway.execute(
            f"SELECT {STUDENT_COLUMNS} FROM students WHERE id = ?", [student_id], "Student by id"
        )
        return StudentOut(**result.rows[0]) if result.rows else None

    async def student_attendance(self, student_id: int) -> List[AttendanceOut]:
        result = await self.gateway.execute(
            f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE student_id = ? ORDER BY lesson_number",
            [student_id],
            "Attendance history",
        )
        return [AttendanceOut(**row) for row in result.rows]

    async def student_payments(self, student_id: int) -> List[PaymentOut]:
        cached = self.payments.get(student_id)
        if cached is not MISSING:
            return cached

        result = await self.gateway.execute(
            f"SELECT {PAYMENT_COLUMNS} FROM payments WHERE student_id = ? ORDER BY date DESC",
            [student_id],
            "Student payments",
        )
        payments = []
        if result.rows:
            ids = [row["id"] for row in result.rows]
            placeholders = ",".join("?" for _ in ids)
            months = await self.gateway.execute(
                f"SELECT payment_id, month, date FROM paid_months WHERE payment_id IN ({placeholders}) ORDER BY id",
                ids,
                "Paid months",
            )
            for row in result.rows:
                paid_months = [
                    PaidMonthOut(month=pm["month"], date=pm["date"])
                    for pm in months.rows
                    if pm["payment_id"] == row["id"]
                ]
                payments.append(PaymentOut(**row, paid_months=paid_months))

        self.payments.set(student_id, payments)
        return payments

    async def has_paid(self, student_id: int, lesson_number: int) -> bool:
        try:
            payments = await self.student_payments(student_id)
        except GatewayError as e:
            # payment status is informational: never fail the scan over it
            logger.error(f"❌ Payment check for student {student_id} failed: {e}")
            payments = []
        return billing.has_paid_for_lesson(payments, lesson_number, self.lessons_per_month)

    # === Writes ===

    async def record(self, student: StudentOut, status: str = "present",
                     on: Optional[date] = None) -> AttendanceOut:
        history = await self.student_attendance(student.id)
        return await self._insert(student.id, student.name, status,
                                  billing.next_lesson_number(history), on)

    async def _insert(self, student_id: int, student_name: str, status: str,
                      lesson_number: int, on: Optional[date] = None) -> AttendanceOut:
        now = datetime.now()
        day = on or now.date()
        time = now.strftime("%H:%M:%S")
        result = await self.gateway.execute(
            "INSERT INTO attendance (student_id, student_name, date, time, status, lesson_number) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            [student_id, student_name, day.isoformat(), time, status, lesson_number],
            "Attendance insert",
        )
        return AttendanceOut(
            id=result.last_row_id,
            student_id=student_id,
            student_name=student_name,
            date=day,
            time=time,
            status=status,
            lesson_number=lesson_number,
        )

    async def scan(self, code: str) -> ScanResult:
        student = await self.find_student(code)
        if student is None:
            raise UnknownStudentCode(code)
        if student.id in self.recent_scans:
            raise DuplicateScan(student.name)
        # claimed before any await, so a second scan arriving mid-flight is turned away
        self.recent_scans.set(student.id, True)

        try:
            history = await self.student_attendance(student.id)
            lesson_number = billing.next_lesson_number(history)
            attendance = await self._insert(student.id, student.name, "present", lesson_number)
        except GatewayError:
            self.recent_scans.invalidate(student.id)
            raise

        previous_absent = any(
            record.lesson_number == lesson_number - 1 and record.status == "absent"
            for record in history
        )
        paid = await self.has_paid(student.id, lesson_number)
        logger.info(
            f"📷 {student.name}: lesson {lesson_number}, "
            f"period {billing.billing_period(lesson_number, self.lessons_per_month)}, "
            f"{'paid' if paid else 'NOT paid'}"
        )

        return ScanResult(
            attendance=attendance,
            student_name=student.name,
            lesson_number=lesson_number,
            display_lesson_number=billing.display_lesson_number(lesson_number, self.lessons_per_month),
            billing_period=billing.billing_period(lesson_number, self.lessons_per_month),
            paid=paid,
            previous_lesson_absent=previous_absent,
        )

    async def register_bulk_absence(self, group: str, on: date) -> int:
        students = await self.gateway.execute(
            "SELECT id, name FROM students WHERE group_name IS NOT NULL AND lower(group_name) LIKE ?",
            [f"%{group.strip().lower()}%"],
            "Group students",
        )
        present = await self.gateway.execute(
            "SELECT DISTINCT student_id FROM attendance WHERE date = ? AND status = 'present'",
            [on.isoformat()],
            "Present students",
        )
        present_ids = {row["student_id"] for row in present.rows}

        count = 0
        for row in students.rows:
            if row["id"] in present_ids:
                continue
            try:
                history = await self.student_attendance(row["id"])
                await self._insert(row["id"], row["name"], "absent",
                                   billing.next_lesson_number(history), on)
                count += 1
            except GatewayError as e:
                logger.error(f"❌ Absence for student {row['name']} not registered: {e}")
        logger.info(f"Bulk absence for group '{group}' on {on}: {count} students")
        return count

    # === Cache maintenance ===

    def invalidate_student(self, code: str) -> None:
        self.students.invalidate(code)

    def invalidate_payments(self, student_id: int) -> None:
        self.payments.invalidate(student_id)

    def cleanup(self) -> int:
        return self.students.cleanup() + self.payments.cleanup() + self.recent_scans.cleanup()


async def run_cache_cleanup(scanner: AttendanceScanner, interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        removed = scanner.cleanup()
        if removed:
            logger.info(f"🧹 Cache cleanup removed {removed} entries")
