import asyncio

import pytest

from tutoring.core.scan_service import AttendanceScanner, DuplicateScan
from tutoring.db.gateway import QueryFailed, QueryResult

STUDENT = {
    "id": 1,
    "name": "أحمد علي",
    "code": "123456",
    "group_name": "السبت 4",
    "grade": "first",
    "phone": "01111111111",
    "parent_phone": None,
}


class FakeGateway:
    """Answers the scanner's queries from memory, yielding to the loop on every call."""

    def __init__(self, fail_inserts=0):
        self.attendance = []
        self.fail_inserts = fail_inserts

    async def execute(self, sql, args=(), description=""):
        await asyncio.sleep(0)
        if "FROM students WHERE code" in sql:
            return QueryResult(rows=[dict(STUDENT)] if args[0] == STUDENT["code"] else [])
        if "FROM attendance" in sql:
            return QueryResult(rows=list(self.attendance))
        if sql.startswith("INSERT INTO attendance"):
            if self.fail_inserts:
                self.fail_inserts -= 1
                raise QueryFailed(description)
            student_id, student_name, day, time, status, lesson_number = args
            self.attendance.append({
                "id": len(self.attendance) + 1,
                "student_id": student_id,
                "student_name": student_name,
                "date": day,
                "time": time,
                "status": status,
                "lesson_number": lesson_number,
            })
            return QueryResult(rowcount=1, last_row_id=len(self.attendance))
        return QueryResult()


def test_concurrent_scans_record_once():
    gateway = FakeGateway()
    scanner = AttendanceScanner(gateway)

    async def scan_twice():
        return await asyncio.gather(
            scanner.scan(STUDENT["code"]), scanner.scan(STUDENT["code"]), return_exceptions=True
        )

    results = asyncio.run(scan_twice())
    assert sum(isinstance(r, DuplicateScan) for r in results) == 1
    assert len(gateway.attendance) == 1
    recorded = next(r for r in results if not isinstance(r, Exception))
    assert recorded.lesson_number == 1


def test_failed_insert_releases_the_guard():
    gateway = FakeGateway(fail_inserts=1)
    scanner = AttendanceScanner(gateway)

    with pytest.raises(QueryFailed):
        asyncio.run(scanner.scan(STUDENT["code"]))
    assert STUDENT["id"] not in scanner.recent_scans

    result = asyncio.run(scanner.scan(STUDENT["code"]))
    assert result.lesson_number == 1
    assert len(gateway.attendance) == 1

    with pytest.raises(DuplicateScan):
        asyncio.run(scanner.scan(STUDENT["code"]))
