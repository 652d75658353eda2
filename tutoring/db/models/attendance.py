# tutoring/db/models/attendance.py
from sqlalchemy import Column, Integer, String, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from tutoring.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    student_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)  # 2025-09-15
    time = Column(String, nullable=True)  # "18:05:12", display only

    # "present" | "absent"
    status = Column(Enum("present", "absent", name="attendance_status"), nullable=False)

    # Raw lesson number: assigned once, never cyclic. Display numbering is derived.
    lesson_number = Column(Integer, nullable=False)

    student = relationship("Student", back_populates="attendance_records")
