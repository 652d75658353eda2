# tutoring/db/models/grade.py
from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from tutoring.db.base import Base


class Grade(Base):
    __tablename__ = "grades"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    student_name = Column(String, nullable=False)
    exam_name = Column(String, nullable=False)
    score = Column(Integer, nullable=False)
    total_score = Column(Integer, nullable=False, default=100)
    date = Column(Date, nullable=False)
    lesson_number = Column(Integer, nullable=False, default=1)
    group_name = Column(String, nullable=True)
    performance_indicator = Column(String, nullable=False)

    student = relationship("Student", back_populates="grades")
