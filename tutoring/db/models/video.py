# tutoring/db/models/video.py
from sqlalchemy import Column, Integer, String, Boolean, Enum, DateTime, JSON
from sqlalchemy.sql import func
from tutoring.db.base import Base
from tutoring.db.models.student import GRADES


class Video(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)
    grade = Column(Enum(*GRADES, name="video_grade"), nullable=False)
    is_youtube = Column(Boolean, default=False, nullable=False)
    video_password = Column(String, nullable=True)
    blocked_students = Column(JSON, default=list, nullable=False)  # [student_id, ...]
    upload_date = Column(DateTime(timezone=True), server_default=func.now())
