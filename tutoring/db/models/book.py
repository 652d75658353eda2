# tutoring/db/models/book.py
from sqlalchemy import Column, Integer, String, Enum, DateTime
from sqlalchemy.sql import func
from tutoring.db.base import Base
from tutoring.db.models.student import GRADES


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)  # link to the PDF, uploads are handled elsewhere
    grade = Column(Enum(*GRADES, name="book_grade"), nullable=False)
    upload_date = Column(DateTime(timezone=True), server_default=func.now())
