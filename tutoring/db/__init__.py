# tutoring/db/__init__.py
# Importing tutoring.db registers every model on Base.metadata

from tutoring.db.base import Base
from tutoring.db.models import Student, Parent, Attendance, Payment, PaidMonth, Grade, Video, Book

__all__ = ["Base", "Student", "Parent", "Attendance", "Payment", "PaidMonth", "Grade", "Video", "Book"]
