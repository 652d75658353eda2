from tutoring.db.base import Base
from tutoring.db.models.student import Student
from tutoring.db.models.parent import Parent
from tutoring.db.models.attendance import Attendance
from tutoring.db.models.payment import Payment, PaidMonth
from tutoring.db.models.grade import Grade
from tutoring.db.models.video import Video
from tutoring.db.models.book import Book

__all__ = ["Base", "Student", "Parent", "Attendance", "Payment", "PaidMonth", "Grade", "Video", "Book"]
