# tutoring/db/models/payment.py
from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tutoring.db.base import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    student_name = Column(String, nullable=False)
    student_code = Column(String, nullable=False)
    student_group = Column(String, nullable=True)
    month = Column(String, nullable=False)  # free-text label as entered
    date = Column(Date, nullable=False)
    amount = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("Student", back_populates="payments")
    paid_months = relationship(
        "PaidMonth",
        back_populates="payment",
        cascade="all, delete-orphan",
        order_by="PaidMonth.id",
    )


class PaidMonth(Base):
    __tablename__ = "paid_months"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, index=True)
    month = Column(String, nullable=False)
    date = Column(Date, nullable=False)

    payment = relationship("Payment", back_populates="paid_months")
