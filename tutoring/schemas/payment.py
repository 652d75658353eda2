# tutoring/schemas/payment.py
from datetime import date as dt_date
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, Field

MonthLabel = Annotated[str, Field(max_length=100)]


class PaidMonthOut(BaseModel):
    month: str
    date: dt_date

    class Config:
        from_attributes = True


class PaymentCreate(BaseModel):
    student_id: int
    month: Union[int, MonthLabel]  # 3 or "الشهر الثالث" or anything the resolver understands
    amount: Optional[str] = Field(None, max_length=50)
    date: Optional[dt_date] = None


class PaymentUpdate(BaseModel):
    month: Optional[Union[int, MonthLabel]] = None
    amount: Optional[str] = Field(None, max_length=50)
    date: Optional[dt_date] = None


class PaymentOut(BaseModel):
    id: int
    student_id: int
    student_name: str
    student_code: str
    student_group: Optional[str] = None
    month: str
    date: dt_date
    amount: Optional[str] = None
    paid_months: List[PaidMonthOut] = []

    class Config:
        from_attributes = True


class PaymentStatus(BaseModel):
    student_id: int
    lesson_number: int
    billing_period: int
    first_lesson: int
    last_lesson: int
    paid: bool


class NonPayingStats(BaseModel):
    total_students: int
    paying_students: int
    non_paying_students: int
    payment_percentage: int
