# tutoring/schemas/parent.py
from pydantic import BaseModel
from typing import Optional


class ParentCreate(BaseModel):
    phone: str
    student_code: str


class ParentUpdate(ParentCreate):
    password: Optional[str] = None


class ParentOut(BaseModel):
    id: int
    phone: str
    student_code: str
    student_name: str

    class Config:
        from_attributes = True


class ParentCreated(ParentOut):
    password: str
