from pydantic import BaseModel
from typing import List, Literal, Optional

Role = Literal["admin", "student", "parent"]


class UserLogin(BaseModel):
    phone: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str
    role: Role


class CurrentUser(BaseModel):
    id: int
    name: str
    role: Role
    phone: Optional[str] = None
    code: Optional[str] = None
    group_name: Optional[str] = None
    grade: Optional[str] = None
    children_ids: List[int] = []
