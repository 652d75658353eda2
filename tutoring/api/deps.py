# tutoring/api/deps.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from tutoring.core.config import settings
from tutoring.core.scan_service import AttendanceScanner
from tutoring.core.security import decode_access_token
from tutoring.crud import people
from tutoring.db.session import SessionLocal
from tutoring.schemas.user import CurrentUser

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

ADMIN_ID = 0


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_scanner(request: Request) -> AttendanceScanner:
    return request.app.state.scanner


def admin_user() -> CurrentUser:
    return CurrentUser(id=ADMIN_ID, name=settings.ADMIN_NAME, role="admin", phone=settings.ADMIN_PHONE)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="تعذر التحقق من بيانات الدخول",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        role, _, raw_id = payload.get("sub", "").partition(":")
        user_id = int(raw_id)
    except (JWTError, ValueError):
        raise credentials_exception

    if role == "admin":
        return admin_user()
    if role == "student":
        student = people.get_student(db, user_id)
        if student:
            return CurrentUser(
                id=student.id,
                name=student.name,
                role="student",
                phone=student.phone,
                code=student.code,
                group_name=student.group_name,
                grade=student.grade,
            )
    if role == "parent":
        parent = people.get_parent(db, user_id)
        if parent:
            return CurrentUser(
                id=parent.id,
                name=parent.student_name,
                role="parent",
                phone=parent.phone,
                code=parent.student_code,
                children_ids=[s.id for s in people.children_of(db, parent)],
            )
    raise credentials_exception


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != "admin":
        raise HTTPException(status_code=403, detail="للمدير فقط")
    return current_user


def can_view_student(current_user: CurrentUser, student_id: int) -> bool:
    if current_user.role == "admin":
        return True
    if current_user.role == "student":
        return current_user.id == student_id
    return student_id in current_user.children_ids
