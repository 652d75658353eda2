# tutoring/api/parents.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import get_db, require_admin
from tutoring.core.security import get_password_hash
from tutoring.crud import people
from tutoring.schemas.parent import ParentCreate, ParentCreated, ParentOut, ParentUpdate
from tutoring.schemas.user import CurrentUser

router = APIRouter()


@router.get("/", response_model=List[ParentOut])
def list_parents(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return people.list_parents(db)


@router.post("/", response_model=ParentCreated)
def create_parent(
    parent_in: ParentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    student = people.get_student_by_code(db, parent_in.student_code)
    if not student:
        raise HTTPException(status_code=404, detail="كود الطالب غير موجود")
    parent, password = people.create_parent(db, parent_in.phone, student)
    return ParentCreated(**ParentOut.model_validate(parent).model_dump(), password=password)


@router.put("/{parent_id}", response_model=ParentOut)
def update_parent(
    parent_id: int,
    parent_in: ParentUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    parent = people.get_parent(db, parent_id)
    if not parent:
        raise HTTPException(status_code=404, detail="ولي الأمر غير موجود")

    student = people.get_student_by_code(db, parent_in.student_code)
    if not student:
        raise HTTPException(status_code=404, detail="كود الطالب غير موجود")

    parent.phone = parent_in.phone
    parent.student_code = student.code
    parent.student_name = student.name
    if parent_in.password:
        parent.hashed_password = get_password_hash(parent_in.password)

    try:
        db.commit()
        db.refresh(parent)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="تعذر تحديث ولي الأمر")
    return parent


@router.delete("/{parent_id}")
def delete_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    parent = people.get_parent(db, parent_id)
    if not parent:
        raise HTTPException(status_code=404, detail="ولي الأمر غير موجود")
    db.delete(parent)
    db.commit()
    return {"message": "تم حذف ولي الأمر"}
