from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import can_view_student, get_current_user, get_db, require_admin
from tutoring.core.grading import performance_indicator
from tutoring.crud import people
from tutoring.db.models.grade import Grade
from tutoring.schemas.grade import GradeCreate, GradeOut, GradeUpdate
from tutoring.schemas.user import CurrentUser

router = APIRouter()


@router.post("/", response_model=GradeOut)
def add_grade(
    grade_in: GradeCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    student = people.get_student(db, grade_in.student_id)
    if not student:
        raise HTTPException(status_code=404, detail="الطالب غير موجود")

    grade = Grade(
        student_id=student.id,
        student_name=student.name,
        exam_name=grade_in.exam_name,
        score=grade_in.score,
        total_score=grade_in.total_score,
        date=date.today(),
        lesson_number=grade_in.lesson_number,
        group_name=student.group_name,
        performance_indicator=performance_indicator(grade_in.score, grade_in.total_score),
    )
    db.add(grade)
    db.commit()
    db.refresh(grade)
    return grade


@router.get("/", response_model=List[GradeOut])
def list_grades(
    student_id: Optional[int] = None,
    group: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    query = db.query(Grade)
    if current_user.role != "admin":
        # students and parents only ever see their own
        if student_id is None or not can_view_student(current_user, student_id):
            raise HTTPException(status_code=403, detail="غير مسموح")
    if student_id is not None:
        query = query.filter(Grade.student_id == student_id)
    if group:
        query = query.filter(Grade.group_name.ilike(f"%{group.strip()}%"))
    return query.order_by(Grade.date.desc(), Grade.id.desc()).all()


@router.put("/{grade_id}", response_model=GradeOut)
def update_grade(
    grade_id: int,
    grade_in: GradeUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    grade = db.query(Grade).filter(Grade.id == grade_id).first()
    if not grade:
        raise HTTPException(status_code=404, detail="الدرجة غير موجودة")

    for field, value in grade_in.model_dump(exclude_none=True).items():
        setattr(grade, field, value)
    grade.performance_indicator = performance_indicator(grade.score, grade.total_score)

    db.commit()
    db.refresh(grade)
    return grade


@router.delete("/{grade_id}")
def delete_grade(
    grade_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    grade = db.query(Grade).filter(Grade.id == grade_id).first()
    if not grade:
        raise HTTPException(status_code=404, detail="الدرجة غير موجودة")
    db.delete(grade)
    db.commit()
    return {"message": "تم حذف الدرجة"}
