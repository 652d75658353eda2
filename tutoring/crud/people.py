# tutoring/crud/people.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from tutoring.core.security import generate_password, generate_student_code, get_password_hash
from tutoring.db.models.parent import Parent
from tutoring.db.models.student import Student


def get_student(db: Session, student_id: int) -> Optional[Student]:
    return db.query(Student).filter(Student.id == student_id).first()


def get_student_by_code(db: Session, code: str) -> Optional[Student]:
    return db.query(Student).filter(Student.code == code).first()


def list_students(db: Session, grade: Optional[str] = None, group: Optional[str] = None) -> List[Student]:
    query = db.query(Student)
    if grade:
        query = query.filter(Student.grade == grade)
    if group:
        query = query.filter(Student.group_name.ilike(f"%{group.strip()}%"))
    return query.order_by(Student.name).all()


def _unique_code(db: Session) -> str:
    while True:
        code = generate_student_code()
        if not get_student_by_code(db, code):
            return code


def create_student(db: Session, student_in) -> Tuple[Student, str]:
    """Creates the student and returns it with the plain password (shown once)."""
    password = generate_password()
    student = Student(
        name=student_in.name,
        code=_unique_code(db),
        group_name=student_in.group_name,
        grade=student_in.grade,
        phone=student_in.phone,
        parent_phone=student_in.parent_phone,
        hashed_password=get_password_hash(password),
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    return student, password


def update_student(db: Session, student: Student, student_in) -> Student:
    student.name = student_in.name
    student.phone = student_in.phone
    student.parent_phone = student_in.parent_phone
    student.group_name = student_in.group_name
    student.grade = student_in.grade
    if student_in.password:
        student.hashed_password = get_password_hash(student_in.password)
    # denormalized name on the linked parents
    for parent in db.query(Parent).filter(Parent.student_code == student.code).all():
        parent.student_name = student.name
    db.commit()
    db.refresh(student)
    return student


def delete_student(db: Session, student: Student) -> None:
    # attendance, payments (with paid months) and grades go through the cascade
    db.query(Parent).filter(Parent.student_code == student.code).delete(synchronize_session=False)
    db.delete(student)
    db.commit()


def get_parent(db: Session, parent_id: int) -> Optional[Parent]:
    return db.query(Parent).filter(Parent.id == parent_id).first()


def list_parents(db: Session) -> List[Parent]:
    return db.query(Parent).order_by(Parent.id).all()


def children_of(db: Session, parent: Parent) -> List[Student]:
    return db.query(Student).filter(Student.code == parent.student_code).all()


def create_parent(db: Session, phone: str, student: Student) -> Tuple[Parent, str]:
    password = generate_password()
    parent = Parent(
        phone=phone,
        student_code=student.code,
        student_name=student.name,
        hashed_password=get_password_hash(password),
    )
    db.add(parent)
    db.commit()
    db.refresh(parent)
    return parent, password


def login_candidates(db: Session, phone: str) -> List[Tuple[str, object]]:
    """Accounts registered with this phone, students before parents."""
    candidates = [("student", s) for s in db.query(Student).filter(Student.phone == phone).all()]
    candidates += [("parent", p) for p in db.query(Parent).filter(Parent.phone == phone).all()]
    return candidates
