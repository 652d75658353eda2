# tutoring/api/books.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import get_current_user, get_db, require_admin
from tutoring.db.models.book import Book
from tutoring.schemas.book import BookCreate, BookOut, BookUpdate
from tutoring.schemas.user import CurrentUser

router = APIRouter()


def _get_book(db: Session, book_id: int) -> Book:
    book = db.query(Book).filter(Book.id == book_id).first()
    if not book:
        raise HTTPException(status_code=404, detail="الكتاب غير موجود")
    return book


@router.post("/", response_model=BookOut)
def add_book(
    book_in: BookCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    book = Book(title=book_in.title, url=book_in.url, grade=book_in.grade)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


@router.get("/", response_model=List[BookOut])
def list_books(
    grade: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Admin sees every grade (optionally filtered); a student only their own."""
    query = db.query(Book)
    if current_user.role == "student":
        query = query.filter(Book.grade == current_user.grade)
    elif current_user.role == "admin":
        if grade:
            query = query.filter(Book.grade == grade)
    else:
        raise HTTPException(status_code=403, detail="للطلاب فقط")

    if search:
        query = query.filter(Book.title.ilike(f"%{search.strip()}%"))
    return query.order_by(Book.upload_date.desc(), Book.id.desc()).all()


@router.put("/{book_id}", response_model=BookOut)
def update_book(
    book_id: int,
    book_in: BookUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    book = _get_book(db, book_id)
    for field, value in book_in.model_dump(exclude_none=True).items():
        setattr(book, field, value)
    db.commit()
    db.refresh(book)
    return book


@router.delete("/{book_id}")
def delete_book(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    book = _get_book(db, book_id)
    db.delete(book)
    db.commit()
    return {"message": "تم حذف الكتاب"}
