# tutoring/api/videos.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tutoring.api.deps import get_current_user, get_db, require_admin
from tutoring.core import billing
from tutoring.core.absence import should_block_for_absence
from tutoring.core.security import get_password_hash, verify_password
from tutoring.db.models.student import Student
from tutoring.db.models.video import Video
from tutoring.schemas.student import StudentOut
from tutoring.schemas.user import CurrentUser
from tutoring.schemas.video import BlockCandidatesRequest, BlockedUpdate, VideoCreate, VideoOut, VideoUnlock

logger = logging.getLogger(__name__)

router = APIRouter()


def video_out(video: Video, for_admin: bool, unlocked: bool = False) -> VideoOut:
    requires_password = bool(video.video_password)
    show_url = for_admin or unlocked or not requires_password
    return VideoOut(
        id=video.id,
        title=video.title,
        url=video.url if show_url else None,
        grade=video.grade,
        is_youtube=video.is_youtube,
        requires_password=requires_password,
        blocked_students=list(video.blocked_students or []) if for_admin else [],
    )


def _get_video(db: Session, video_id: int) -> Video:
    video = db.query(Video).filter(Video.id == video_id).first()
    if not video:
        raise HTTPException(status_code=404, detail="الفيديو غير موجود")
    return video


def _visible_to(video: Video, current_user: CurrentUser) -> bool:
    return video.grade == current_user.grade and current_user.id not in (video.blocked_students or [])


@router.post("/", response_model=VideoOut)
def create_video(
    video_in: VideoCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    video = Video(
        title=video_in.title,
        url=video_in.url,
        grade=video_in.grade,
        is_youtube=video_in.is_youtube,
        video_password=get_password_hash(video_in.password) if video_in.password else None,
        blocked_students=[],
    )
    db.add(video)
    db.commit()
    db.refresh(video)
    return video_out(video, for_admin=True)


@router.get("/", response_model=List[VideoOut])
def list_videos(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    videos = db.query(Video).order_by(Video.id.desc()).all()
    if current_user.role == "admin":
        return [video_out(v, for_admin=True) for v in videos]
    if current_user.role != "student":
        raise HTTPException(status_code=403, detail="للطلاب فقط")
    return [video_out(v, for_admin=False) for v in videos if _visible_to(v, current_user)]


@router.post("/{video_id}/unlock", response_model=VideoOut)
def unlock_video(
    video_id: int,
    body: VideoUnlock,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    video = _get_video(db, video_id)
    if current_user.role != "admin" and not _visible_to(video, current_user):
        raise HTTPException(status_code=403, detail="غير مسموح بمشاهدة هذا الفيديو")
    if video.video_password and not verify_password(body.password, video.video_password):
        raise HTTPException(status_code=401, detail="كلمة مرور الفيديو غير صحيحة")
    return video_out(video, for_admin=current_user.role == "admin", unlocked=True)


@router.delete("/{video_id}")
def delete_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    video = _get_video(db, video_id)
    db.delete(video)
    db.commit()
    return {"message": "تم حذف الفيديو"}


@router.post("/{video_id}/block-candidates", response_model=List[StudentOut])
def block_candidates(
    video_id: int,
    body: BlockCandidatesRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    video = _get_video(db, video_id)
    students = db.query(Student).filter(Student.grade == video.grade).order_by(Student.name).all()

    if body.reason == "absent":
        candidates = [
            s for s in students
            if should_block_for_absence(s.attendance_records, body.calendar_month)
        ]
    else:
        # resolved period, so "3" and "الشهر الثالث" both count as paid
        candidates = [
            s for s in students
            if body.calendar_month not in billing.paid_periods(s.payments)
        ]
    logger.info(f"Video {video_id}: {len(candidates)} block candidates ({body.reason})")
    return candidates


@router.put("/{video_id}/blocked", response_model=VideoOut)
def set_blocked_students(
    video_id: int,
    body: BlockedUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    video = _get_video(db, video_id)
    # new list object, so the JSON column is flagged dirty
    video.blocked_students = sorted(set(body.student_ids))
    db.commit()
    db.refresh(video)
    return video_out(video, for_admin=True)
