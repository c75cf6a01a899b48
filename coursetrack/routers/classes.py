from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload, selectinload

from coursetrack.core.current_user import get_current_user
from coursetrack.core.deps import get_db
from coursetrack.models.attachment import Attachment
from coursetrack.models.course_class import CourseClass
from coursetrack.schemas.attachment import AttachmentCreate, AttachmentRead
from coursetrack.schemas.course import ClassWithCourse
from coursetrack.schemas.identity import CurrentUser

router = APIRouter()


def _ensure_class_exists(db: Session, class_id: int) -> CourseClass:
    c = (
        db.query(CourseClass)
        .options(joinedload(CourseClass.course), selectinload(CourseClass.attachments))
        .filter(CourseClass.id == class_id)
        .first()
    )
    if not c:
        raise HTTPException(status_code=404, detail="Class not found")
    return c


@router.get("/{class_id}", response_model=ClassWithCourse)
def class_details(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _ensure_class_exists(db, class_id)


@router.post(
    "/{class_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_attachment(
    class_id: int,
    payload: AttachmentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    c = _ensure_class_exists(db, class_id)
    if c.course.created_by_id != current_user.id and not current_user.is_admin_for(c.course_id):
        raise HTTPException(status_code=403, detail="Not a course admin")

    a = Attachment(
        class_id=c.id,
        course_id=c.course_id,
        title=payload.title,
        description=payload.description,
        attachment_type=payload.attachment_type,
        max_submissions=payload.max_submissions,
        due_at=payload.due_at,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
