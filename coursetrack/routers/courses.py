from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from coursetrack.core.current_user import get_current_user
from coursetrack.core.deps import get_db
from coursetrack.core.permissions import require_instructor
from coursetrack.models.course import Course
from coursetrack.models.course_class import CourseClass
from coursetrack.models.user import User
from coursetrack.schemas.course import (
    ClassCreate,
    ClassDetail,
    ClassRead,
    CourseAdminAdd,
    CourseCreate,
    CourseRead,
    CourseWithClassCount,
)
from coursetrack.schemas.identity import CurrentUser

router = APIRouter()


def _ensure_course_exists(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def _ensure_can_manage_course(course: Course, user: CurrentUser) -> None:
    # the creator and the course admins can change a course
    if course.created_by_id != user.id and not user.is_admin_for(course.id):
        raise HTTPException(status_code=403, detail="Not a course admin")


@router.get("/", response_model=list[CourseWithClassCount])
def list_courses(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    rows = (
        db.query(Course, func.count(CourseClass.id).label("class_count"))
        .outerjoin(CourseClass, CourseClass.course_id == Course.id)
        .group_by(Course.id)
        .order_by(Course.id.asc())
        .all()
    )

    result: list[CourseWithClassCount] = []
    for course, class_count in rows:
        row = CourseWithClassCount.model_validate(course)
        row.class_count = int(class_count or 0)
        result.append(row)
    return result


@router.post("/", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    instructor: CurrentUser = Depends(require_instructor),
):
    creator = db.query(User).filter(User.id == instructor.id).first()
    course = Course(
        title=payload.title,
        description=payload.description,
        created_by_id=instructor.id,
    )
    # the creator administers their own course
    course.admins.append(creator)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.post("/{course_id}/admins", response_model=CourseRead)
def add_course_admin(
    course_id: int,
    payload: CourseAdminAdd,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    course = _ensure_course_exists(db, course_id)
    _ensure_can_manage_course(course, current_user)

    user = db.query(User).filter(User.username == payload.username).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user not in course.admins:
        course.admins.append(user)
        db.commit()
        db.refresh(course)
    return course


@router.get("/{course_id}/classes", response_model=list[ClassDetail])
def course_classes(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    _ensure_course_exists(db, course_id)
    return (
        db.query(CourseClass)
        .options(selectinload(CourseClass.attachments))
        .filter(CourseClass.course_id == course_id)
        .order_by(CourseClass.created_at.asc(), CourseClass.id.asc())
        .all()
    )


@router.post(
    "/{course_id}/classes",
    response_model=ClassRead,
    status_code=status.HTTP_201_CREATED,
)
def create_class(
    course_id: int,
    payload: ClassCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    course = _ensure_course_exists(db, course_id)
    _ensure_can_manage_course(course, current_user)

    c = CourseClass(course_id=course_id, title=payload.title, video_url=payload.video_url)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c
