from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursetrack.core.config import ROLE_MENTOR
from coursetrack.core.current_user import get_current_user
from coursetrack.core.deps import get_db
from coursetrack.models.course import Course
from coursetrack.models.enrollment import EnrolledUser
from coursetrack.models.user import User
from coursetrack.schemas.enrollment import EnrollmentCreate, EnrollmentOut, MentorAssign
from coursetrack.schemas.identity import CurrentUser

router = APIRouter()


@router.post("", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
def enroll_me(
    payload: EnrollmentCreate,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    course = db.query(Course).filter(Course.id == payload.course_id).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    enrollment = EnrolledUser(username=me.username, course_id=payload.course_id)
    db.add(enrollment)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already enrolled")

    db.refresh(enrollment)
    return enrollment


@router.get("/me", response_model=list[EnrollmentOut])
def my_enrollments(
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    return (
        db.query(EnrolledUser)
        .filter(EnrolledUser.username == me.username)
        .order_by(EnrolledUser.id.asc())
        .all()
    )


@router.patch("/{enrollment_id}/mentor", response_model=EnrollmentOut)
def assign_mentor(
    enrollment_id: int,
    payload: MentorAssign,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    enrollment = db.query(EnrolledUser).filter(EnrolledUser.id == enrollment_id).first()
    if not enrollment:
        raise HTTPException(status_code=404, detail="Enrollment not found")

    course = db.query(Course).filter(Course.id == enrollment.course_id).first()
    if course.created_by_id != me.id and not me.is_admin_for(course.id):
        raise HTTPException(status_code=403, detail="Not a course admin")

    if payload.mentor_username is not None:
        mentor = db.query(User).filter(User.username == payload.mentor_username).first()
        if not mentor or mentor.role != ROLE_MENTOR:
            raise HTTPException(status_code=400, detail="Mentor not found")

    # existing submissions keep pointing at this enrollment, so a mentor
    # change moves them to the new mentor's statistics
    enrollment.mentor_username = payload.mentor_username
    db.commit()
    db.refresh(enrollment)
    return enrollment
