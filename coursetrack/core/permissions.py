from fastapi import Depends, HTTPException, status

from coursetrack.core.config import ROLE_INSTRUCTOR, ROLE_MENTOR
from coursetrack.core.current_user import get_current_user
from coursetrack.schemas.identity import CurrentUser


def require_instructor(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != ROLE_INSTRUCTOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Instructor role required",
        )
    return current_user


def require_staff(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    # mentors and instructors can look at other users' progress
    if current_user.role not in (ROLE_MENTOR, ROLE_INSTRUCTOR):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Mentor or instructor role required",
        )
    return current_user
