from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from coursetrack.core.config import ROLE_INSTRUCTOR, ROLE_MENTOR
from coursetrack.core.current_user import get_optional_current_user
from coursetrack.core.deps import get_progress_aggregator
from coursetrack.schemas.identity import CurrentUser
from coursetrack.schemas.progress import AssignmentRosterRead, LineChartSeries, ProgressSummary
from coursetrack.services.progress import ProgressAggregator

# Anonymous requests are passed through; the aggregator rejects them.
router = APIRouter()


def _ensure_staff(caller: CurrentUser | None) -> None:
    if caller is not None and caller.role not in (ROLE_MENTOR, ROLE_INSTRUCTOR):
        raise HTTPException(status_code=403, detail="Mentor or instructor role required")


@router.get("/courses/{course_id}/pie", response_model=tuple[int, int, int])
def course_pie(
    course_id: int,
    caller: Optional[CurrentUser] = Depends(get_optional_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
):
    """[with points, without points, not submitted]"""
    return aggregator.course_pie_breakdown(caller, course_id)


@router.get(
    "/courses/{course_id}/mentors/{mentor_username}/pie",
    response_model=ProgressSummary,
)
def mentor_pie(
    course_id: int,
    mentor_username: str,
    caller: Optional[CurrentUser] = Depends(get_optional_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
):
    _ensure_staff(caller)
    return aggregator.mentor_breakdown(caller, mentor_username, course_id)


@router.get("/courses/{course_id}/students/me/pie", response_model=ProgressSummary)
def my_pie(
    course_id: int,
    caller: Optional[CurrentUser] = Depends(get_optional_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
):
    return aggregator.student_breakdown(caller, course_id)


@router.get(
    "/courses/{course_id}/students/{username}/pie",
    response_model=ProgressSummary,
)
def student_pie(
    course_id: int,
    username: str,
    caller: Optional[CurrentUser] = Depends(get_optional_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
):
    _ensure_staff(caller)
    return aggregator.student_breakdown(caller, course_id, username=username)


@router.get("/courses/{course_id}/line-chart", response_model=LineChartSeries)
def line_chart(
    course_id: int,
    mentor_username: Optional[str] = None,
    caller: Optional[CurrentUser] = Depends(get_optional_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
):
    return aggregator.line_chart(caller, course_id, mentor_username=mentor_username)


@router.get("/assignments/{assignment_id}/roster", response_model=AssignmentRosterRead)
def assignment_roster(
    assignment_id: int,
    caller: Optional[CurrentUser] = Depends(get_optional_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
):
    roster = aggregator.assignment_roster(caller, assignment_id)
    return AssignmentRosterRead.from_roster(roster)
