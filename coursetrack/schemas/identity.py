from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """The authenticated caller, resolved once per request and passed down explicitly."""

    id: int
    username: str
    role: str
    admin_for_courses: list[int] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user) -> "CurrentUser":
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            admin_for_courses=[c.id for c in user.admin_for_courses],
        )

    def is_admin_for(self, course_id: int | None) -> bool:
        return course_id is not None and course_id in self.admin_for_courses
