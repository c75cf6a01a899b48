from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    full_name: str | None = None


class UserRead(BaseModel):
    id: int
    username: str
    email: EmailStr
    full_name: str | None = None
    role: str

    class Config:
        from_attributes = True


class Me(UserRead):
    admin_for_courses: list[int] = []
