from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from coursetrack.core.deps import get_db
from coursetrack.core.security import decode_access_token
from coursetrack.models.user import User
from coursetrack.schemas.identity import CurrentUser

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _load_user(db: Session, token: str | None) -> User | None:
    if not token:
        return None

    claims = decode_access_token(token)
    if not claims or "sub" not in claims:
        return None

    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        return None

    return db.query(User).filter(User.id == user_id).first()


def get_optional_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser | None:
    """Resolved caller identity, or None when the request is anonymous.

    Progress routes take this variant so the service layer decides how to
    reject anonymous callers.
    """
    user = _load_user(db, token)
    if user is None:
        return None
    return CurrentUser.from_user(user)


def get_current_user(
    current_user: CurrentUser | None = Depends(get_optional_current_user),
) -> CurrentUser:
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user
