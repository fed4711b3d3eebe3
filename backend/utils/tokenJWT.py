# utils/tokenJWT.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User

logger = logging.getLogger(__name__)

# Register terminals send "Authorization: Bearer <token>"
bearer_scheme = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Signs `data` (sub = email, role) with an expiry of one shift by default."""
    claims = dict(data)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims["exp"] = datetime.now(timezone.utc) + lifetime
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_subject(token: str) -> str:
    """Returns the account email carried by a valid token."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug("Rejected token: %s", e)
        raise _unauthorized()
    email = claims.get("sub")
    if not email:
        raise _unauthorized()
    return email


# Signed-in register user, admin or cashier
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    email = decode_subject(credentials.credentials)
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise _unauthorized()
    return user


def role_required(*allowed_roles):
    """Dependency that lets through only users whose role is listed."""
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        role = (current_user.role or "").lower()
        if allowed_roles and role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user
    return _checker
