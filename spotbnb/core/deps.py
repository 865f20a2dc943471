from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Path, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from spotbnb.core.errors import REVIEW_NOT_FOUND, SPOT_NOT_FOUND, NotFound
from spotbnb.core.security import decode_access_token
from spotbnb.db.session import get_db
from spotbnb.models.users import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def _user_from_token(token: str, db: Session) -> User | None:
    try:
        payload = decode_access_token(token)
        sub = payload.get("sub")
        user_id = int(sub) if sub is not None else None
    except (JWTError, ValueError):
        logger.info("Rejected bearer token")
        return None
    if user_id is None:
        return None
    return db.get(User, user_id)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    user = _user_from_token(token, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(
    token: str | None = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> User | None:
    if not token:
        return None
    return _user_from_token(token, db)


# Largest value an INTEGER primary key can hold (SQLite and PostgreSQL BIGINT).
MAX_ROW_ID = 2**63 - 1


def _row_id(raw: str, message: str) -> int:
    """Parse a path id; anything that cannot be a stored row is simply not found."""
    if not (raw.isascii() and raw.isdigit()):
        raise NotFound(message)
    value = int(raw)
    if not 1 <= value <= MAX_ROW_ID:
        raise NotFound(message)
    return value


def spot_id_path(spot_id: str = Path()) -> int:
    return _row_id(spot_id, SPOT_NOT_FOUND)


def review_id_path(review_id: str = Path()) -> int:
    return _row_id(review_id, REVIEW_NOT_FOUND)
