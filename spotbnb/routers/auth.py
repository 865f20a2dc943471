from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from spotbnb.core.security import create_access_token, get_password_hash, verify_password
from spotbnb.db.session import get_db
from spotbnb.models.users import User
from spotbnb.schemas.auth import RegisterRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def find_existing_user(db: Session, *, email: str, username: str) -> User | None:
    return db.scalar(select(User).where(or_(User.email == email, User.username == username)))


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> TokenResponse:
    email = payload.email.lower()
    existing = find_existing_user(db, email=email, username=payload.username)
    if existing:
        field = "email" if existing.email == email else "username"
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"User with that {field} already exists")

    user = User(
        email=email,
        username=payload.username,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        password_hash=get_password_hash(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent registration took the email or username after our check.
        db.rollback()
        logger.warning("Duplicate registration rejected by constraint: %s", email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="User with that email or username already exists"
        ) from None
    db.refresh(user)
    logger.info("User %s registered", user.id)

    return TokenResponse(access_token=create_access_token(user.id))


@router.post("/token", response_model=TokenResponse)
def login(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)) -> TokenResponse:
    credential = form.username.strip()
    user = db.scalar(select(User).where(or_(User.email == credential.lower(), User.username == credential)))
    if not user or not verify_password(form.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token(user.id))
