import datetime

import regex
import sqlalchemy
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from ggbench.apps.api.config import settings
from ggbench.auth import hash_password, verify_password
from ggbench.models.user import User
from ggbench.server.auth import AuthManager
from ggbench.util.logging import get_logger
from ggbench.util.postgres import get_managed_session

from ..transport_types.requests import LoginRequest, SignupRequest
from ..transport_types.responses import LoginResponse, SignupResponse, UserResponse

logger = get_logger(__name__)

user_router = APIRouter()

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)

MAX_USERNAME_BYTES = 64
MIN_PASSWORD_LENGTH = 6


def only_has_valid_characters(username: str) -> bool:
    invalid_chars = regex.compile(r"[^a-zA-Z0-9_\-\p{Extended_Pictographic}]")
    return not bool(invalid_chars.search(username))


def _validate_username(username: str):
    errors = []

    if len(username) == 0:
        return ["Username cannot be empty."]

    if len(username.encode("utf-8")) > MAX_USERNAME_BYTES:
        return [f"Username too long (must be at most {MAX_USERNAME_BYTES} bytes)."]

    if not only_has_valid_characters(username):
        errors.append("Username contains invalid characters.")

    return errors


def _username_taken(db: Session, username: str) -> bool:
    user_count = db.scalar(
        select(sqlalchemy.func.count(User.id)).where(
            User.username_normalized == username.lower()
        )
    )
    return user_count > 0


def _login_payload(user: User):
    access_token = am.create_access_token(
        data={
            "sub": str(user.id),
            "username": user.username,
            "scopes": user.scopes,
        },
        expires_delta=datetime.timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user.to_dict(),
    }


@user_router.post("/api/auth/signup", response_model=SignupResponse)
def signup(request: SignupRequest, db: Session = Depends(get_managed_session)):
    username = request.username.strip()

    errors = _validate_username(username)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="\n".join(errors),
        )

    if len(request.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )

    if _username_taken(db, username):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        )

    user = User(
        username=username,
        username_normalized=username.lower(),
        password_hash=hash_password(request.password),
        is_admin=False,
    )
    db.add(user)
    db.flush()

    logger.info("User signed up", user_id=user.id)

    return _login_payload(user)


@user_router.post("/api/auth/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_managed_session)):
    user = db.scalar(
        select(User).where(User.username_normalized == request.username.strip().lower())
    )

    if user is None or not verify_password(request.password, user.password_hash):
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _login_payload(user)


@user_router.get("/api/auth/me", response_model=UserResponse)
def get_me(
    user_id: int = Depends(am.get_current_user_id),
    db: Session = Depends(get_managed_session),
):
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user.to_dict()
