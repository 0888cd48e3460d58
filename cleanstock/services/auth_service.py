import logging
import re
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cleanstock.config import settings
from cleanstock.errors import AuthError, ConflictError, ValidationError
from cleanstock.models.user import ActivityLog, User, UserRole

logger = logging.getLogger(__name__)

# bcrypt only accepts up to 72 bytes; the allowed characters are single-byte
PASSWORD_MAX_BYTES = 72
PASSWORD_PATTERN = re.compile(r"[A-Za-z0-9]{6,72}")
PASSWORD_RULE = "Password must be 6 to 72 characters and contain only letters or digits"

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode()


def verify_password(password: str, hashed: str) -> bool:
    encoded = password.encode()
    if len(encoded) > PASSWORD_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode())


def check_password_policy(password: str) -> None:
    if not PASSWORD_PATTERN.fullmatch(password or ""):
        raise ValidationError(PASSWORD_RULE)


def create_access_token(user_id: str, email: str) -> str:
    payload = {
        "sub": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.InvalidTokenError:  # includes expiry
        return None


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def register(db: Session, name: str, role: UserRole, email: str, password: str) -> User:
    check_password_policy(password)
    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")
    user = User(
        name=name,
        role=role,
        email=email,
        password_hash=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.email, UserRole(user.role).value)
    return user


def login(db: Session, email: str, password: str) -> tuple[str, User]:
    """Return a fresh token and the user; unknown email and wrong password fail identically."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise AuthError(INVALID_CREDENTIALS, status_code=400)
    return create_access_token(user.id, user.email), user


def verify(db: Session, token: str | None) -> User:
    if not token:
        raise AuthError("Access denied", status_code=401)
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        raise AuthError("Invalid token", status_code=403)
    user = get_user_by_id(db, payload["sub"])
    if not user:
        raise AuthError("Invalid token", status_code=403)
    return user


# Activity logging

def log_activity(db: Session, user: User, action: str, detail: str = "", ip: str = "") -> None:
    """Write an audit entry after the action itself has been committed.

    A failure here is logged and rolled back; the action it describes stands.
    """
    user_id, email = user.id, user.email
    try:
        entry = ActivityLog(
            user_id=user_id,
            email=email,
            action=action,
            detail=detail,
            ip_address=ip,
        )
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not record activity %s for %s", action, email)


def get_activity_logs(db: Session, limit: int = 100, user_id: str | None = None) -> list[ActivityLog]:
    q = db.query(ActivityLog)
    if user_id:
        q = q.filter(ActivityLog.user_id == user_id)
    return q.order_by(ActivityLog.created_at.desc()).limit(limit).all()
