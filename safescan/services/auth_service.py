"""
Account helpers for the /api/auth routes.

Passwords are stored as bcrypt hashes. Sessions are opaque random tokens
presented as `Authorization: Bearer`; only their sha256 digests are kept,
at most MAX_TOKENS_PER_USER per user.
"""
import hashlib
import logging
import secrets
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from safescan.config import MAX_TOKENS_PER_USER
from safescan.models import User, AuthToken

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, email: str, password: str, name: Optional[str] = None) -> User:
    user = User(email=email.lower(), name=name, hashed_password=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.user_id)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_token(db: Session, user: User) -> str:
    """Create a bearer token for `user`, keeping only their newest few."""
    token = secrets.token_urlsafe(32)
    db.add(AuthToken(token_hash=_hash_token(token), user_id=user.user_id))
    db.flush()

    stale = (
        db.query(AuthToken)
        .filter(AuthToken.user_id == user.user_id)
        .order_by(AuthToken.created_at.desc())
        .offset(MAX_TOKENS_PER_USER)
        .all()
    )
    for row in stale:
        db.delete(row)
    db.commit()
    return token


def revoke_token(db: Session, token: str) -> None:
    db.query(AuthToken).filter(AuthToken.token_hash == _hash_token(token)).delete()
    db.commit()


def get_user_for_token(db: Session, token: str) -> Optional[User]:
    row = db.query(AuthToken).filter(AuthToken.token_hash == _hash_token(token)).first()
    if not row:
        return None
    return db.query(User).filter(User.user_id == row.user_id).first()
