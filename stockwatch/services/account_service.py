from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stockwatch.core.errors import StorageError, ValidationError
from stockwatch.models.user import User

logger = logging.getLogger(__name__)

PBKDF2_ROUNDS = 200_000


def _hash_password(password: str, salt: str, rounds: int = PBKDF2_ROUNDS) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def create_user(db: Session, email: str, password: str) -> int:
    email = normalize_email(email)
    if not email:
        raise ValidationError("email", "Email is required")
    if not password:
        raise ValidationError("password", "Password is required")

    salt = secrets.token_hex(16)
    user = User(
        email=email,
        password_hash=_hash_password(password, salt),
        password_salt=salt,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise StorageError("An account already exists for {}".format(email)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Unable to create account: {}".format(exc)) from exc

    logger.info("User created with id %s", user.id)
    return user.id


def user_exists(db: Session, email: str) -> bool:
    stmt = select(User.id).where(User.email == normalize_email(email)).limit(1)
    return db.execute(stmt).first() is not None


def verify_credentials(db: Session, email: str, password: str) -> bool:
    user = (
        db.execute(select(User).where(User.email == normalize_email(email)))
        .scalars()
        .first()
    )
    if user is None or not user.password_salt:
        return False
    computed = _hash_password(password or "", user.password_salt)
    return hmac.compare_digest(computed, user.password_hash)


__all__ = ["create_user", "normalize_email", "user_exists", "verify_credentials"]
