"""Authentication service: DB-backed sessions and bcrypt passwords."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
from fastapi import Request, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import User, UserSession

SESSION_COOKIE_NAME = "session_token"
ROLES = ("vendeur", "acheteur", "admin")


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller, passed explicitly to routes and CRUD calls."""

    user_id: int
    role: str  # 'vendeur' | 'acheteur' | 'admin'
    email: str
    nom: str = ""
    prenom: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def hash_token(token: str) -> str:
    """SHA-256 hash of a session token for DB storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


async def create_session(user: User, db: AsyncSession, ip_address: str = "") -> str:
    """Create a DB-backed session. Returns the raw token (not the hash)."""
    token = secrets.token_urlsafe(48)
    max_age = get_settings().auth.session_max_age_days
    session = UserSession(
        user_id=user.id,
        token_hash=hash_token(token),
        expires_at=datetime.now(timezone.utc) + timedelta(days=max_age),
        ip_address=ip_address,
    )
    db.add(session)
    await db.commit()
    return token


async def validate_session(token: str, db: AsyncSession) -> User | None:
    """Look up session by token hash, return User if valid."""
    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == hash_token(token))
    )
    session = result.scalars().first()
    if not session or _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        return None

    user = await db.get(User, session.user_id)
    if not user or not user.is_active:
        return None
    return user


async def remove_session(token: str, db: AsyncSession) -> None:
    """Delete a session by token."""
    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == hash_token(token))
    )
    session = result.scalars().first()
    if session:
        await db.delete(session)
        await db.commit()


def extract_token(request: Request) -> str | None:
    """Session token from the cookie, else from an Authorization: Bearer header."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_user(request: Request, db: AsyncSession) -> AuthContext:
    """Read the session token, validate, return AuthContext or raise 401."""
    token = extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Token d'accès requis")

    user = await validate_session(token, db)
    if not user:
        raise HTTPException(status_code=401, detail="Session expirée ou invalide")

    return AuthContext(
        user_id=user.id,
        role=user.role,
        email=user.email,
        nom=user.nom,
        prenom=user.prenom,
    )
