"""Auth API: login, logout, current caller."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.db import crud
from app.db.engine import get_db
from app.dependencies import get_settings_dep, require_auth
from app.services.auth import (
    AuthContext, SESSION_COOKIE_NAME, create_session, extract_token,
    remove_session, verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/login")
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    user = await crud.get_user_by_email(db, body.email)
    if not user or not user.is_active or not verify_password(body.password, user.password_hash):
        logger.info("Failed login for %s", body.email)
        return JSONResponse(
            status_code=401,
            content={"error": "Identifiants invalides", "message": "Email ou mot de passe incorrect"},
        )

    ip = request.client.host if request.client else ""
    token = await create_session(user, db, ip_address=ip)

    user.last_login_at = datetime.now(timezone.utc)
    await db.commit()

    response = JSONResponse(content={"ok": True, "user_id": user.id, "role": user.role, "token": token})
    response.set_cookie(
        SESSION_COOKIE_NAME, token,
        httponly=True, samesite="lax",
        max_age=86400 * settings.auth.session_max_age_days,
    )
    return response


@router.post("/logout")
async def logout(request: Request, db: AsyncSession = Depends(get_db)):
    token = extract_token(request)
    if token:
        await remove_session(token, db)
    response = JSONResponse(content={"ok": True})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/me")
async def me(auth: AuthContext = Depends(require_auth)):
    return {
        "user_id": auth.user_id,
        "email": auth.email,
        "role": auth.role,
        "nom": auth.nom,
        "prenom": auth.prenom,
    }
