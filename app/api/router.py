"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.auth import router as auth_router
from app.api.biens import router as biens_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(biens_router)
