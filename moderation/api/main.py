from fastapi import APIRouter

from moderation.api.routes import health, moderation

api_router = APIRouter()

api_router.include_router(moderation.router, prefix="/moderation", tags=["Moderation"])
api_router.include_router(health.router, prefix="", tags=["Health"])
