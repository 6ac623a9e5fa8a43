from fastapi import APIRouter

from codepack.api.routes import generation, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(generation.router, tags=["generation"])
