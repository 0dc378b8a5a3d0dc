"""API v1 router aggregation."""

from fastapi import APIRouter

from medboard.api.v1.endpoints import auth, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
