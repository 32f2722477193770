"""API routes."""

from fastapi import APIRouter

from stellar.api.routes import empires, locations, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
api_router.include_router(empires.router, prefix="/empires", tags=["empires"])
