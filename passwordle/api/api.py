"""API router aggregation."""
from fastapi import APIRouter

from passwordle.api.endpoints import session

api_router = APIRouter(prefix="/api")
api_router.include_router(session.router)
