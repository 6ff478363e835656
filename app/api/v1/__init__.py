"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import analysis

api_router = APIRouter()

api_router.include_router(analysis.router, prefix="/analysis", tags=["Performance Analysis"])
