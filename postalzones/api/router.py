"""
Central API Router
Combines all API endpoints into a single router for main.py
"""
from fastapi import APIRouter

from .endpoints import postal, system

api_router = APIRouter()

api_router.include_router(postal.router, prefix="/api/postal", tags=["postal"])
api_router.include_router(system.router, prefix="/api/system", tags=["system"])
