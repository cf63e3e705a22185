"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from adminauth.api.v1.endpoints import auth, health

api_router = APIRouter()

# Login, refresh, logout
api_router.include_router(auth.router)

# Liveness / DB connectivity
api_router.include_router(health.router)
