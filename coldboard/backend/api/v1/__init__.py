"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from coldboard.backend.api.v1.endpoints import board

router = APIRouter()

router.include_router(board.router, prefix="/board", tags=["board"])
