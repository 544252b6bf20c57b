"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import cut_score, protocols, safety, spar, targets

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    targets.router, prefix="/targets", tags=["Day targets"]
)
api_router.include_router(
    spar.router, prefix="/spar", tags=["SPAR slices"]
)
api_router.include_router(
    cut_score.router, prefix="/cut-score", tags=["Cut Score"]
)
api_router.include_router(
    protocols.router, prefix="/protocols", tags=["Protocols"]
)
api_router.include_router(
    safety.router, prefix="/safety", tags=["Weight safety"]
)
