"""
API v1 router - aggregates all endpoint modules (RESTful structure).
"""

from fastapi import APIRouter

from auction_house.api.v1.endpoints import auctions, characters, health, items

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(characters.router, prefix="/characters", tags=["characters"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(auctions.router, prefix="/auctions", tags=["auctions"])
