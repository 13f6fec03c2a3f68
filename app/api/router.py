"""API router configuration.

This module configures the main API router and includes all endpoint routers
for the catalog and its authentication.
"""

from fastapi import APIRouter

from app.api.endpoints import auth, food_items, health, restaurants, reviews

api_router = APIRouter()

# Include all API routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
api_router.include_router(food_items.router, prefix="/food-items", tags=["food-items"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
