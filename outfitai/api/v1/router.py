"""Router configuration for the OutfitAI application.

This module combines the endpoint routers into the versioned API.
"""

from fastapi import APIRouter

# Import endpoint routers
from outfitai.api.v1.endpoints import fashion

# Create main router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(fashion.router, prefix="/fashion", tags=["fashion"])
