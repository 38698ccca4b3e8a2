"""Dependencies for FastAPI application.

This module defines dependencies used across API endpoints:
- The shared AI service created at startup
- The per-request suggestion pipeline
"""

from fastapi import Depends, Request

from outfitai.core.config import get_settings
from outfitai.services.ai_processing import AIService
from outfitai.services.outfit_suggestions import OutfitSuggestionService


# Service Dependencies
async def get_ai_service(request: Request) -> AIService:
    """Get the AI service attached to the application at startup."""
    service = getattr(request.app.state, 'ai_service', None)
    if service is None:
        service = AIService()
        request.app.state.ai_service = service
    return service


async def get_suggestion_service(
    ai_service: AIService = Depends(get_ai_service)
) -> OutfitSuggestionService:
    """Get a suggestion pipeline bound to the shared AI service."""
    return OutfitSuggestionService(ai_service, get_settings())
