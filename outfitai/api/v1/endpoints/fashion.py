"""Fashion endpoints: outfit suggestions for an uploaded clothing photo."""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile

from outfitai.api.dependencies import get_ai_service, get_suggestion_service
from outfitai.core.logging import get_logger
from outfitai.models.domain.analysis import ClothingAttributes
from outfitai.models.domain.common import ErrorResponse, PhotoRequest, SuggestionRequest
from outfitai.models.domain.image import Gender, StylingHints
from outfitai.models.domain.item import ItemRecommendation
from outfitai.models.domain.outfit import SuggestionSet
from outfitai.services.ai_processing import AIService
from outfitai.services.outfit_suggestions import OutfitSuggestionService
from outfitai.utils.image_helpers import image_payload_from_bytes, load_image_payload

logger = get_logger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Image could not be processed"},
    502: {"model": ErrorResponse, "description": "AI model unavailable"},
}


@router.post(
    "/suggestions",
    response_model=SuggestionSet,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES
)
async def create_suggestions(
    body: SuggestionRequest,
    service: OutfitSuggestionService = Depends(get_suggestion_service)
):
    """Generate outfit suggestions with styled images for a data-URI photo."""
    image = load_image_payload(body.photo_data_uri)
    return await service.generate_suggestions(image, body.hints)


@router.post(
    "/suggestions/upload",
    response_model=SuggestionSet,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES
)
async def create_suggestions_from_upload(
    image: UploadFile = File(...),
    gender: Optional[Gender] = Form(None),
    service: OutfitSuggestionService = Depends(get_suggestion_service)
):
    """Generate outfit suggestions for a multipart photo upload."""
    contents = await image.read()
    payload = image_payload_from_bytes(contents, image.content_type)
    logger.info("Photo uploaded", filename=image.filename, size=len(contents))
    return await service.generate_suggestions(payload, StylingHints(gender=gender))


@router.post("/analyze", response_model=ClothingAttributes, responses=ERROR_RESPONSES)
async def analyze_photo(
    body: PhotoRequest,
    ai_service: AIService = Depends(get_ai_service)
):
    """Identify item type, color, fabric and style of the pictured item."""
    image = load_image_payload(body.photo_data_uri)
    return await ai_service.analyze_clothing_image(image)


@router.post(
    "/recommendations",
    response_model=List[ItemRecommendation],
    responses=ERROR_RESPONSES
)
async def recommend_items(
    attributes: ClothingAttributes,
    ai_service: AIService = Depends(get_ai_service)
):
    """Recommend items and explain the combinations for known item attributes."""
    return await ai_service.recommend_items(attributes)
