"""AI service integration for image and text processing.

This module wraps the OpenAI API for the three model calls of the suggestion
pipeline:
- Image analysis: one vision call that extracts clothing attributes
- Style recommendation: one structured-output call returning outfit styles
- Styled image rendering: one image-edit call per outfit style

Structured responses are requested with loosely-typed "wire" models (bottom of
this module) and then validated into the domain models. Provider failures
surface as ``UpstreamModelError``; output that does not fit the expected shape
surfaces as ``SchemaValidationError``. Nothing is retried.
"""

from typing import List, Optional, Type, TypeVar
import base64
import binascii
from pydantic import BaseModel, ValidationError
from openai import (
    AsyncOpenAI,
    ContentFilterFinishReasonError,
    LengthFinishReasonError,
    OpenAIError,
)

from outfitai.core.config import Settings, get_settings
from outfitai.core.exceptions import (
    ImageGenerationError,
    SchemaValidationError,
    UpstreamModelError,
)
from outfitai.core.logging import get_logger, monitor_performance
from outfitai.models.domain.analysis import ClothingAttributes
from outfitai.models.domain.image import ImagePayload, StylingHints
from outfitai.models.domain.item import ItemRecommendation
from outfitai.models.domain.outfit import OutfitSuggestion
from outfitai.services.prompts import PromptTemplates, render
from outfitai.utils.image_helpers import extension_for
from outfitai.utils.item_slots import assign_slots

# Initialize components
logger = get_logger(__name__)

T = TypeVar('T', bound=BaseModel)


def build_styled_image_prompt(
    suggestion: OutfitSuggestion,
    hints: Optional[StylingHints] = None
) -> str:
    """Render the image prompt for one outfit suggestion."""
    hints = hints or StylingHints()
    slots = assign_slots(suggestion.recommended_items)
    return render(
        PromptTemplates.STYLED_IMAGE,
        audience=hints.audience,
        style_name=suggestion.style_name,
        description=suggestion.description,
        tops=slots.tops,
        bottoms=slots.bottoms,
        footwear=slots.footwear,
        accessories=slots.accessories
    )


def _validate_into(model: Type[T], payload: BaseModel, what: str) -> T:
    """Validate a wire response into its domain model."""
    try:
        return model.model_validate(payload.model_dump())
    except ValidationError as e:
        raise SchemaValidationError(f"{what} did not match the expected shape: {e}") from e


class AIService:
    """Core AI service implementing OpenAI integrations."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        settings: Optional[Settings] = None
    ):
        """Initialize AI service; the OpenAI client is created on first use."""
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                base_url=self.settings.OPENAI_BASE_URL,
                timeout=self.settings.MODEL_TIMEOUT_SECONDS,
                max_retries=0
            )
        return self._client

    @property
    def status(self) -> str:
        if self._client is not None or self.settings.OPENAI_API_KEY:
            return "ready"
        return "not_configured"

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def _parse(
        self,
        model: str,
        messages: list,
        response_format: Type[T],
        max_tokens: int
    ) -> T:
        """Run a structured-output chat completion and return the parsed object."""
        try:
            response = await self.client.chat.completions.parse(
                model=model,
                messages=messages,
                response_format=response_format,
                max_completion_tokens=max_tokens
            )
        except (LengthFinishReasonError, ContentFilterFinishReasonError) as e:
            raise SchemaValidationError(f"Model output was cut off: {e}") from e
        except ValidationError as e:
            raise SchemaValidationError(f"Model output failed to parse: {e}") from e
        except OpenAIError as e:
            raise UpstreamModelError(f"Model call failed: {e}") from e

        if not response.choices:
            raise SchemaValidationError("Model returned no choices")

        message = response.choices[0].message
        if message.refusal:
            raise SchemaValidationError(f"Model refused the request: {message.refusal}")
        if message.parsed is None:
            raise SchemaValidationError("Model returned no structured output")

        return message.parsed

    @monitor_performance("analyze_clothing_image")
    async def analyze_clothing_image(self, image: ImagePayload) -> ClothingAttributes:
        """Identify the type, color, fabric and style of the pictured item.

        Args:
            image: Uploaded clothing photo

        Returns:
            ClothingAttributes extracted by the vision model
        """
        messages = [
            {"role": "system", "content": render(PromptTemplates.ANALYZE_SYSTEM)},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": render(PromptTemplates.ANALYZE_USER)},
                    {"type": "image_url", "image_url": {"url": image.data_uri}}
                ]
            }
        ]

        parsed = await self._parse(
            model=self.settings.VISION_MODEL,
            messages=messages,
            response_format=ClothingAnalysisResponse,
            max_tokens=300
        )
        attributes = _validate_into(ClothingAttributes, parsed, "Image analysis")

        logger.info(
            "Clothing image analyzed",
            item_type=attributes.item_type,
            color=attributes.color
        )
        return attributes

    @monitor_performance("recommend_outfit_styles")
    async def recommend_outfit_styles(
        self,
        attributes: ClothingAttributes,
        hints: Optional[StylingHints] = None
    ) -> List[OutfitSuggestion]:
        """Generate distinct outfit styles built around the analyzed item.

        All-or-nothing: one malformed suggestion fails the whole call.
        """
        hints = hints or StylingHints()
        prompt = render(
            PromptTemplates.SUGGEST_STYLES,
            item_type=attributes.item_type,
            color=attributes.color,
            fabric=attributes.fabric,
            style=attributes.style,
            count=self.settings.EXPECTED_SUGGESTION_COUNT,
            audience=hints.audience
        )

        parsed = await self._parse(
            model=self.settings.TEXT_MODEL,
            messages=[
                {"role": "system", "content": PromptTemplates.STYLIST_SYSTEM},
                {"role": "user", "content": prompt}
            ],
            response_format=OutfitSuggestionsResponse,
            max_tokens=3000
        )

        suggestions = [
            _validate_into(OutfitSuggestion, raw, f"Outfit suggestion {index}")
            for index, raw in enumerate(parsed.outfit_suggestions)
        ]
        logger.info("Outfit styles recommended", count=len(suggestions))
        return suggestions

    @monitor_performance("recommend_items")
    async def recommend_items(
        self,
        attributes: ClothingAttributes
    ) -> List[ItemRecommendation]:
        """Recommend items per style with an explanation of the combination."""
        prompt = render(
            PromptTemplates.RECOMMEND_ITEMS,
            item_type=attributes.item_type,
            color=attributes.color,
            fabric=attributes.fabric,
            style=attributes.style,
            count=self.settings.EXPECTED_SUGGESTION_COUNT
        )

        parsed = await self._parse(
            model=self.settings.TEXT_MODEL,
            messages=[
                {"role": "system", "content": PromptTemplates.STYLIST_SYSTEM},
                {"role": "user", "content": prompt}
            ],
            response_format=ItemRecommendationsResponse,
            max_tokens=2000
        )

        return [
            _validate_into(ItemRecommendation, raw, f"Item recommendation {index}")
            for index, raw in enumerate(parsed.recommendations)
        ]

    @monitor_performance("render_outfit_image")
    async def render_outfit_image(
        self,
        image: ImagePayload,
        suggestion: OutfitSuggestion,
        hints: Optional[StylingHints] = None
    ) -> ImagePayload:
        """Generate a photo of the uploaded item styled into ``suggestion``.

        Raises:
            ImageGenerationError: If the model answers without an image
            UpstreamModelError: If the call itself fails
        """
        prompt = build_styled_image_prompt(suggestion, hints)
        filename = f"item{extension_for(image.mime_type)}"

        try:
            result = await self.client.images.edit(
                model=self.settings.IMAGE_MODEL,
                image=(filename, image.data, image.mime_type),
                prompt=prompt,
                size=self.settings.IMAGE_SIZE,
                n=1
            )
        except OpenAIError as e:
            raise UpstreamModelError(f"Image generation call failed: {e}") from e

        b64_data = result.data[0].b64_json if result.data else None
        if not b64_data:
            raise ImageGenerationError(
                f"Image generation returned no image for style {suggestion.style_name}"
            )

        try:
            image_bytes = base64.b64decode(b64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageGenerationError("Image generation returned undecodable data") from e

        output_format = getattr(result, "output_format", None) or "png"
        return ImagePayload(mime_type=f"image/{output_format}", data=image_bytes)


# Pydantic models for structured responses
class ClothingAnalysisResponse(BaseModel):
    """Response model for clothing image analysis."""
    item_type: str
    color: str
    fabric: str
    style: str


class RecommendedItemResponse(BaseModel):
    """Response model for one recommended item."""
    type: str
    name: str
    shopping_link: str


class OutfitSuggestionResponse(BaseModel):
    """Response model for one outfit style."""
    style_name: str
    description: str
    explanation: str
    recommended_items: List[RecommendedItemResponse]


class OutfitSuggestionsResponse(BaseModel):
    """Response model for style recommendations."""
    outfit_suggestions: List[OutfitSuggestionResponse]


class ItemRecommendationResponse(BaseModel):
    """Response model for one style of the item recommendation flow."""
    style_name: str
    description: str
    explanation: str
    recommended_items: List[str]
    shopping_links: List[str]


class ItemRecommendationsResponse(BaseModel):
    """Response model for item recommendations."""
    recommendations: List[ItemRecommendationResponse]
