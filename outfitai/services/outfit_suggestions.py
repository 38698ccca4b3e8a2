"""Outfit suggestion service: the multi-stage suggestion pipeline.

Process:
1. Analyze the uploaded photo into clothing attributes
2. Ask for outfit styles built around those attributes
3. Render one styled image per outfit concurrently
4. Merge images into the suggestions, in their original order

Stages 1 and 2 are fatal on failure. Stage 3 tolerates failure per outfit: a
failed or timed-out render only marks its own suggestion ``imageStatus: error``
and the join always waits for every render.
"""

from dataclasses import dataclass
from typing import List, Optional
import asyncio

from outfitai.core.config import Settings, get_settings
from outfitai.core.exceptions import NoSuggestionsError
from outfitai.core.logging import get_logger
from outfitai.models.domain.analysis import ClothingAttributes
from outfitai.models.domain.image import ImagePayload, StylingHints
from outfitai.models.domain.outfit import OutfitSuggestion, RenderedOutfit, SuggestionSet
from outfitai.services.ai_processing import AIService

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderOutcome:
    """Tagged result of one render task: an image or the reason there is none."""
    image: Optional[ImagePayload] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.image is not None


class OutfitSuggestionService:
    """Service that turns one clothing photo into rendered outfit suggestions."""

    def __init__(
        self,
        ai_service: AIService,
        settings: Optional[Settings] = None
    ):
        self.ai_service = ai_service
        self.settings = settings or get_settings()

    async def generate_suggestions(
        self,
        image: ImagePayload,
        hints: Optional[StylingHints] = None
    ) -> SuggestionSet:
        """Run the full pipeline for one uploaded image.

        Raises:
            PipelineError: If analysis fails (propagated unchanged)
            NoSuggestionsError: If the recommendation stage fails or yields nothing usable
        """
        hints = hints or StylingHints()

        attributes = await self.ai_service.analyze_clothing_image(image)
        suggestions = await self._recommend(attributes, hints)

        outcomes = await asyncio.gather(*(
            self._render(image, suggestion, hints) for suggestion in suggestions
        ))

        rendered = [
            RenderedOutfit.complete(suggestion, outcome.image.data_uri)
            if outcome.ok else RenderedOutfit.failed(suggestion)
            for suggestion, outcome in zip(suggestions, outcomes)
        ]

        failures = {
            suggestion.style_name: outcome.error
            for suggestion, outcome in zip(suggestions, outcomes)
            if not outcome.ok
        }
        logger.info(
            "Outfit suggestions generated",
            count=len(rendered),
            image_failures=len(failures),
            failure_reasons=failures
        )
        return SuggestionSet(outfit_suggestions=rendered)

    async def _recommend(
        self,
        attributes: ClothingAttributes,
        hints: StylingHints
    ) -> List[OutfitSuggestion]:
        try:
            suggestions = await self.ai_service.recommend_outfit_styles(attributes, hints)
        except Exception as e:
            raise NoSuggestionsError(f"Failed to get outfit suggestions: {e}") from e

        if not suggestions:
            raise NoSuggestionsError("Model returned an empty list of outfit suggestions")

        expected = self.settings.EXPECTED_SUGGESTION_COUNT
        if len(suggestions) != expected:
            if self.settings.STRICT_SUGGESTION_COUNT:
                raise NoSuggestionsError(
                    f"Expected {expected} outfit suggestions, got {len(suggestions)}"
                )
            logger.warning(
                "Unexpected number of outfit suggestions",
                expected=expected,
                received=len(suggestions)
            )

        return suggestions

    async def _render(
        self,
        image: ImagePayload,
        suggestion: OutfitSuggestion,
        hints: StylingHints
    ) -> RenderOutcome:
        """Render one suggestion, converting any failure into a tagged outcome."""
        try:
            styled = await asyncio.wait_for(
                self.ai_service.render_outfit_image(image, suggestion, hints),
                timeout=self.settings.MODEL_TIMEOUT_SECONDS
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Styled image generation timed out",
                style_name=suggestion.style_name,
                timeout_seconds=self.settings.MODEL_TIMEOUT_SECONDS
            )
            return RenderOutcome(error="timeout")
        except Exception as e:
            logger.error(
                f"Failed to generate image for style: {suggestion.style_name}",
                error=e
            )
            return RenderOutcome(error=str(e))

        return RenderOutcome(image=styled)
