# outfitai/models/domain/outfit.py
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from outfitai.models.domain.item import RecommendedItem
from outfitai.utils.validators import validate_non_blank


class ImageStatus(str, Enum):
    """Outcome of rendering the styled preview for one suggestion."""
    COMPLETE = "complete"
    ERROR = "error"


class OutfitSuggestion(BaseModel):
    """A named styling concept built around the uploaded item."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    style_name: str
    description: str
    explanation: str
    recommended_items: List[RecommendedItem]

    @field_validator('style_name', 'description', 'explanation')
    @classmethod
    def not_blank(cls, v: str) -> str:
        is_valid, error = validate_non_blank(v)
        if not is_valid:
            raise ValueError(error)
        return v.strip()

    @field_validator('recommended_items')
    @classmethod
    def has_items(cls, v: List[RecommendedItem]) -> List[RecommendedItem]:
        if not v:
            raise ValueError('At least one recommended item is required')
        return v


class RenderedOutfit(OutfitSuggestion):
    """Outfit suggestion with the result of its image render attached."""
    ai_styled_image: Optional[str] = None
    image_status: ImageStatus

    @model_validator(mode='after')
    def image_matches_status(self) -> 'RenderedOutfit':
        if self.image_status == ImageStatus.ERROR and self.ai_styled_image is not None:
            raise ValueError('A failed render cannot carry an image')
        if self.image_status == ImageStatus.COMPLETE and not self.ai_styled_image:
            raise ValueError('A complete render requires a non-empty image')
        return self

    @classmethod
    def complete(cls, suggestion: OutfitSuggestion, image_data_uri: str) -> 'RenderedOutfit':
        return cls(
            **suggestion.model_dump(),
            ai_styled_image=image_data_uri,
            image_status=ImageStatus.COMPLETE
        )

    @classmethod
    def failed(cls, suggestion: OutfitSuggestion) -> 'RenderedOutfit':
        return cls(**suggestion.model_dump(), image_status=ImageStatus.ERROR)


class SuggestionSet(BaseModel):
    """Terminal output of one suggestion request."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    outfit_suggestions: List[RenderedOutfit]
