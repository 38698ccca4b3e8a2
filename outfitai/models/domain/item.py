# outfitai/models/domain/item.py
from typing import List
from pydantic import BaseModel, ConfigDict, HttpUrl, field_validator
from pydantic.alias_generators import to_camel

from outfitai.utils.validators import validate_non_blank


class RecommendedItem(BaseModel):
    """A single complementary piece with a link to a similar product."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    type: str
    name: str
    shopping_link: HttpUrl

    @field_validator('type', 'name')
    @classmethod
    def not_blank(cls, v: str) -> str:
        is_valid, error = validate_non_blank(v)
        if not is_valid:
            raise ValueError(error)
        return v.strip()


class ItemRecommendation(BaseModel):
    """Outfit style with items given as plain names and links listed separately."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    style_name: str
    description: str
    explanation: str
    recommended_items: List[str]
    shopping_links: List[HttpUrl]

    @field_validator('recommended_items')
    @classmethod
    def items_not_empty(cls, v: List[str]) -> List[str]:
        items = [item.strip() for item in v if item.strip()]
        if not items:
            raise ValueError('At least one recommended item is required')
        return items
