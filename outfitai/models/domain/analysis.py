# outfitai/models/domain/analysis.py
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from outfitai.utils.validators import validate_non_blank


class ClothingAttributes(BaseModel):
    """Key attributes of the uploaded clothing item, as seen by the vision model."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    item_type: str
    color: str
    fabric: str
    style: str

    @field_validator('item_type', 'color', 'fabric', 'style')
    @classmethod
    def not_blank(cls, v: str) -> str:
        is_valid, error = validate_non_blank(v)
        if not is_valid:
            raise ValueError(error)
        return v.strip()
