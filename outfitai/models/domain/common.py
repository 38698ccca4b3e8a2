# outfitai/models/domain/common.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from outfitai.models.domain.image import Gender, StylingHints


class PhotoRequest(BaseModel):
    """Request body carrying a clothing photo as a data URI."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    photo_data_uri: str = Field(
        ...,
        min_length=1,
        description="Photo of a clothing item as 'data:<mimetype>;base64,<encoded_data>'."
    )


class SuggestionRequest(PhotoRequest):
    """Request body for the full suggestion pipeline."""
    gender: Optional[Gender] = None

    @property
    def hints(self) -> StylingHints:
        return StylingHints(gender=self.gender)


class ErrorResponse(BaseModel):
    """Error body returned by the application exception handler."""
    error: str
