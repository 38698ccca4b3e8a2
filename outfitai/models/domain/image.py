# outfitai/models/domain/image.py
import base64
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


class Gender(str, Enum):
    """Who the outfit should be styled for."""
    MALE = "male"
    FEMALE = "female"
    UNISEX = "unisex"


class ImagePayload(BaseModel):
    """Self-describing binary image: raw bytes plus their MIME type.

    Crosses every boundary as ``data:<mime-type>;base64,<payload>``.
    """
    model_config = ConfigDict(frozen=True)

    mime_type: str
    data: bytes

    @field_validator('mime_type')
    @classmethod
    def mime_type_is_image(cls, v: str) -> str:
        v = v.strip().lower()
        if not v.startswith('image/'):
            raise ValueError(f'Not an image MIME type: {v}')
        return v

    @field_validator('data')
    @classmethod
    def data_not_empty(cls, v: bytes) -> bytes:
        if not v:
            raise ValueError('Image data cannot be empty')
        return v

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode('ascii')
        return f"data:{self.mime_type};base64,{encoded}"


class StylingHints(BaseModel):
    """Optional caller hints that steer recommendations and rendering."""
    model_config = ConfigDict(frozen=True)

    gender: Optional[Gender] = None

    @property
    def audience(self) -> str:
        """Phrase describing who the outfits are for, used inside prompts."""
        if self.gender == Gender.MALE:
            return "a man"
        if self.gender == Gender.FEMALE:
            return "a woman"
        return "a person (man or woman)"
