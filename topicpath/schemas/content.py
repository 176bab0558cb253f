"""
Content schemas for TopicPath.

Value types supplied by the authoring, localization and asset subsystems.
The engine treats them as opaque apart from the content identifier that
joins a content unit to its overlays.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class LessonThumbnail(BaseModel):
    model_config = ConfigDict(frozen=True)

    thumbnail_filename: Optional[str] = None
    background_color_rgb: int = Field(default=0, ge=0, le=0xFFFFFF)


class SubtitledHtml(BaseModel):
    """A single piece of translatable/voiceable content."""
    model_config = ConfigDict(frozen=True)

    content_id: str = Field(..., min_length=1)
    html: str = ""


# -----------------------------------------------------------------------------
# Overlays
# -----------------------------------------------------------------------------

class Translation(BaseModel):
    model_config = ConfigDict(frozen=True)

    html: str
    needs_update: bool = False  # stale relative to the base content


class TranslationMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    translation_mapping: dict[str, Translation] = {}  # locale -> translation


class Voiceover(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str
    file_size_bytes: int = Field(default=0, ge=0)
    needs_update: bool = False
    duration_seconds: float = Field(default=0.0, ge=0.0)


class VoiceoverMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    voiceover_mapping: dict[str, Voiceover] = {}  # locale -> voiceover


class LocalizedContent(BaseModel):
    """
    A content unit ready for rendering.

    html_locale / voiceover_locale are None when the base (untranslated,
    unvoiced) form is used.
    """
    model_config = ConfigDict(frozen=True)

    content_id: str
    html: str
    html_locale: Optional[str] = None
    voiceover: Optional[Voiceover] = None
    voiceover_locale: Optional[str] = None

    @classmethod
    def from_base(cls, content: SubtitledHtml) -> "LocalizedContent":
        return cls(content_id=content.content_id, html=content.html)

    @property
    def is_translated(self) -> bool:
        return self.html_locale is not None
