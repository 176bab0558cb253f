"""
Locale overlay resolution - Merge base content with translation/voiceover overlays.

Provides:
- OverlayLookup: lookup(content_id, locale) over an overlay mapping
- Base-form fallback when no complete overlay exists for a locale
- Concept card localization
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Mapping, Optional, TypeVar

from topicpath.schemas import (
    ConceptCard,
    LocalizedContent,
    SubtitledHtml,
    Translation,
    TranslationMapping,
    Voiceover,
    VoiceoverMapping,
)


logger = logging.getLogger(__name__)

O = TypeVar("O", Translation, Voiceover)


class OverlayLookup(ABC, Generic[O]):
    """
    Lookup of complete overlays by content id and locale.

    Incomplete overlays are reported as absent so callers never render a
    mixed-locale fragment.
    """

    def __init__(self, overlays: Mapping[str, Mapping[str, O]]):
        self._overlays = overlays

    def lookup(self, content_id: str, locale: str) -> Optional[O]:
        """Get the overlay for a content unit in a locale, if complete."""
        by_locale = self._overlays.get(content_id)
        if not by_locale:
            return None
        overlay = by_locale.get(locale)
        if overlay is None or not self.is_complete(overlay):
            return None
        return overlay

    def content_ids(self) -> set[str]:
        return set(self._overlays)

    def locales(self, content_id: str) -> list[str]:
        """Locales with a complete overlay for a content unit."""
        by_locale = self._overlays.get(content_id) or {}
        return sorted(loc for loc, overlay in by_locale.items() if self.is_complete(overlay))

    def without(self, content_ids: set[str]) -> "OverlayLookup[O]":
        """Copy of this lookup without the given content ids."""
        return type(self)({
            cid: by_locale for cid, by_locale in self._overlays.items()
            if cid not in content_ids
        })

    def is_complete(self, overlay: O) -> bool:
        return not overlay.needs_update

    @abstractmethod
    def apply(self, base: LocalizedContent, overlay: O, locale: str) -> LocalizedContent:
        """Merge an overlay into already resolved content."""


class TranslationLookup(OverlayLookup[Translation]):
    """Written translations keyed by content id."""

    @classmethod
    def from_mappings(cls, mappings: Mapping[str, TranslationMapping]) -> "TranslationLookup":
        return cls({cid: m.translation_mapping for cid, m in mappings.items()})

    def is_complete(self, overlay: Translation) -> bool:
        return not overlay.needs_update and bool(overlay.html.strip())

    def apply(self, base: LocalizedContent, overlay: Translation, locale: str) -> LocalizedContent:
        return base.model_copy(update={"html": overlay.html, "html_locale": locale})


class VoiceoverLookup(OverlayLookup[Voiceover]):
    """Recorded voiceovers keyed by content id."""

    @classmethod
    def from_mappings(cls, mappings: Mapping[str, VoiceoverMapping]) -> "VoiceoverLookup":
        return cls({cid: m.voiceover_mapping for cid, m in mappings.items()})

    def is_complete(self, overlay: Voiceover) -> bool:
        return not overlay.needs_update and bool(overlay.file_name)

    def apply(self, base: LocalizedContent, overlay: Voiceover, locale: str) -> LocalizedContent:
        return base.model_copy(update={"voiceover": overlay, "voiceover_locale": locale})


# -----------------------------------------------------------------------------
# Resolution
# -----------------------------------------------------------------------------

def resolve_localized_content(
    content: SubtitledHtml | LocalizedContent,
    overlays: OverlayLookup,
    locale: str,
) -> LocalizedContent:
    """
    Resolve a content unit for a locale.

    Returns the unit with the locale's overlay applied, or its base form when
    the content id has no overlays, the locale is missing, or the overlay is
    incomplete. Absence is never an error.
    """
    base = content if isinstance(content, LocalizedContent) else LocalizedContent.from_base(content)
    overlay = overlays.lookup(base.content_id, locale)
    if overlay is None:
        return base
    return overlays.apply(base, overlay, locale)


def localize_content(
    content: SubtitledHtml,
    locale: str,
    translations: Optional[TranslationLookup] = None,
    voiceovers: Optional[VoiceoverLookup] = None,
) -> LocalizedContent:
    """Apply translation and voiceover overlays independently."""
    result = LocalizedContent.from_base(content)
    if translations is not None:
        result = resolve_localized_content(result, translations, locale)
    if voiceovers is not None:
        result = resolve_localized_content(result, voiceovers, locale)
    return result


@dataclass(frozen=True)
class LocalizedConceptCard:
    """Concept card with every content unit resolved for one locale."""
    skill_id: str
    skill_description: str
    locale: str
    explanation: LocalizedContent
    worked_examples: list[LocalizedContent]


def localize_concept_card(card: ConceptCard, locale: str) -> LocalizedConceptCard:
    """
    Resolve a concept card's explanation and worked examples for a locale.

    Overlay entries whose content id matches no unit in the card are logged
    as integrity warnings and ignored.
    """
    translations = TranslationLookup.from_mappings(card.written_translation)
    voiceovers = VoiceoverLookup.from_mappings(card.recorded_voiceover)

    dangling = card.dangling_content_ids()
    if dangling:
        logger.warning(
            f"Concept card {card.skill_id} has overlays for unknown content ids: {dangling}"
        )
        translations = translations.without(set(dangling))
        voiceovers = voiceovers.without(set(dangling))

    return LocalizedConceptCard(
        skill_id=card.skill_id,
        skill_description=card.skill_description,
        locale=locale,
        explanation=localize_content(card.explanation, locale, translations, voiceovers),
        worked_examples=[
            localize_content(example, locale, translations, voiceovers)
            for example in card.worked_example
        ],
    )
