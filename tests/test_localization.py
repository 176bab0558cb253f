"""
Localization tests - translation and voiceover overlay resolution.
"""

import logging

import pytest

from topicpath.classroom import (
    OverlayLookup,
    TranslationLookup,
    VoiceoverLookup,
    localize_concept_card,
    localize_content,
    resolve_localized_content,
)
from topicpath.schemas import (
    ConceptCard,
    SubtitledHtml,
    Translation,
    TranslationMapping,
    Voiceover,
    VoiceoverMapping,
)


EXPLANATION = SubtitledHtml(content_id="explanation", html="<p>Base</p>")
EXAMPLE = SubtitledHtml(content_id="worked_example_1", html="<p>Example</p>")


def make_translations() -> TranslationLookup:
    return TranslationLookup.from_mappings({
        "explanation": TranslationMapping(translation_mapping={
            "es": Translation(html="<p>Base (es)</p>"),
            "fr": Translation(html="<p>Base (fr)</p>", needs_update=True),
            "de": Translation(html="   "),
        }),
    })


def make_voiceovers() -> VoiceoverLookup:
    return VoiceoverLookup.from_mappings({
        "explanation": VoiceoverMapping(voiceover_mapping={
            "en": Voiceover(file_name="explanation-en.mp3", file_size_bytes=100),
            "es": Voiceover(file_name="explanation-es.mp3", needs_update=True),
        }),
    })


class TestOverlayLookup:
    """Test overlay lookup by content id and locale."""

    def test_lookup_present(self):
        assert make_translations().lookup("explanation", "es").html == "<p>Base (es)</p>"

    def test_lookup_missing_content_id(self):
        assert make_translations().lookup("worked_example_1", "es") is None

    def test_lookup_missing_locale(self):
        assert make_translations().lookup("explanation", "hi") is None

    def test_stale_translation_treated_as_absent(self):
        assert make_translations().lookup("explanation", "fr") is None

    def test_blank_translation_treated_as_absent(self):
        assert make_translations().lookup("explanation", "de") is None

    def test_locales_lists_complete_overlays(self):
        assert make_translations().locales("explanation") == ["es"]
        assert make_voiceovers().locales("explanation") == ["en"]
        assert make_translations().locales("unknown") == []

    def test_without_removes_content_ids(self):
        lookup = make_translations().without({"explanation"})
        assert lookup.content_ids() == set()
        assert lookup.lookup("explanation", "es") is None

    def test_without_keeps_lookup_type(self):
        lookup = make_voiceovers().without(set())
        assert isinstance(lookup, VoiceoverLookup)
        assert lookup.lookup("explanation", "en").file_name == "explanation-en.mp3"

    def test_base_lookup_requires_apply(self):
        with pytest.raises(TypeError):
            OverlayLookup({"explanation": {"es": Translation(html="<p>x</p>")}})


class TestResolveLocalizedContent:
    """Test base-form fallback and overlay application."""

    def test_translation_applied(self):
        result = resolve_localized_content(EXPLANATION, make_translations(), "es")
        assert result.html == "<p>Base (es)</p>"
        assert result.html_locale == "es"
        assert result.content_id == "explanation"

    def test_falls_back_to_base_for_missing_locale(self):
        result = resolve_localized_content(EXPLANATION, make_translations(), "hi")
        assert result.html == "<p>Base</p>"
        assert result.html_locale is None

    def test_falls_back_to_base_for_unmapped_content(self):
        result = resolve_localized_content(EXAMPLE, make_translations(), "es")
        assert result.html == "<p>Example</p>"
        assert not result.is_translated

    def test_fallback_is_repeatable(self):
        lookup = make_translations()
        first = resolve_localized_content(EXPLANATION, lookup, "hi")
        second = resolve_localized_content(EXPLANATION, lookup, "hi")
        assert first == second

    def test_input_not_modified(self):
        resolve_localized_content(EXPLANATION, make_translations(), "es")
        assert EXPLANATION.html == "<p>Base</p>"

    def test_voiceover_applied(self):
        result = resolve_localized_content(EXPLANATION, make_voiceovers(), "en")
        assert result.voiceover.file_name == "explanation-en.mp3"
        assert result.voiceover_locale == "en"
        assert result.html == "<p>Base</p>"

    def test_localize_content_applies_both_independently(self):
        result = localize_content(EXPLANATION, "es", make_translations(), make_voiceovers())
        assert result.html_locale == "es"
        # the Spanish voiceover needs an update, so there is no audio
        assert result.voiceover is None

    def test_localize_content_without_lookups(self):
        result = localize_content(EXPLANATION, "es")
        assert result.html == "<p>Base</p>"
        assert result.voiceover is None


class TestLocalizeConceptCard:
    """Test concept card localization."""

    def make_card(self, **overrides) -> ConceptCard:
        fields = dict(
            skill_id="skill_1",
            skill_description="Fractions",
            explanation=EXPLANATION,
            worked_example=[EXAMPLE],
            written_translation={
                "explanation": TranslationMapping(translation_mapping={"es": Translation(html="<p>Hola</p>")}),
                "worked_example_1": TranslationMapping(translation_mapping={"es": Translation(html="<p>Ejemplo</p>")}),
            },
        )
        fields.update(overrides)
        return ConceptCard(**fields)

    def test_all_units_resolved(self):
        result = localize_concept_card(self.make_card(), "es")
        assert result.locale == "es"
        assert result.explanation.html == "<p>Hola</p>"
        assert [e.html for e in result.worked_examples] == ["<p>Ejemplo</p>"]

    def test_unknown_locale_gives_base(self):
        result = localize_concept_card(self.make_card(), "pt")
        assert result.explanation.html == "<p>Base</p>"
        assert result.worked_examples[0].html == "<p>Example</p>"

    def test_dangling_overlays_warned_and_ignored(self, caplog):
        card = self.make_card(recorded_voiceover={
            "ghost": VoiceoverMapping(voiceover_mapping={"es": Voiceover(file_name="ghost.mp3")}),
        })
        with caplog.at_level(logging.WARNING, logger="topicpath.classroom.localization"):
            result = localize_concept_card(card, "es")
        assert "ghost" in caplog.text
        assert result.explanation.html == "<p>Hola</p>"
        assert result.explanation.voiceover is None
