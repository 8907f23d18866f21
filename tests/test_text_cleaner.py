"""
Tests for the gazette text cleaner rule pipeline.
"""

import os
import re
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gazette_processing.text_cleaner import (
    GazetteTextCleaner, CleaningRule, HeaderTrimRule, SourceStampRule, ShortLineRule,
    CharacterClassRule, ArtifactLineRule, NewlineCollapseRule, PageNumberRule,
    default_rules, legacy_rules, normalize
)
from shared_utils.config_manager import CleaningConfig


ALLOWED_TEXT = re.compile(r'^[A-Za-z0-9 \t\n]*$')

RAW_GAZETTE = """Scanned by the archive unit
FEDERAL NEGARIT GAZETTE
OF THE FEDERAL DEMOCRATIC REPUBLIC OF ETHIOPIA
gA
Page 112
www.chilot.me
PROCLAMATION No. 25/1996
WHEREAS, it is necessary to establish Federal Courts;
PART ONE
General


12 13
PART TWO
Jurisdiction of Federal Courts — «Article» 78
"""

SAMPLES = [
    "",
    "   \n   \n  \n",
    "123 456 789",
    "!@#$%^&*()_+",
    "Hello 123 !@# World\n\n\n456 gA line\n789",
    "Line 1\n\tLine 2\n\n\n\t\tLine 3",
    "Unicode characters: ñ, é, ü",
    "xy!\nGood line here\n\n\n\n 7 8 9 \nTail",
    "gAbage line\n  gA indented\nKeep this one\r\nand this\r\n",
    RAW_GAZETTE,
    "FEDERAL NEGARIT GAZETTE www.chilot.me\nText FEDERAL NEGARIT GAZETTE",
    "cover\nFEDERAL, NEGARIT GAZETTE extra\nbody FEDERAL NEGARIT GAZETTE",
    "scan www.chilot.me FEDERAL NEGARIT GAZETTE\nbody text only",
]


class TestNormalize:
    """Behavior of the default pipeline through normalize()."""

    def test_empty_string(self):
        assert normalize("") == ""

    def test_whitespace_only(self):
        assert normalize("    \n    \n   \n").strip() == ""

    def test_only_special_characters(self):
        assert normalize("!@#$%^&*()_+") == ""

    def test_only_numbers(self):
        assert normalize("123 456 789") == ""

    def test_mixed_content(self):
        cleaned = normalize("Hello 123 !@# World\n\n\n456 gA line\n789")
        assert cleaned.startswith("Hello 123 World\n")
        assert "789" not in cleaned.split("\n")

    def test_newlines_and_tabs(self):
        assert normalize("Line 1\n\tLine 2\n\n\n\t\tLine 3") == "Line 1\n\tLine 2\n\t\tLine 3"

    def test_already_clean_content_is_unchanged(self):
        content = "This content is already clean"
        assert normalize(content) == content

    def test_unicode_characters_become_spaces(self):
        cleaned = normalize("Unicode characters: ñ, é, ü")
        assert cleaned.strip() == "Unicode characters"

    def test_non_string_input(self):
        assert GazetteTextCleaner().clean_text(None) == ""
        assert GazetteTextCleaner().clean_text(42) == ""

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_output_character_set(self, raw):
        cleaned = normalize(raw)
        assert ALLOWED_TEXT.match(cleaned)
        assert "  " not in cleaned

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_no_newline_runs_or_blank_lines(self, raw):
        cleaned = normalize(raw)
        assert "\n\n" not in cleaned
        assert not cleaned.startswith("\n")
        assert not cleaned.endswith("\n")
        for line in cleaned.split("\n") if cleaned else []:
            assert line.strip()
            assert not line.strip().isdigit()
            assert not line.startswith("gA")

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once

    def test_line_shrunk_by_character_normalization_is_dropped(self):
        assert normalize("xy!\nGood line here") == "Good line here"

    def test_stamped_masthead_defers_to_next_masthead(self):
        raw = "FEDERAL NEGARIT GAZETTE www.chilot.me\nText FEDERAL NEGARIT GAZETTE"
        assert normalize(raw) == "FEDERAL NEGARIT GAZETTE"
        assert normalize(normalize(raw)) == "FEDERAL NEGARIT GAZETTE"

    def test_punctuated_masthead_is_recognized(self):
        raw = "cover\nFEDERAL, NEGARIT GAZETTE extra\nbody FEDERAL NEGARIT GAZETTE"
        assert normalize(raw) == "FEDERAL NEGARIT GAZETTE extra\nbody FEDERAL NEGARIT GAZETTE"

    def test_full_gazette_page(self):
        cleaned = normalize(RAW_GAZETTE)
        lines = cleaned.split("\n")

        assert lines[0] == "FEDERAL NEGARIT GAZETTE"
        assert "Scanned by the archive unit" not in cleaned
        assert "chilot" not in cleaned
        assert "gA" not in lines
        assert "12 13" not in lines
        assert "PROCLAMATION No 25 1996" in lines
        assert "PART ONE" in lines
        assert lines[-1] == "Jurisdiction of Federal Courts Article 78"


class TestCleaningRules:
    """Each rule on its own."""

    def test_header_trim_discards_leading_noise(self):
        rule = HeaderTrimRule("FEDERAL NEGARIT GAZETTE")
        text = "cover page\nscan id 55\nFEDERAL NEGARIT GAZETTE\nBody"
        assert rule.apply(text) == "FEDERAL NEGARIT GAZETTE\nBody"

    def test_header_trim_without_marker_is_noop(self):
        rule = HeaderTrimRule("FEDERAL NEGARIT GAZETTE")
        text = "No masthead in this document\nBody"
        assert rule.apply(text) == text

    def test_header_trim_uses_first_occurrence(self):
        rule = HeaderTrimRule("MARK")
        assert rule.apply("junk MARK one MARK two") == "MARK one MARK two"

    def test_header_trim_skips_stamped_lines(self):
        rule = HeaderTrimRule("FEDERAL NEGARIT GAZETTE", ["chilot.me"])
        text = "FEDERAL NEGARIT GAZETTE chilot.me\nintro\nFEDERAL NEGARIT GAZETTE\nBody"
        assert rule.apply(text) == "FEDERAL NEGARIT GAZETTE\nBody"

    def test_header_trim_tolerates_punctuation_between_words(self):
        rule = HeaderTrimRule("FEDERAL NEGARIT GAZETTE")
        assert rule.apply("noise\nFEDERAL -- NEGARIT,GAZETTE\nBody") == "FEDERAL -- NEGARIT,GAZETTE\nBody"

    def test_header_trim_keeps_tabs_and_newlines_as_breaks(self):
        rule = HeaderTrimRule("FEDERAL NEGARIT GAZETTE")
        text = "noise\nFEDERAL\tNEGARIT GAZETTE\nFEDERAL\nNEGARIT GAZETTE"
        assert rule.apply(text) == text

    def test_source_stamp_removes_whole_line(self):
        rule = SourceStampRule(["chilot.me"])
        text = "Line one\nDownloaded from www.chilot.me page 4\nLine two"
        assert rule.apply(text) == "Line one\nLine two"

    def test_source_stamp_ignores_empty_tokens(self):
        rule = SourceStampRule([""])
        assert rule.apply("Line one\nLine two") == "Line one\nLine two"

    def test_short_line_threshold(self):
        rule = ShortLineRule(3)
        assert rule.apply("ab\n abc \nx\nLong enough") == " abc \nLong enough"

    def test_character_class_and_squeeze(self):
        rule = CharacterClassRule()
        assert rule.apply("Art. 5(1)—«x»\tend") == "Art 5 1 x \tend"

    def test_artifact_lines_are_blanked(self):
        rule = ArtifactLineRule("gA")
        text = "keep\n   \ngA seal\n12345\nkeep 2"
        assert rule.apply(text) == "keep\n\n\n\nkeep 2"

    def test_artifact_rule_without_prefix_keeps_text(self):
        rule = ArtifactLineRule("")
        assert rule.apply("gA seal\n42") == "gA seal\n"

    def test_newline_collapse(self):
        rule = NewlineCollapseRule()
        assert rule.apply("\n\na\n\n\nb\n") == "a\nb"

    def test_page_number_lines(self):
        rule = PageNumberRule()
        text = "Body text\n 12 34 \n7\nPage 7 of 9\nMore text"
        assert rule.apply(text) == "Body text\nPage 7 of 9\nMore text"

    def test_rules_are_callable(self):
        assert NewlineCollapseRule()("a\n\nb") == "a\nb"


class TestGazetteTextCleaner:
    """Pipeline composition and configuration."""

    def test_default_rule_order(self):
        cleaner = GazetteTextCleaner()
        assert cleaner.rule_names == [
            "header_trim", "source_stamp", "short_line", "character_class",
            "artifact_line", "newline_collapse", "page_number", "short_line",
        ]

    def test_refined_pipeline_extends_legacy_at_the_front(self):
        legacy_names = [rule.name for rule in legacy_rules()]
        default_names = [rule.name for rule in default_rules()]
        assert default_names[3:7] == legacy_names

    def test_legacy_pipeline_keeps_cover_page(self):
        legacy = GazetteTextCleaner(rules=legacy_rules())
        cleaned = legacy.clean_text("cover page\nFEDERAL NEGARIT GAZETTE\nBody text")
        assert cleaned == "cover page\nFEDERAL NEGARIT GAZETTE\nBody text"

    def test_legacy_pipeline_mixed_content(self):
        legacy = GazetteTextCleaner(rules=legacy_rules())
        cleaned = legacy.clean_text("Hello 123 !@# World\n\n\n456 gA line\n789")
        assert cleaned == "Hello 123 World\n456 gA line"

    def test_insert_rule_runs_in_position(self):
        class DropDraftLines(CleaningRule):
            name = "drop_draft"

            def apply(self, text):
                return "\n".join(line for line in text.split("\n") if "DRAFT" not in line)

        cleaner = GazetteTextCleaner()
        cleaner.insert_rule(0, DropDraftLines())

        assert cleaner.rule_names[0] == "drop_draft"
        assert cleaner.clean_text("DRAFT copy\nFinal wording") == "Final wording"

    def test_configured_thresholds(self):
        config = CleaningConfig(
            header_marker="OFFICIAL",
            source_stamp_tokens=["scanbot"],
            min_line_length=10,
            noise_line_prefix="zz",
        )
        cleaner = GazetteTextCleaner(config)
        raw = "preface\nOFFICIAL RECORD BOOK\nTiny one\nscanbot page marker\nzz noise line here\nA much longer line"

        assert cleaner.clean_text(raw) == "OFFICIAL RECORD BOOK\nA much longer line"

    def test_cleaning_stats(self):
        cleaner = GazetteTextCleaner()
        original = "Hello!!! World\n\n\n12"
        cleaned = cleaner.clean_text(original)
        stats = cleaner.get_cleaning_stats(original, cleaned)

        assert stats['original_length'] == len(original)
        assert stats['cleaned_length'] == len(cleaned)
        assert stats['reduction_chars'] == len(original) - len(cleaned)
        assert stats['cleaned_lines'] == 1
        assert stats['reduction_percent'] > 0

    def test_cleaning_stats_empty_original(self):
        stats = GazetteTextCleaner().get_cleaning_stats("", "")
        assert stats['reduction_percent'] == 0
