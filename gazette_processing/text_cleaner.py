"""
Gazette Text Cleaner

Role: Strip OCR/scan noise from raw gazette text through an ordered list of
rewrite rules. Each rule works on the output of the previous one, so the
order of the list is part of the behavior.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from shared_utils.config_manager import CleaningConfig

logger = logging.getLogger(__name__)


class CleaningRule:
    """A single string-to-string rewrite step."""

    name = "rule"

    def apply(self, text: str) -> str:
        raise NotImplementedError

    def __call__(self, text: str) -> str:
        return self.apply(text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class HeaderTrimRule(CleaningRule):
    """
    Discard everything before the first document-start marker.

    Marker words may be separated by any run of characters that character
    normalization squeezes to one space, so "FEDERAL, NEGARIT GAZETTE" counts.
    Occurrences on lines carrying a skip token are ignored; those lines are
    deleted by the source-stamp rule that follows.
    """

    name = "header_trim"

    def __init__(self, marker: str, skip_tokens: Iterable[str] = ()):
        self.marker = marker
        self.skip_tokens = [token for token in skip_tokens if token]
        words = re.findall(r'[A-Za-z0-9]+', marker or '')
        self.pattern = (
            re.compile(r'[^A-Za-z0-9\t\n]+'.join(re.escape(word) for word in words))
            if words else None
        )

    def apply(self, text: str) -> str:
        if self.pattern is None:
            return text
        for match in self.pattern.finditer(text):
            if not self._on_skipped_line(text, match.start(), match.end()):
                return text[match.start():]
        return text

    def _on_skipped_line(self, text: str, start: int, end: int) -> bool:
        if not self.skip_tokens:
            return False
        line_start = text.rfind('\n', 0, start) + 1
        line_end = text.find('\n', end)
        line = text[line_start:line_end if line_end >= 0 else len(text)]
        return any(token in line for token in self.skip_tokens)


class SourceStampRule(CleaningRule):
    """Delete every line carrying a watermark/URL stamp."""

    name = "source_stamp"

    def __init__(self, tokens: Iterable[str]):
        self.tokens = [token for token in tokens if token]

    def apply(self, text: str) -> str:
        if not self.tokens:
            return text
        lines = text.split('\n')
        return '\n'.join(
            line for line in lines
            if not any(token in line for token in self.tokens)
        )


class ShortLineRule(CleaningRule):
    """Delete lines whose trimmed length is below the minimum."""

    name = "short_line"

    def __init__(self, min_length: int):
        self.min_length = min_length

    def apply(self, text: str) -> str:
        lines = text.split('\n')
        return '\n'.join(line for line in lines if len(line.strip()) >= self.min_length)


class CharacterClassRule(CleaningRule):
    """Map every character outside [A-Za-z0-9 \\t\\n] to a space and squeeze spaces."""

    name = "character_class"

    non_text_pattern = re.compile(r'[^A-Za-z0-9 \t\n]')
    space_run_pattern = re.compile(r' {2,}')

    def apply(self, text: str) -> str:
        text = self.non_text_pattern.sub(' ', text)
        return self.space_run_pattern.sub(' ', text)


class ArtifactLineRule(CleaningRule):
    """Blank out whitespace-only lines, noise-prefixed lines and digit-only lines."""

    name = "artifact_line"

    def __init__(self, noise_prefix: str):
        self.noise_prefix = noise_prefix
        alternatives = [r'[ \t]*', r'\d+']
        if noise_prefix:
            alternatives.append(re.escape(noise_prefix) + r'.*')
        self.pattern = re.compile(r'^(?:' + '|'.join(alternatives) + r')$', re.MULTILINE)

    def apply(self, text: str) -> str:
        return self.pattern.sub('', text)


class NewlineCollapseRule(CleaningRule):
    """Collapse newline runs to one newline and trim newlines at both ends."""

    name = "newline_collapse"

    newline_run_pattern = re.compile(r'\n{2,}')

    def apply(self, text: str) -> str:
        return self.newline_run_pattern.sub('\n', text).strip('\n')


class PageNumberRule(CleaningRule):
    """Delete page-number lines such as '12' or '12 34', then collapse newlines."""

    name = "page_number"

    pattern = re.compile(r'^[ \t]*\d+(?:[ \t]+\d+)*[ \t]*$', re.MULTILINE)

    def __init__(self):
        self.collapse = NewlineCollapseRule()

    def apply(self, text: str) -> str:
        return self.collapse.apply(self.pattern.sub('', text))


def legacy_rules(config: Optional[CleaningConfig] = None) -> List[CleaningRule]:
    """Rules of the first cleaner release, before header and stamp trimming existed."""
    config = config or CleaningConfig()
    return [
        CharacterClassRule(),
        ArtifactLineRule(config.noise_line_prefix),
        NewlineCollapseRule(),
        PageNumberRule(),
    ]


def default_rules(config: Optional[CleaningConfig] = None) -> List[CleaningRule]:
    """Current pipeline, in application order."""
    config = config or CleaningConfig()
    return [
        HeaderTrimRule(config.header_marker, config.source_stamp_tokens),
        SourceStampRule(config.source_stamp_tokens),
        ShortLineRule(config.min_line_length),
        CharacterClassRule(),
        ArtifactLineRule(config.noise_line_prefix),
        NewlineCollapseRule(),
        PageNumberRule(),
        # Character normalization can shrink a line below the minimum
        ShortLineRule(config.min_line_length),
    ]


class GazetteTextCleaner:
    """
    Ordered rule pipeline for OCR'd gazette text

    The rule list can be replaced or extended; rules run left to right.
    """

    def __init__(self, config: Optional[CleaningConfig] = None,
                 rules: Optional[List[CleaningRule]] = None):
        self.config = config or CleaningConfig()
        self.rules: List[CleaningRule] = list(rules) if rules is not None else default_rules(self.config)

    def clean_text(self, text: str) -> str:
        """
        Apply all cleaning rules in order

        Args:
            text: Raw document text

        Returns:
            Cleaned text; empty string for empty or non-string input
        """

        if not text or not isinstance(text, str):
            return ""

        original_length = len(text)
        for rule in self.rules:
            text = rule.apply(text)

        logger.debug(f"Text cleaning completed: {original_length} -> {len(text)} chars")
        return text

    def insert_rule(self, index: int, rule: CleaningRule) -> None:
        """Insert a rule at the given position of the pipeline."""
        self.rules.insert(index, rule)

    @property
    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def get_cleaning_stats(self, original_text: str, cleaned_text: str) -> Dict[str, Any]:
        """
        Generate statistics about the cleaning process

        Args:
            original_text: Text before cleaning
            cleaned_text: Text after cleaning

        Returns:
            Dictionary with cleaning statistics
        """

        return {
            'original_length': len(original_text),
            'cleaned_length': len(cleaned_text),
            'reduction_chars': len(original_text) - len(cleaned_text),
            'reduction_percent': round(((len(original_text) - len(cleaned_text)) / len(original_text)) * 100, 2) if original_text else 0,
            'original_lines': len(original_text.splitlines()),
            'cleaned_lines': len(cleaned_text.splitlines()),
            'original_words': len(original_text.split()),
            'cleaned_words': len(cleaned_text.split()),
        }


_default_cleaner: Optional[GazetteTextCleaner] = None


def normalize(text: str) -> str:
    """Clean raw gazette text with the default rule pipeline."""
    global _default_cleaner
    if _default_cleaner is None:
        _default_cleaner = GazetteTextCleaner()
    return _default_cleaner.clean_text(text)
