"""
Gazette Structure Extractor

Role: Recognize the document era and pull title, description (preamble) and
parts/sections out of cleaned gazette text.

Two schemas are recognized:
- PRE_2018: ordinal parts, "PART ONE" ... "PART TEN".
- POST_2018: numbered sections starting at "1. Short Title" ("1 Short Title"
  once normalization has removed the period).
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from shared_utils.constants import (
    DocumentEra, PART_ONE_MARKER, DESCRIPTION_MARKER, CONTENTS_MARKER,
    PART_ORDINALS, TITLE_KEYWORD
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentRecord:
    """Structured result for one gazette document."""
    title: str = ""
    description: str = ""
    parts: Dict[str, str] = field(default_factory=dict)
    era: DocumentEra = DocumentEra.UNKNOWN

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "description": self.description,
            "parts": dict(self.parts),
        }


class StructuralExtractor:
    """Era-aware title/description/parts parser."""

    def __init__(self):
        self.part_one_pattern = re.compile(re.escape(PART_ONE_MARKER))
        self.short_title_pattern = re.compile(r'(?<!\d)1\.?[ \t]+Short[ \t]+Title')
        self.title_pattern = re.compile(
            TITLE_KEYWORD + r'[ \t]+(?:N[Oo]\.?[ \t]*)?\d+(?:[ \t]*/[ \t]*|[ \t]+)\d+'
        )
        self.part_header_pattern = re.compile(
            r'\bPART\s+(?:' + '|'.join(PART_ORDINALS) + r')\b'
        )
        self.section_header_pattern = re.compile(
            r'^[ \t]*(\d+)\.?[ \t]+[A-Za-z][^\n]*$', re.MULTILINE
        )

    def extract(self, text: str) -> DocumentRecord:
        """
        Extract the structured record from cleaned text

        Args:
            text: Output of the text cleaner

        Returns:
            DocumentRecord; fields are empty when their markers are missing
        """

        if not text or not isinstance(text, str) or not text.strip():
            return DocumentRecord()

        era = self.detect_era(text)
        title = self._extract_title(text, era)
        description = self._extract_description(text, era)

        if era is DocumentEra.PRE_2018:
            parts = self._extract_parts(text)
        elif era is DocumentEra.POST_2018:
            parts = self._extract_sections(text)
        else:
            parts = {}

        logger.debug(f"Extracted {era.name} document '{title[:60]}' with {len(parts)} parts")

        return DocumentRecord(title=title, description=description, parts=parts, era=era)

    def detect_era(self, text: str) -> DocumentEra:
        """PART ONE wins when both markers are present."""
        if self.part_one_pattern.search(text):
            return DocumentEra.PRE_2018
        if self.short_title_pattern.search(text):
            return DocumentEra.POST_2018
        return DocumentEra.UNKNOWN

    def _era_marker(self, text: str, era: DocumentEra, start: int = 0) -> Optional[re.Match]:
        if era is DocumentEra.PRE_2018:
            return self.part_one_pattern.search(text, start)
        if era is DocumentEra.POST_2018:
            return self.short_title_pattern.search(text, start)
        return None

    def _extract_title(self, text: str, era: DocumentEra) -> str:
        match = self.title_pattern.search(text)
        if match:
            return match.group(0).strip()

        # Fall back to the heading in front of the first boundary marker
        boundaries = [text.find(CONTENTS_MARKER), text.find(DESCRIPTION_MARKER)]
        era_marker = self._era_marker(text, era)
        if era_marker:
            boundaries.append(era_marker.start())

        found = [position for position in boundaries if position >= 0]
        if not found:
            return ""
        return text[:min(found)].strip()

    def _extract_description(self, text: str, era: DocumentEra) -> str:
        if era is DocumentEra.UNKNOWN:
            return ""

        start = text.find(DESCRIPTION_MARKER)
        if start < 0:
            return ""
        start += len(DESCRIPTION_MARKER)

        end_marker = self._era_marker(text, era, start)
        if not end_marker:
            return ""
        return text[start:end_marker.start()].strip()

    def _extract_parts(self, text: str) -> Dict[str, str]:
        """PART ONE ... PART TEN, each running to the next part header."""
        headers = list(self.part_header_pattern.finditer(text))
        labeled = [(' '.join(match.group(0).split()), match) for match in headers]
        return self._collect_bodies(text, labeled, len(text))

    def _extract_sections(self, text: str) -> Dict[str, str]:
        """
        Numbered sections between the short-title marker and PART ONE (or the end).

        Section numbers run on from the short title (1), so a header is only
        accepted when it carries the next number. Sub-article lines such as
        "1 Ministry means ..." and wrapped lines starting with a year stay in
        the body of the current section.
        """
        marker = self.short_title_pattern.search(text)
        if not marker:
            return {}

        span_start = marker.end()
        span_end_match = self.part_one_pattern.search(text, span_start)
        span_end = span_end_match.start() if span_end_match else len(text)

        headers = []
        next_number = 2
        for match in self.section_header_pattern.finditer(text, span_start, span_end):
            if int(match.group(1)) == next_number:
                headers.append(match)
                next_number += 1

        labeled = [(match.group(0).strip(), match) for match in headers]
        return self._collect_bodies(text, labeled, span_end)

    def _collect_bodies(self, text: str, labeled: List[Tuple[str, re.Match]],
                        end: int) -> Dict[str, str]:
        """Body of each header runs to the next header start; later labels overwrite earlier ones."""
        parts: Dict[str, str] = {}
        for i, (label, match) in enumerate(labeled):
            body_end = labeled[i + 1][1].start() if i + 1 < len(labeled) else end
            parts[label] = text[match.end():body_end].strip()
        return parts


_default_extractor: Optional[StructuralExtractor] = None


def extract(text: str) -> DocumentRecord:
    """Extract a DocumentRecord with the default extractor."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = StructuralExtractor()
    return _default_extractor.extract(text)
