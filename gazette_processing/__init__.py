"""
Gazette Processing Package

Modules:
- text_cleaner: Ordered rule pipeline that strips OCR/scan noise from raw gazette text.
- structure_extractor: Era detection plus title/description/parts extraction.
- json_formatter: Write DocumentRecords as title-named JSON files.
- main_processor: Orchestrates copy, clean, extract and serialize for a directory of files.
"""

from .text_cleaner import GazetteTextCleaner, CleaningRule, normalize, default_rules, legacy_rules
from .structure_extractor import DocumentRecord, StructuralExtractor, extract
from .json_formatter import JsonFormatter, title_to_filename
from .main_processor import GazetteProcessor, ProcessingReport, ProcessingResult, DocumentProcessingError

__all__ = [
    "GazetteTextCleaner", "CleaningRule", "normalize", "default_rules", "legacy_rules",
    "DocumentRecord", "StructuralExtractor", "extract",
    "JsonFormatter", "title_to_filename",
    "GazetteProcessor", "ProcessingReport", "ProcessingResult", "DocumentProcessingError",
]
