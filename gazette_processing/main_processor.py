"""
Main Processor

Role: Orchestrate the gazette pipeline end-to-end: working copies, in-place
cleaning, structure extraction and JSON output, one file at a time.
"""

import argparse
import json
import sys
import time
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from shared_utils.config_manager import AppConfig, ConfigManager, get_config
from shared_utils.constants import PROJECT_NAME, PROCESSING_LOG_NAME, Messages
from shared_utils.file_utils import FileManager, read_text_file, write_text_file
from shared_utils.logger import GazetteLogger

from .json_formatter import JsonFormatter
from .structure_extractor import DocumentRecord, StructuralExtractor
from .text_cleaner import GazetteTextCleaner


class DocumentProcessingError(Exception):
    """Raised when a source file cannot be copied or read."""


@dataclass
class ProcessingResult:
    """Result of processing a single source file."""
    source_file: str
    success: bool = False
    duration_ms: float = 0.0
    cleaned_file: Optional[str] = None
    json_file: Optional[str] = None
    era: Optional[str] = None
    title: Optional[str] = None
    parts_count: int = 0
    chars_original: int = 0
    chars_clean: int = 0
    error_message: Optional[str] = None


@dataclass
class ProcessingReport:
    """Final report of a processing run."""
    processed_files: int
    successful_files: int
    failed_files: int
    total_parts: int
    processing_time_seconds: float
    timestamp_utc: str
    errors: List[str] = field(default_factory=list)


class GazetteProcessor:
    """Main orchestrator for the gazette cleaning and extraction pipeline."""

    def __init__(self, config: Optional[AppConfig] = None, logger=None,
                 source_dir: Optional[Path] = None, destination_dir: Optional[Path] = None,
                 output_dir: Optional[Path] = None, logs_dir: Optional[Path] = None):
        """
        Initialize the processor.

        Args:
            config: Application configuration. Defaults to the global config.
            logger: Logger collaborator. Defaults to the project logger writing to logs_dir.
            source_dir: Directory with raw text files.
            destination_dir: Directory for cleaned working copies.
            output_dir: Directory for JSON records.
            logs_dir: Directory for log files.
        """
        self.config = config or get_config()
        paths = self.config.paths

        self.source_dir = Path(source_dir or paths.source_dir)
        self.destination_dir = Path(destination_dir or paths.destination_dir)
        self.output_dir = Path(output_dir or paths.output_dir)
        self.logs_dir = Path(logs_dir or paths.logs_dir)

        self.logger = logger or self._create_logger()

        self.text_cleaner = GazetteTextCleaner(self.config.cleaning)
        self.extractor = StructuralExtractor()
        self.json_formatter = JsonFormatter(self.output_dir, self.logger)
        self.file_manager = FileManager(self.logger)

        self.processing_results: List[ProcessingResult] = []
        self.errors: List[str] = []

    def _create_logger(self) -> GazetteLogger:
        logging_config = self.config.logging
        return GazetteLogger(
            PROJECT_NAME,
            logging_config.level,
            self.logs_dir,
            enable_console=logging_config.enable_console_logging,
            enable_json=logging_config.enable_json_logging,
            max_bytes=logging_config.file_max_bytes,
            backup_count=logging_config.backup_count,
        )

    def create_directories(self) -> None:
        """Create source, destination, output and log directories if absent."""
        for directory in (self.source_dir, self.destination_dir, self.output_dir, self.logs_dir):
            self.file_manager.create_directory(directory)

    def run(self) -> ProcessingReport:
        """Create directories and process every source file."""
        self.create_directories()
        return self.process_and_clean_files()

    def process_and_clean_files(self) -> ProcessingReport:
        """
        Process every file in the source directory.

        A failure in one file is logged and recorded; the batch continues.

        Returns:
            ProcessingReport with totals for this run
        """
        start_time = time.time()
        self.processing_results = []
        self.errors = []

        input_files = self._get_input_files()
        self.logger.info(f"Found {len(input_files)} input files to process",
                         source_dir=str(self.source_dir))

        if not input_files:
            self.logger.warning(Messages.WARNING_NO_INPUT)

        for file_path in input_files:
            self.processing_results.append(self.process_file(file_path))

        report = self._create_report(start_time)

        if self.config.processing.write_processing_log:
            self._write_processing_log(report)

        return report

    def process_file(self, file_path: Path) -> ProcessingResult:
        """Copy, clean in place, extract and serialize one file."""
        start_time = time.time()
        result = ProcessingResult(source_file=file_path.name)

        try:
            working_copy = self._working_copy_path(file_path)
            if not self.file_manager.copy_file(file_path, working_copy, overwrite=True):
                raise DocumentProcessingError(f"{Messages.ERROR_COPY_FAILED}: {working_copy}")

            content = self._read(working_copy)
            cleaned_content = self.clean_content(content)
            write_text_file(working_copy, cleaned_content)
            self.logger.info(Messages.PROCESSED_AND_CLEANED.format(name=working_copy.name))

            record, json_path = self.extract_and_serialize_json(cleaned_content, file_path.stem)

            result.success = True
            result.cleaned_file = str(working_copy)
            result.json_file = str(json_path)
            result.era = record.era.value
            result.title = record.title
            result.parts_count = len(record.parts)
            result.chars_original = len(content)
            result.chars_clean = len(cleaned_content)

            self.logger.log_document_processing(
                file_path.name, "completed",
                {"era": record.era.value, "parts": len(record.parts)}
            )

        except Exception as e:
            context = Messages.FILE_ERROR_CONTEXT.format(path=file_path)
            result.error_message = self.handle_error(e, context)

        finally:
            result.duration_ms = (time.time() - start_time) * 1000

        return result

    def clean_content(self, content: str) -> str:
        """Run the cleaning rule pipeline."""
        return self.text_cleaner.clean_text(content)

    def extract_and_serialize_json(self, cleaned_content: str,
                                   fallback_name: str) -> Tuple[DocumentRecord, Path]:
        """Extract the record and write it to the output directory."""
        record = self.extractor.extract(cleaned_content)
        json_path = self.json_formatter.save_document(record, fallback_name)
        self.logger.info(Messages.JSON_CREATED.format(path=json_path))
        return record, json_path

    def handle_error(self, error: Exception, context: str = "General") -> str:
        """Log an error with its context and record it for the report."""
        error_message = f"{context}: {error}"
        self.logger.error(error_message, error_type=type(error).__name__)
        self.errors.append(error_message)
        return error_message

    def _read(self, path: Path) -> str:
        try:
            return read_text_file(path, self.config.processing.fallback_encoding)
        except OSError as e:
            raise DocumentProcessingError(f"{Messages.ERROR_READ_FAILED}: {path}") from e

    def _get_input_files(self) -> List[Path]:
        """Source files, skipping hidden files and earlier working copies."""
        suffix = self.config.processing.copy_suffix
        files = self.file_manager.find_files(self.source_dir, self.config.processing.file_pattern)
        return [
            path for path in files
            if not path.name.startswith('.')
            and not (suffix and path.stem.endswith(suffix))
        ]

    def _working_copy_path(self, file_path: Path) -> Path:
        """<destination>/<stem><suffix><ext>"""
        new_name = f"{file_path.stem}{self.config.processing.copy_suffix}{file_path.suffix}"
        return self.destination_dir / new_name

    def _write_processing_log(self, report: ProcessingReport) -> Path:
        processing_log = {
            "pipeline_info": {
                "project": self.config.project_name,
                "version": self.config.version,
                "source_directory": str(self.source_dir),
                "destination_directory": str(self.destination_dir),
                "output_directory": str(self.output_dir),
                "rules": self.text_cleaner.rule_names,
            },
            "processing_results": [asdict(result) for result in self.processing_results],
            "summary": asdict(report),
        }

        # output_dir holds only title-named records
        log_path = self.logs_dir / PROCESSING_LOG_NAME
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        with open(log_path, 'w', encoding='utf-8') as f:
            json.dump(processing_log, f, ensure_ascii=False, indent=2)

        self.logger.debug(f"Processing log written: {log_path}")
        return log_path

    def _create_report(self, start_time: float) -> ProcessingReport:
        successful = [r for r in self.processing_results if r.success]

        return ProcessingReport(
            processed_files=len(self.processing_results),
            successful_files=len(successful),
            failed_files=len(self.processing_results) - len(successful),
            total_parts=sum(r.parts_count for r in successful),
            processing_time_seconds=time.time() - start_time,
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            errors=list(self.errors),
        )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gazette-process",
        description="Clean OCR'd gazette text files and extract their structure as JSON"
    )
    parser.add_argument("--source-dir", type=Path, help="Directory with raw text files")
    parser.add_argument("--destination-dir", type=Path, help="Directory for cleaned working copies")
    parser.add_argument("--output-dir", type=Path, help="Directory for JSON records")
    parser.add_argument("--logs-dir", type=Path, help="Directory for log files")
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI execution."""
    args = build_arg_parser().parse_args(argv)

    config = ConfigManager(config_file=args.config).load_config() if args.config else get_config()
    if args.log_level:
        config.logging.level = args.log_level

    processor = GazetteProcessor(
        config=config,
        source_dir=args.source_dir,
        destination_dir=args.destination_dir,
        output_dir=args.output_dir,
        logs_dir=args.logs_dir,
    )
    report = processor.run()

    print(json.dumps(asdict(report), ensure_ascii=False, indent=2))
    return 1 if report.failed_files else 0


if __name__ == "__main__":
    sys.exit(main())
