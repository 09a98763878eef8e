# file_processor.py
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .constants import EXTRACTED_RE, FILES_TO_SKIP, XHTML_RE
from .errors import ExtractionError
from .models import DailyRecord
from .text_parser import TextParser

DEFAULT_WORKERS = 8


class FileProcessor:
    """Parses every daily text page in an extracted EPUB into a date-sorted list."""

    def __init__(
        self,
        year,
        logger: Optional[logging.Logger] = None,
        max_workers: int = DEFAULT_WORKERS,
    ):
        self.year = str(year)
        self.logger = logger or logging.getLogger(__name__)
        self.max_workers = max(1, int(max_workers))
        self.text_parser = TextParser(self.year, logger=self.logger)

    @staticmethod
    def should_process_file(filename: str) -> bool:
        if not XHTML_RE.search(filename):
            return False
        if EXTRACTED_RE.search(filename):
            return False
        if any(skip in filename for skip in FILES_TO_SKIP):
            return False
        # Numbered files may hold daily texts too
        return True

    def process_file(self, path: Path) -> Optional[DailyRecord]:
        self.logger.debug(f"Processing: {path.name}")
        try:
            # newline="" keeps the \r separators the text fallback splits on
            with open(path, encoding="utf-8", newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading file {path.name}: {e}")
            return None

        record = self.text_parser.parse(content)
        if record is None:
            self.logger.debug(f"Skipped {path.name} - could not parse as daily text")
        return record

    def process_files(self, directory: Union[str, Path]) -> List[DailyRecord]:
        directory = Path(directory)
        if not directory.is_dir():
            raise ExtractionError(f"Page directory not found: {directory}. Please run extraction first.")

        names = sorted(p.name for p in directory.iterdir() if p.is_file())
        pages = [directory / name for name in names if self.should_process_file(name)]

        self.logger.info(f"Found {len(pages)} XHTML files to process")
        if not pages:
            self.logger.debug(f"Total files in directory: {len(names)}")
            self.logger.debug(f"Sample files: {', '.join(names[:5])}")

        with ThreadPoolExecutor(max_workers=self.max_workers) as ex:
            results = list(ex.map(self.process_file, pages))

        records = [r for r in results if r is not None]
        # ISO dates sort chronologically as strings
        records.sort(key=lambda r: r.date)

        self.logger.info(f"Successfully processed {len(records)} daily texts")
        return records

    def save_to_json(self, records: Sequence[DailyRecord], output_path: Union[str, Path] = "output.json") -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=2)

        self.logger.info(f"Saved {len(records)} entries to {output_path}")
        return output_path
