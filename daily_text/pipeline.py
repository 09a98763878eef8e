# pipeline.py
import logging
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from . import database
from .config import DEFAULT_OUTPUT_JSON, DEFAULT_WORK_DIR
from .epub_extractor import EpubExtractor
from .errors import ConfigError
from .file_processor import FileProcessor
from .models import DailyRecord
from .year_detector import YearDetector


class DailyTextProcessor:
    """
    Runs the whole conversion for one EPUB:
      extract -> year (override or detected) -> parse pages -> JSON -> optional database
    """

    def __init__(
        self,
        epub_path: Union[str, Path],
        year: Optional[str] = None,
        work_dir: Union[str, Path] = DEFAULT_WORK_DIR,
        output_path: Union[str, Path] = DEFAULT_OUTPUT_JSON,
        database_url: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.epub_path = Path(epub_path)
        self.year = str(year) if year else None
        self.output_path = Path(output_path)
        self.database_url = database_url
        self.logger = logger or logging.getLogger(__name__)
        self.extractor = EpubExtractor(self.epub_path, work_dir, logger=self.logger)

    def resolve_year(self) -> str:
        if not self.year:
            self.year = YearDetector(logger=self.logger).detect_year(self.epub_path)
        return self.year

    def run(self) -> List[DailyRecord]:
        self.logger.info("Starting Daily Text EPUB to JSON processor")

        self.logger.info("Step 1: Extracting EPUB file...")
        content_dir = self.extractor.extract()

        year = self.resolve_year()
        self.logger.info(f"Processing year: {year}")

        self.logger.info("Step 2: Processing XHTML files...")
        records = self._process(content_dir)

        self.logger.info(f"Processing complete! Generated {len(records)} daily texts.")
        return records

    def extract_only(self) -> Path:
        self.logger.info("Running extraction only...")
        return self.extractor.extract()

    def process_only(self) -> List[DailyRecord]:
        if not self.year:
            raise ConfigError("A year must be given when processing previously extracted files")
        self.logger.info("Running processing only...")
        return self._process(self.extractor.content_dir)

    def cleanup(self) -> None:
        self.extractor.clean()

    def _process(self, content_dir: Path) -> List[DailyRecord]:
        processor = FileProcessor(self.year, logger=self.logger)
        records = processor.process_files(content_dir)

        self.logger.info("Step 3: Saving to JSON...")
        processor.save_to_json(records, self.output_path)

        if self.database_url:
            self.logger.info("Step 4: Saving to database...")
            self.save_to_database(records)
        return records

    def save_to_database(self, records: List[DailyRecord]) -> None:
        try:
            engine = database.get_engine(self.database_url)
            saved = database.replace_year(engine, self.year, records)
            self.logger.info(f"Saved {saved} texts to database")
        except SQLAlchemyError as e:
            self.logger.error(f"Database save failed: {e}")
            self.logger.warning(f"Data was saved to JSON file {self.output_path}")
