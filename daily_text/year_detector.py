# year_detector.py
"""
Detect the publication year of a daily text EPUB.

Strategies, in priority order:
  1. OPF metadata      <dc:title>Examinemos 2025 (es25-S)</dc:title>
  2. file pattern      OEBPS/110YYYY###.xhtml
  3. title page        the *212.xhtml page ("Examinemos ... 2025")
Each candidate must fall within [1990, current year + 10]. When nothing
validates, the current year is used.
"""

import logging
import os
import shutil
import tempfile
import time
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .constants import (
    EXAMINE_YEAR_RE,
    FILE_PATTERN_YEAR_RE,
    GENERAL_YEAR_RE,
    HEADING_YEAR_RE,
    MAIN_CONTENT_RE,
    MAX_YEARS_AHEAD,
    MIN_YEAR,
    OPF_CODE_RE,
    OPF_PATH,
    OPF_TITLE_YEAR_RE,
    TITLE_PAGE_MARKER,
    TITLE_PAGE_RE,
)
from .epub_extractor import CONTENT_DIR, extract_members
from .errors import ArchiveError

Strategy = Callable[[Path], Optional[str]]


def wanted_for_detection(name: str) -> bool:
    return name == OPF_PATH or bool(MAIN_CONTENT_RE.search(name)) or bool(TITLE_PAGE_RE.search(name))


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class YearDetector:
    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.today = today or date.today

    @property
    def current_year(self) -> int:
        return self.today().year

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [
            ("OPF metadata", self.detect_from_opf),
            ("file pattern", self.detect_from_file_pattern),
            ("title page", self.detect_from_title_page),
        ]

    def detect_year(self, epub_path: Union[str, Path]) -> str:
        self.logger.debug(f"Detecting year from: {epub_path}")
        epub_path = Path(epub_path)
        if not epub_path.is_file():
            raise ArchiveError(f"EPUB file not found: {epub_path}")

        temp_dir = Path(
            tempfile.mkdtemp(prefix=f"epub-detect-{os.getpid()}-{int(time.time() * 1000)}-")
        )
        try:
            count = extract_members(epub_path, temp_dir, self.logger, want=wanted_for_detection)
            self.logger.debug(f"Extraction for year detection completed. Files extracted: {count}")

            for name, strategy in self.strategies():
                self.logger.debug(f"Attempting year detection using: {name}")
                year = strategy(temp_dir)
                if year and self.validate_year(year):
                    self.logger.info(f"Year detected via {name}: {year}")
                    return year

            fallback = str(self.current_year)
            self.logger.warning(f"Could not detect year from content, using current: {fallback}")
            return fallback
        finally:
            try:
                shutil.rmtree(temp_dir)
            except OSError as e:
                self.logger.warning(f"Failed to clean up temp directory: {e}")

    def validate_year(self, year: str) -> bool:
        try:
            year_num = int(year)
        except (TypeError, ValueError):
            self.logger.debug(f"Year {year!r} is not a number")
            return False

        upper = self.current_year + MAX_YEARS_AHEAD
        if not MIN_YEAR <= year_num <= upper:
            self.logger.debug(f"Year {year} failed validation (out of range {MIN_YEAR}-{upper})")
            return False
        return True

    # ----------------------------
    # Strategies
    # ----------------------------
    def detect_from_opf(self, root: Path) -> Optional[str]:
        opf_path = root / OPF_PATH
        try:
            content = _read_text(opf_path)
        except OSError as e:
            self.logger.debug(f"Could not read OPF file: {e}")
            return None

        m = OPF_TITLE_YEAR_RE.search(content)
        if m:
            self.logger.debug(f"Found year in OPF title: {m.group(1)}")
            return m.group(1)

        # (es25-S) -> 2025
        m = OPF_CODE_RE.search(content)
        if m:
            year = f"20{m.group(1)}"
            self.logger.debug(f"Found year in OPF code: {year} (from {m.group(1)})")
            return year

        m = GENERAL_YEAR_RE.search(content)
        if m:
            self.logger.debug(f"Found general year in OPF: {m.group(1)}")
            return m.group(1)

        return None

    def detect_from_file_pattern(self, root: Path) -> Optional[str]:
        content_dir = root / CONTENT_DIR
        if not content_dir.is_dir():
            self.logger.debug(f"No {CONTENT_DIR} directory extracted")
            return None

        for path in sorted(content_dir.iterdir()):
            m = FILE_PATTERN_YEAR_RE.match(path.name)
            if m:
                self.logger.debug(f"Found year in file pattern: {m.group(1)} (from {path.name})")
                return m.group(1)
        return None

    def detect_from_title_page(self, root: Path) -> Optional[str]:
        content_dir = root / CONTENT_DIR
        if not content_dir.is_dir():
            return None

        title_files = [
            p for p in sorted(content_dir.iterdir())
            if TITLE_PAGE_MARKER in p.name and p.name.endswith(".xhtml")
        ]
        for path in title_files:
            try:
                content = _read_text(path)
            except OSError as e:
                self.logger.debug(f"Could not read title file {path.name}: {e}")
                continue

            for label, regex in (
                ("examine", EXAMINE_YEAR_RE),
                ("header", HEADING_YEAR_RE),
                ("general", GENERAL_YEAR_RE),
            ):
                m = regex.search(content)
                if m:
                    self.logger.debug(f"Found year in title page ({label}): {m.group(1)} (from {path.name})")
                    return m.group(1)
        return None
