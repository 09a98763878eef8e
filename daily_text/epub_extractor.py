# epub_extractor.py
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Union

from .errors import ArchiveError, ExtractionError

CONTENT_DIR = "OEBPS"
# Written into the work directory so later runs know it is safe to wipe
WORK_DIR_MARKER = ".daily-text-work"


def unsafe_name_reason(name: str) -> Optional[str]:
    """
    Why a zip entry name must not be written to disk, or None if it is safe.
    """
    if not name:
        return "empty name"
    if "\\" in name:
        return "backslash in name"
    if name.startswith("/") or (len(name) > 1 and name[1] == ":"):
        return "absolute path"
    if ".." in PurePosixPath(name).parts:
        return "relative path escapes archive root"
    return None


def safe_target(root: Path, name: str) -> Optional[Path]:
    if unsafe_name_reason(name):
        return None
    target = (root / name).resolve()
    if not target.is_relative_to(root.resolve()):
        return None
    return target


def extract_members(
    epub_path: Union[str, Path],
    target_dir: Path,
    logger: logging.Logger,
    want: Callable[[str], bool] = lambda name: True,
) -> int:
    """
    Extract the file entries selected by `want` into target_dir, skipping any entry
    whose name would land outside it. Returns the number of files written.
    """
    try:
        zf = zipfile.ZipFile(epub_path, "r")
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveError(f"Failed to open EPUB file: {epub_path}: {e}") from e

    extracted = 0
    with zf:
        for info in zf.infolist():
            name = info.filename
            if info.is_dir() or not want(name):
                continue

            reason = unsafe_name_reason(name)
            target = safe_target(target_dir, name) if reason is None else None
            if target is None:
                logger.warning(f"Skipping invalid file name: {name} - {reason or 'outside target'}")
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            try:
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except zipfile.BadZipFile as e:
                raise ArchiveError(f"ZIP file error in {epub_path} ({name}): {e}") from e
            extracted += 1
            logger.debug(f"Extracted: {name}")

    return extracted


class EpubExtractor:
    """
    Unpacks an EPUB into a work directory for page processing.

    The work directory is wiped before each extraction, so it must either not
    exist, be empty, or carry the marker file left by a previous extraction.
    """

    def __init__(
        self,
        epub_path: Union[str, Path],
        work_dir: Union[str, Path] = "Lab",
        logger: Optional[logging.Logger] = None,
    ):
        self.epub_path = Path(epub_path)
        self.work_dir = Path(work_dir)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def content_dir(self) -> Path:
        oebps = self.work_dir / CONTENT_DIR
        return oebps if oebps.is_dir() else self.work_dir

    def owns_work_dir(self) -> bool:
        if not self.work_dir.exists():
            return True
        if not self.work_dir.is_dir():
            return False
        return (self.work_dir / WORK_DIR_MARKER).is_file() or not any(self.work_dir.iterdir())

    def extract(self) -> Path:
        if not self.epub_path.is_file():
            raise ArchiveError(f"EPUB file not found: {self.epub_path}")

        self.logger.info(f"Extracting EPUB: {self.epub_path.name}")
        self.clean()
        self.work_dir.mkdir(parents=True, exist_ok=True)
        (self.work_dir / WORK_DIR_MARKER).write_text(f"{self.epub_path.name}\n", encoding="utf-8")

        count = extract_members(self.epub_path, self.work_dir, self.logger)
        self.logger.info(f"Extraction completed: {count} files written to {self.work_dir}")
        return self.content_dir

    def clean(self) -> None:
        if not self.work_dir.exists():
            return
        if not self.owns_work_dir():
            raise ExtractionError(
                f"Refusing to clean {self.work_dir}: it holds files not written by a previous extraction. "
                "Choose an empty or new work directory."
            )
        self.logger.info(f"Cleaning existing work directory: {self.work_dir}")
        shutil.rmtree(self.work_dir)
