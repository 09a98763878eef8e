# cli.py
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import load_settings, validate_year
from .errors import DailyTextError
from .log import configure_logging
from .pipeline import DailyTextProcessor

EPILOG = """
Examples:
  daily-text es25_S.epub
  daily-text es25_S.epub --year 2025 --verbose
  daily-text es25_S.epub --output ./custom-output.json
  daily-text es25_S.epub --db --database-url sqlite:///daily_texts.db
"""


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="daily-text",
        description="Convert daily text EPUBs to JSON.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("epub", help="Path to the EPUB file to process.")
    p.add_argument("--year", "-y", help="Override year detection (e.g., 2025).")
    p.add_argument("--output", "-o", help="Output path for the JSON file.")
    p.add_argument(
        "--db",
        action="store_true",
        help="Also save to the database (needs --database-url or DAILY_TEXT_DATABASE_URL).",
    )
    p.add_argument("--database-url", help="SQLAlchemy database URL.")
    p.add_argument("--work-dir", help="Directory the EPUB is extracted into.")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    p.add_argument("--log-file", help="Also write log output to this file.")
    p.add_argument(
        "--extract-only", action="store_true", help="Only extract the EPUB, do not process."
    )
    p.add_argument(
        "--process-only",
        action="store_true",
        help="Only process previously extracted files (requires --year).",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        settings = load_settings()
    except DailyTextError as e:
        configure_logging(args.verbose, args.log_file).error(str(e))
        return 1

    logger = configure_logging(args.verbose or settings.verbose, args.log_file)

    epub_path = Path(args.epub).resolve()
    if not epub_path.exists():
        logger.error(f"EPUB file not found: {epub_path}")
        return 1
    if epub_path.suffix.lower() not in {".epub", ".zip"}:
        logger.warning(f"File extension '{epub_path.suffix}' is not .epub or .zip; proceeding anyway")

    if args.extract_only and args.process_only:
        logger.error("Cannot specify both --extract-only and --process-only")
        return 1

    year = None
    if args.year:
        try:
            year = validate_year(args.year)
        except DailyTextError as e:
            logger.error(str(e))
            return 1
        logger.info(f"Year override: {year}")
    elif settings.year:
        year = settings.year
        logger.info(f"Using configured year {year}")
    else:
        logger.info("Year will be auto-detected from EPUB content")

    database_url = None
    if args.db:
        database_url = args.database_url or settings.database_url
        if not database_url:
            logger.error("--db specified but no --database-url / DAILY_TEXT_DATABASE_URL set")
            return 1
        logger.info("Database saving enabled")

    processor = DailyTextProcessor(
        epub_path,
        year=year,
        work_dir=args.work_dir or settings.work_dir,
        output_path=Path(args.output or settings.output_path).resolve(),
        database_url=database_url,
        logger=logger,
    )

    try:
        if args.extract_only:
            processor.extract_only()
        elif args.process_only:
            if not year:
                logger.error("--year must be specified when using --process-only mode")
                return 1
            processor.process_only()
        else:
            processor.run()
    except (DailyTextError, OSError) as e:
        logger.error(f"Processing failed: {e}")
        if args.verbose:
            logger.exception(e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
