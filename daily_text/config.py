# config.py
import os
import re
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from .constants import MAX_YEARS_AHEAD, MIN_YEAR
from .errors import ConfigError

DEFAULT_OUTPUT_JSON = "output.json"
DEFAULT_WORK_DIR = "Lab"

YEAR_RE = re.compile(r"^\d{4}$")


def _flag(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "t", "yes", "y"}


@dataclass(frozen=True)
class Settings:
    year: Optional[str] = None
    database_url: Optional[str] = None
    output_path: str = DEFAULT_OUTPUT_JSON
    work_dir: str = DEFAULT_WORK_DIR
    verbose: bool = False


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables:
      YEAR, DAILY_TEXT_DATABASE_URL, OUTPUT_JSON_PATH, DAILY_TEXT_WORK_DIR, VERBOSE
    An unset YEAR means the year is detected from the EPUB.
    """
    env = os.environ if environ is None else environ

    year = (env.get("YEAR") or "").strip() or None
    if year is not None and not YEAR_RE.match(year):
        raise ConfigError("YEAR must be a 4-digit year (e.g., 2025)")

    return Settings(
        year=year,
        database_url=env.get("DAILY_TEXT_DATABASE_URL") or None,
        output_path=env.get("OUTPUT_JSON_PATH") or DEFAULT_OUTPUT_JSON,
        work_dir=env.get("DAILY_TEXT_WORK_DIR") or DEFAULT_WORK_DIR,
        verbose=_flag(env.get("VERBOSE")),
    )


def validate_year(year_str, current_year: Optional[int] = None) -> str:
    """Operator-supplied year: an integer within [1990, current year + 10]."""
    current_year = current_year or date.today().year
    try:
        year = int(year_str)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid year: {year_str}. Year must be a number.")
    if year < MIN_YEAR or year > current_year + MAX_YEARS_AHEAD:
        raise ConfigError(
            f"Invalid year: {year}. Year must be between {MIN_YEAR} and {current_year + MAX_YEARS_AHEAD}."
        )
    return str(year)
