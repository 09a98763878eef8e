# errors.py


class DailyTextError(Exception):
    """Base class for errors raised by the daily text pipeline."""


class ArchiveError(DailyTextError):
    """The EPUB archive is missing, unreadable or not a zip file."""


class ExtractionError(DailyTextError):
    """Extracted page files are not where the pipeline expects them."""


class ConfigError(DailyTextError, ValueError):
    pass
