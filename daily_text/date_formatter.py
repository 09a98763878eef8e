# date_formatter.py
import logging
import re
from datetime import date
from typing import Optional

from .constants import SPANISH_MONTHS

DAY_RE = re.compile(r"\d+")


class DateFormatter:
    """
    Turns a Spanish date phrase ("Jueves 2 de enero") into YYYY-MM-DD for a fixed year.
    """

    def __init__(self, year, logger: Optional[logging.Logger] = None):
        self.year = str(year)
        self.logger = logger or logging.getLogger(__name__)

    def format(self, date_text: Optional[str]) -> Optional[str]:
        if not date_text:
            self.logger.warning("No date text provided")
            return None

        date_text = date_text.strip()

        # Only the first number is the day of the month
        m = DAY_RE.search(date_text)
        if not m:
            self.logger.warning(f"No day number found in: {date_text}")
            return None
        day = m.group(0).zfill(2)

        month_name = date_text.rsplit(" ", 1)[-1].lower()
        month = SPANISH_MONTHS.get(month_name)
        if not month:
            self.logger.warning(f"Unknown month: {month_name} in date: {date_text}")
            return None

        try:
            date(int(self.year), int(month), int(day))
        except ValueError:
            self.logger.warning(f"Not a calendar date in {self.year}: {date_text}")
            return None

        return f"{self.year}-{month}-{day}"
