# text_parser.py
import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag

from .constants import (
    BARE_MONTH_LINE_RE,
    BLANK_LINE_RE,
    MEMORIAL_DATE_RE,
    MEMORIAL_MARKER,
    MIN_SANITIZED_LINES,
    SKIP_LINE_RE,
)
from .date_formatter import DateFormatter
from .models import DailyRecord
from .reference_formatter import ReferenceFormatter

BODY_CLASS_RE = re.compile(r"^p\d+$")

# html.parser normalizes \r\n and \r to \n; the fallback splits on \r
CR_PLACEHOLDER = "\ue000"


def strip_markup(html: str) -> str:
    """Drop every tag and attribute, keep the text content (carriage returns included)."""
    text = BeautifulSoup(html.replace("\r", CR_PLACEHOLDER), "html.parser").get_text()
    return text.replace(CR_PLACEHOLDER, "\r")


def is_body_paragraph(p: Tag) -> bool:
    # <p class="p12 sb">
    classes = p.get("class") or []
    return "sb" in classes and any(BODY_CLASS_RE.match(c) for c in classes)


class TextParser:
    """
    Extracts one DailyRecord from the XHTML of a daily text page.

    The structural parse reads the <h2> heading and the themeScrp / "pN sb"
    paragraphs; pages that don't carry those fall back to a positional parse of
    the stripped text, split on carriage returns.
    """

    def __init__(self, year, logger: Optional[logging.Logger] = None):
        self.year = str(year)
        self.logger = logger or logging.getLogger(__name__)
        self.date_formatter = DateFormatter(self.year, logger=self.logger)
        self.reference_formatter = ReferenceFormatter(logger=self.logger)

    def parse(self, content: str) -> Optional[DailyRecord]:
        record = self.parse_html_structure(content)
        if record is not None:
            return record

        record = self.parse_sanitized_text(content)
        if record is not None:
            self.logger.warning(
                f"Structural parse failed for {record.date}; used text fallback (page layout may have changed)"
            )
        return record

    # ----------------------------
    # Stage A: HTML structure
    # ----------------------------
    def parse_html_structure(self, content: str) -> Optional[DailyRecord]:
        try:
            soup = BeautifulSoup(content, "html.parser")

            heading = soup.find("h2")
            if heading is None:
                return None
            date_text = self._heading_text(heading)

            scripture_p = soup.find("p", class_="themeScrp")
            if scripture_p is None:
                return None

            explanation_p = next((p for p in soup.find_all("p") if is_body_paragraph(p)), None)
            if explanation_p is None:
                return None

            scripture = scripture_p.get_text().strip()
            explanation = explanation_p.get_text().strip()

            return self._build_record(date_text, scripture, explanation)
        except Exception as e:
            self.logger.debug(f"Structural parse error: {e}")
            return None

    def _heading_text(self, heading: Tag) -> str:
        # Page-number annotations live in nested spans
        for span in heading.find_all("span"):
            span.decompose()
        for br in heading.find_all("br"):
            br.replace_with(NavigableString(" "))

        date_text = heading.get_text().strip()
        if MEMORIAL_MARKER in date_text:
            m = MEMORIAL_DATE_RE.search(date_text)
            if m:
                date_text = m.group(0)
        return date_text

    # ----------------------------
    # Stage B: stripped text, positional lines
    # ----------------------------
    def parse_sanitized_text(self, content: str) -> Optional[DailyRecord]:
        try:
            text = self.clean_text(strip_markup(content))

            # The page source separates blocks with \r
            lines = [ln.strip() for ln in text.split("\r")]
            lines = [ln for ln in lines if ln]
            if len(lines) < MIN_SANITIZED_LINES:
                return None

            date_text, scripture, explanation = self._pick_lines(lines)
            if not date_text or not scripture:
                return None

            return self._build_record(date_text, scripture, explanation)
        except Exception as e:
            self.logger.debug(f"Text fallback parse error: {e}")
            return None

    def _pick_lines(self, lines: List[str]) -> Tuple[Optional[str], Optional[str], str]:
        if MEMORIAL_MARKER not in lines[0]:
            # line 0 repeats the running header
            return lines[1], lines[2], lines[3]

        m = MEMORIAL_DATE_RE.search(" ".join(lines))
        if not m:
            return None, None, ""

        for idx, line in enumerate(lines):
            if "(" in line and ")" in line:
                explanation = lines[idx + 1] if idx + 1 < len(lines) else ""
                return m.group(0), line, explanation
        return m.group(0), None, ""

    def clean_text(self, text: str) -> str:
        """
        Remove annotation lines (containing "^"), bare month headers and blank lines.
        Month names inside real dates ("Lunes 1 de enero") are kept.
        """
        text = SKIP_LINE_RE.sub("", text)
        text = BARE_MONTH_LINE_RE.sub("", text)
        text = BLANK_LINE_RE.sub("", text)
        return text

    # ----------------------------
    # Shared tail
    # ----------------------------
    def _build_record(self, date_text: str, scripture: str, explanation: str) -> Optional[DailyRecord]:
        formatted_date = self.date_formatter.format(date_text)
        if not formatted_date:
            return None

        reference = self.reference_formatter.extract_reference(explanation)
        if explanation and reference:
            explanation = explanation.replace(f" {reference}", "", 1).strip()
        else:
            explanation = explanation or ""

        parts = self.reference_formatter.separate_scripture_reference(scripture)

        return DailyRecord(
            date=formatted_date,
            text=parts.text,
            text_content=parts.text_content,
            explanation=explanation,
            reference=reference,
        )
