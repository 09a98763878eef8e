# constants.py
import re
from typing import Dict, List

SPANISH_MONTHS: Dict[str, str] = {
    "enero": "01",
    "febrero": "02",
    "marzo": "03",
    "abril": "04",
    "mayo": "05",
    "junio": "06",
    "julio": "07",
    "agosto": "08",
    "septiembre": "09",
    "octubre": "10",
    "noviembre": "11",
    "diciembre": "12",
}

WEEKDAYS: List[str] = [
    "Lunes",
    "Martes",
    "Miércoles",
    "Jueves",
    "Viernes",
    "Sábado",
    "Domingo",
]

# ----------------------------
# Page files
# ----------------------------
XHTML_RE = re.compile(r"\.xhtml$")
EXTRACTED_RE = re.compile(r"-extracted\d*\.xhtml$")
FILES_TO_SKIP: List[str] = ["cover.xhtml", "pagenav.xhtml", "toc.xhtml"]

# ----------------------------
# Page content
# ----------------------------
# Bibliographic code at the end of the commentary, e.g. "w23.04 10 párrs. 10, 11"
WATCHTOWER_RE = re.compile(r" w")
SCRIPTURE_PARENTHESIS_RE = re.compile(r"\(")

MEMORIAL_MARKER = "CONMEMORACIÓN"
MEMORIAL_DATE_RE = re.compile(
    rf"({'|'.join(WEEKDAYS)})\s+\d+\s+de\s+\w+",
    re.IGNORECASE,
)

# Administrative annotations in the stripped page text
SKIP_LINE_RE = re.compile(r"[^\r\n]*\^[^\r\n]*")

# A line that is nothing but a month name (section header)
BARE_MONTH_LINE_RE = re.compile(
    rf"(?<![^\r\n])[ \t]*(?:{'|'.join(SPANISH_MONTHS)})[ \t]*(?![^\r\n])",
    re.IGNORECASE,
)
BLANK_LINE_RE = re.compile(r"(?<![^\r\n])[ \t]*(?:\r\n|\r|\n)")

# Stage B uses the first N lines positionally
MIN_SANITIZED_LINES = 4

# ----------------------------
# Year detection
# ----------------------------
OPF_PATH = "OEBPS/content.opf"
MAIN_CONTENT_RE = re.compile(r"OEBPS/110\d{7}\.xhtml$")
TITLE_PAGE_RE = re.compile(r"OEBPS/.*212\.xhtml$")

OPF_TITLE_YEAR_RE = re.compile(r"<dc:title[^>]*>.*?(\d{4}).*?</dc:title>", re.IGNORECASE)
OPF_CODE_RE = re.compile(r"\(es(\d{2})-S\)", re.IGNORECASE)
GENERAL_YEAR_RE = re.compile(r"\b(20\d{2})\b")
FILE_PATTERN_YEAR_RE = re.compile(r"^110(\d{4})\d{3}\.xhtml$")
TITLE_PAGE_MARKER = "212"
EXAMINE_YEAR_RE = re.compile(r"Examinemos.*?(\d{4})", re.IGNORECASE)
HEADING_YEAR_RE = re.compile(r"<h[1-6][^>]*>.*?(\d{4}).*?</h[1-6]>", re.IGNORECASE)

MIN_YEAR = 1990
MAX_YEARS_AHEAD = 10
