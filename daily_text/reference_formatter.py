# reference_formatter.py
import logging
from typing import Optional

from .constants import SCRIPTURE_PARENTHESIS_RE, WATCHTOWER_RE
from .models import ScriptureParts


class ReferenceFormatter:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def extract_reference(self, explanation: Optional[str]) -> str:
        """
        Return the bibliographic code that ends the commentary ("w23.04 10 párrs. 10, 11").

        The code starts at the first " w" in the text; an earlier word beginning with
        "w" will cut the commentary short. Returns "" when there is no match.
        """
        if not explanation:
            return ""

        m = WATCHTOWER_RE.search(explanation)
        if not m:
            self.logger.debug("No Watchtower reference found in explanation")
            return ""

        return explanation[m.start() + 1 :].strip()

    def separate_scripture_reference(self, text_with_reference: Optional[str]) -> ScriptureParts:
        """
        Split "Body text (Juan 11:4)." into citation "(Juan 11:4)." and body "Body text.".

        Everything from the first "(" to the end is the citation, including any
        later parenthetical groups.
        """
        if not text_with_reference:
            return ScriptureParts(text="", text_content="")

        m = SCRIPTURE_PARENTHESIS_RE.search(text_with_reference)
        if not m:
            return ScriptureParts(text="", text_content=text_with_reference.strip())

        reference = text_with_reference[m.start() :].strip()
        content = text_with_reference[: m.start()].strip()
        if content and not content.endswith("."):
            content = f"{content}."

        return ScriptureParts(text=reference, text_content=content)
