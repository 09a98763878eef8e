"""Tests for daily_text.date_formatter"""

import pytest

from daily_text.constants import SPANISH_MONTHS
from daily_text.date_formatter import DateFormatter


@pytest.fixture
def formatter():
    return DateFormatter(2025)


# ─── Valid phrases ─────────────────────────────────────────────────────────

class TestFormat:
    def test_weekday_day_month(self, formatter):
        assert formatter.format("Jueves 2 de enero") == "2025-01-02"

    @pytest.mark.parametrize("phrase,expected", [
        ("Lunes 1 de enero", "2025-01-01"),
        ("Martes 15 de febrero", "2025-02-15"),
        ("Miércoles 31 de diciembre", "2025-12-31"),
        ("Viernes 5 de marzo", "2025-03-05"),
        ("Sábado 20 de octubre", "2025-10-20"),
        ("Domingo 31 de agosto", "2025-08-31"),
    ])
    def test_weekdays(self, formatter, phrase, expected):
        assert formatter.format(phrase) == expected

    @pytest.mark.parametrize("month,number", sorted(SPANISH_MONTHS.items()))
    def test_all_months(self, formatter, month, number):
        assert formatter.format(f"Lunes 1 de {month}") == f"2025-{number}-01"

    def test_bare_day_month(self, formatter):
        assert formatter.format("1 de enero") == "2025-01-01"

    def test_capitalized_month(self, formatter):
        assert formatter.format("Lunes 1 de Enero") == "2025-01-01"

    def test_first_number_is_the_day(self, formatter):
        assert formatter.format("Lunes 7 y 8 de abril") == "2025-04-07"

    def test_year_as_string(self):
        assert DateFormatter("2024").format("Jueves 29 de febrero") == "2024-02-29"


# ─── Rejections ────────────────────────────────────────────────────────────

class TestRejections:
    @pytest.mark.parametrize("phrase", [
        "Invalid date",
        "de enero",
        "Lunes enero",
        "",
        None,
    ])
    def test_returns_none(self, formatter, phrase):
        assert formatter.format(phrase) is None

    def test_unknown_month_token(self, formatter):
        assert formatter.format("Lunes 1 de january") is None

    def test_not_a_calendar_date(self, formatter):
        assert formatter.format("Sábado 29 de febrero") is None
        assert formatter.format("Lunes 32 de enero") is None

    def test_logs_warning(self, formatter, caplog):
        with caplog.at_level("WARNING"):
            formatter.format("Lunes 1 de brumario")
        assert "Unknown month" in caplog.text
