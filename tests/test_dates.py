"""Tests for due-date resolution (fixed reference date, no clock dependence)."""

from __future__ import annotations

from datetime import date

import pytest

from meeting_tasks.extraction.dates import is_iso_date, resolve_due_date

WEDNESDAY = date(2025, 3, 12)
FRIDAY = date(2025, 3, 14)


class TestNamedMonthDay:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Ship it by March 5", "2025-03-05"),
            ("due Feb 20th", "2025-02-20"),
            ("deadline: sept 3", "2025-09-03"),
            ("Dec. 1st launch", "2025-12-01"),
        ],
    )
    def test_month_and_day(self, text: str, expected: str) -> None:
        assert resolve_due_date(text, WEDNESDAY) == expected

    def test_impossible_day_is_not_a_match(self) -> None:
        assert resolve_due_date("by Feb 30", WEDNESDAY) is None

    def test_month_day_beats_relative_terms(self) -> None:
        assert resolve_due_date("not tomorrow, March 20", WEDNESDAY) == "2025-03-20"


class TestRelativeTerms:
    def test_tomorrow(self) -> None:
        assert resolve_due_date("I'll send it tomorrow", WEDNESDAY) == "2025-03-13"

    @pytest.mark.parametrize(
        "text",
        ["finish today", "by EOD", "before end of day", "tonight", "before evening", "after our meeting", "by 5pm"],
    )
    def test_same_day_terms(self, text: str) -> None:
        assert resolve_due_date(text, WEDNESDAY) == "2025-03-12"

    def test_end_of_week(self) -> None:
        assert resolve_due_date("wrap up by end of week", WEDNESDAY) == "2025-03-14"
        assert resolve_due_date("EOW", WEDNESDAY) == "2025-03-14"

    def test_end_of_week_on_friday_rolls_forward(self) -> None:
        assert resolve_due_date("end of the week", FRIDAY) == "2025-03-21"


class TestWeekdays:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("by Friday", "2025-03-14"),
            ("next Monday", "2025-03-17"),
            ("due tuesday", "2025-03-18"),
            ("until Thursday", "2025-03-13"),
        ],
    )
    def test_upcoming_weekday(self, text: str, expected: str) -> None:
        assert resolve_due_date(text, WEDNESDAY) == expected

    def test_same_weekday_rolls_a_week(self) -> None:
        assert resolve_due_date("on Wednesday", WEDNESDAY) == "2025-03-19"

    def test_bare_weekday_without_preposition(self) -> None:
        assert resolve_due_date("Friday was busy", WEDNESDAY) is None


class TestNumericDates:
    def test_month_first(self) -> None:
        assert resolve_due_date("send by 3/5", WEDNESDAY) == "2025-03-05"

    def test_day_first_when_month_first_invalid(self) -> None:
        assert resolve_due_date("review on 25/12", WEDNESDAY) == "2025-12-25"

    def test_dash_separator(self) -> None:
        assert resolve_due_date("due 4-7", WEDNESDAY) == "2025-04-07"

    def test_neither_reading_valid(self) -> None:
        assert resolve_due_date("ratio 13/13", WEDNESDAY) is None


class TestNoMatch:
    @pytest.mark.parametrize("text", ["", "Review the PR", "sometime soon"])
    def test_unknown_yields_none(self, text: str) -> None:
        assert resolve_due_date(text, WEDNESDAY) is None

    def test_defaults_to_current_date(self) -> None:
        assert resolve_due_date("today") == date.today().isoformat()


class TestIsIsoDate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-02-29", True),
            ("2025-02-29", False),
            ("2025-3-5", False),
            ("next friday", False),
            (None, False),
        ],
    )
    def test_validity(self, value: str | None, expected: bool) -> None:
        assert is_iso_date(value) is expected
