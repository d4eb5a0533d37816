"""Tests for keyword hover documentation."""

from __future__ import annotations

import pytest

from jabuti.core.hover import HoverResolver, MarkupFormat
from jabuti.core.navigation import WordRange


@pytest.fixture
def resolver(fixed_clock) -> HoverResolver:
    return HoverResolver(clock=fixed_clock)


class TestHoverResolver:
    def test_contract(self, resolver: HoverResolver) -> None:
        info = resolver.hover("contract C {", 0, 2)
        assert info is not None
        assert info.format == MarkupFormat.PLAINTEXT
        assert info.value.startswith("An agreement")
        assert info.range == WordRange(0, 0, 8, "contract")

    def test_begin_date_examples_use_clock(self, resolver: HoverResolver) -> None:
        info = resolver.hover("    beginDate = x", 0, 6)
        assert info is not None
        assert info.range == WordRange(0, 4, 13, "beginDate")
        assert "2024-01-01 12:00:00" in info.value
        assert info.value.endswith("2024-01-01 12:00")

    def test_dates_is_markdown_with_both_dates(self, resolver: HoverResolver) -> None:
        info = resolver.hover("  dates {", 0, 3)
        assert info is not None
        assert info.format == MarkupFormat.MARKDOWN
        assert "beginDate = 2024-01-01 12:00:00" in info.value
        assert "dueDate = 2024-01-02 12:00:00" in info.value

    def test_first_match_wins(self, resolver: HoverResolver) -> None:
        # "beginDate" is listed before "dates"
        info = resolver.hover("beginDate", 0, 1)
        assert info is not None
        assert info.value.startswith("The begin date")

    def test_term_call_with_arguments(self, resolver: HoverResolver) -> None:
        info = resolver.hover("WeekDaysInterval(Monday to Friday)", 0, 3)
        assert info is not None
        assert info.value.startswith("A weekday interval")

    def test_clause_type(self, resolver: HoverResolver) -> None:
        info = resolver.hover("obligation B {", 0, 3)
        assert info is not None
        assert info.format == MarkupFormat.MARKDOWN
        assert "obligation clauseName {" in info.value

    def test_unknown_word(self, resolver: HoverResolver) -> None:
        assert resolver.hover("foo bar", 0, 1) is None

    def test_blank_position(self, resolver: HoverResolver) -> None:
        assert resolver.hover("   ", 0, 1) is None
