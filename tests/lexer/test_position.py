"""Tests for the incremental position tracker."""

from plantilla.lexer import PositionTracker


class TestInitialPosition:
    """The character at offset 0 is accounted for before any advance."""

    def test_first_character_is_column_one(self) -> None:
        tracker = PositionTracker("abc")
        assert tracker.offset == 0
        assert tracker.lineno == 1
        assert tracker.col == 1
        assert tracker.peek() == "a"

    def test_leading_newline_starts_line_two(self) -> None:
        tracker = PositionTracker("\nabc")
        assert tracker.lineno == 2
        assert tracker.col == 0

    def test_empty_source_is_at_end(self) -> None:
        tracker = PositionTracker("")
        assert tracker.at_end
        assert tracker.peek() == ""


class TestAdvance:
    """Line and column follow each single-character move."""

    def test_advance_within_line(self) -> None:
        tracker = PositionTracker("abcd")
        assert tracker.advance(2) is True
        assert tracker.peek() == "c"
        assert (tracker.lineno, tracker.col) == (1, 3)

    def test_newline_resets_column(self) -> None:
        tracker = PositionTracker("ab\ncd")
        tracker.advance(2)
        assert tracker.peek() == "\n"
        assert (tracker.lineno, tracker.col) == (2, 0)
        tracker.advance()
        assert tracker.peek() == "c"
        assert (tracker.lineno, tracker.col) == (2, 1)

    def test_consecutive_newlines(self) -> None:
        tracker = PositionTracker("a\n\n\nb")
        tracker.advance(4)
        assert tracker.peek() == "b"
        assert (tracker.lineno, tracker.col) == (4, 1)

    def test_carriage_return_is_an_ordinary_column(self) -> None:
        tracker = PositionTracker("a\r\nb")
        tracker.advance()
        assert tracker.peek() == "\r"
        assert (tracker.lineno, tracker.col) == (1, 2)
        tracker.advance(2)
        assert (tracker.lineno, tracker.col) == (2, 1)

    def test_non_ascii_counts_characters_not_bytes(self) -> None:
        tracker = PositionTracker("éé{")
        tracker.advance(2)
        assert tracker.peek() == "{"
        assert tracker.offset == 2
        assert (tracker.lineno, tracker.col) == (1, 3)

    def test_advance_past_end_returns_false(self) -> None:
        tracker = PositionTracker("ab")
        assert tracker.advance() is True
        assert tracker.advance() is False
        assert tracker.at_end
        assert tracker.advance(3) is False

    def test_peek_relative(self) -> None:
        tracker = PositionTracker("{%")
        assert tracker.peek(1) == "%"
        assert tracker.peek(2) == ""


class TestLocationSnapshot:
    def test_location_matches_tracker(self) -> None:
        tracker = PositionTracker("ab\ncd", source_file="page.html")
        tracker.advance(4)
        loc = tracker.location()
        assert loc.lineno == 2
        assert loc.col_offset == 2
        assert loc.offset == 4
        assert loc.source_file == "page.html"
        assert str(loc) == "page.html:2:2"

    def test_snapshot_is_not_affected_by_later_moves(self) -> None:
        tracker = PositionTracker("abc")
        loc = tracker.location()
        tracker.advance(2)
        assert loc.col_offset == 1
        assert loc.offset == 0
