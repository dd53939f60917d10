"""
Tests for partscript.script.tokenizer module.
"""

import pytest

from partscript.script.tokenizer import Cursor, tokenize


class TestNextToken:
    """Tests for Cursor.next_token."""

    def test_comma_terminated(self) -> None:
        cursor = Cursor("2048, 100")
        assert cursor.next_token() == "2048"
        assert cursor.rest == "100"

    def test_semicolon_terminated(self) -> None:
        assert tokenize("a;b") == ["a", "b"]

    def test_blank_then_terminator(self) -> None:
        assert tokenize("a, b ,c") == ["a", "b", "c"]

    def test_end_of_line_terminates(self) -> None:
        cursor = Cursor("  last")
        assert cursor.next_token() == "last"
        assert cursor.at_end

    def test_quoted_token_keeps_blanks(self) -> None:
        cursor = Cursor('"My Disk", size=100')
        assert cursor.next_token() == "My Disk"
        assert cursor.rest == "size=100"

    def test_quoted_value_after_key(self) -> None:
        line = 'name="My Disk", size=100'
        cursor = Cursor(line, len("name="))
        assert cursor.next_token() == "My Disk"

    def test_unterminated_quote(self) -> None:
        cursor = Cursor('"never closed')
        assert cursor.next_token() is None
        assert cursor.pos == 0

    def test_text_glued_to_closing_quote(self) -> None:
        cursor = Cursor('"abc"def')
        assert cursor.next_token() is None
        assert cursor.pos == 0

    def test_empty_line(self) -> None:
        assert Cursor("").next_token() is None
        assert tokenize("") == []


class TestCursor:
    """Tests for the Cursor helpers."""

    def test_consume_case_insensitive(self) -> None:
        cursor = Cursor("START=10")
        assert cursor.consume_ci("start=")
        assert cursor.rest == "10"

    def test_consume_no_match_keeps_position(self) -> None:
        cursor = Cursor("size=10")
        assert not cursor.consume_ci("start=")
        assert cursor.pos == 0

    def test_peek_and_advance(self) -> None:
        cursor = Cursor("ab")
        assert cursor.peek() == "a"
        cursor.advance(5)
        assert cursor.at_end
        assert cursor.peek() == ""

    @pytest.mark.parametrize("text", [" \t x", "x"])
    def test_skip_blank(self, text: str) -> None:
        cursor = Cursor(text)
        cursor.skip_blank()
        assert cursor.peek() == "x"
