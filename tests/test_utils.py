"""Tests for shared utilities."""

import logging

from plantilla.utils import escape_html, get_logger, strip_tags


class TestEscapeHtml:
    def test_special_characters(self) -> None:
        assert escape_html("<b>Tom & \"Jerry\"</b>") == "&lt;b&gt;Tom &amp; &quot;Jerry&quot;&lt;/b&gt;"

    def test_single_quote(self) -> None:
        assert escape_html("it's") == "it&#x27;s"

    def test_empty(self) -> None:
        assert escape_html("") == ""

    def test_plain_text_unchanged(self) -> None:
        assert escape_html("plain text") == "plain text"


class TestStripTags:
    def test_removes_tags(self) -> None:
        assert strip_tags("<p class='x'>a<br/>b</p>") == "ab"

    def test_keeps_text(self) -> None:
        assert strip_tags("1 < 2") == "1 < 2"


class TestLogger:
    def test_prefix_added(self) -> None:
        assert get_logger("loaders").name == "plantilla.loaders"

    def test_package_names_unchanged(self) -> None:
        assert get_logger("plantilla.template").name == "plantilla.template"
        assert get_logger("plantilla").name == "plantilla"

    def test_returns_stdlib_logger(self) -> None:
        assert isinstance(get_logger("x"), logging.Logger)

    def test_parse_logs_at_debug(self, caplog) -> None:
        from plantilla import from_string

        with caplog.at_level(logging.DEBUG, logger="plantilla"):
            from_string("logged.html", "a{{ b }}")
        assert any("logged.html" in record.getMessage() for record in caplog.records)
        assert all(record.levelno == logging.DEBUG for record in caplog.records)
