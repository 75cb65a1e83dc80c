"""Tests for the Template handle: construction, parsing and execution."""

from pathlib import Path

import pytest

from plantilla import (
    Context,
    DictLocator,
    ExecutionError,
    FileSystemLocator,
    ParseError,
    ResolutionError,
    Template,
    TemplateConfig,
    from_file,
    from_string,
)


class TestConstruction:
    def test_new_template_is_unparsed(self) -> None:
        tpl = Template("t", "Hello")
        assert not tpl.parsed
        assert tpl.nodes == ()

    def test_empty_source_rejected(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            Template("empty.html", "")
        assert exc_info.value.message == "template has no content"
        assert exc_info.value.source_file == "empty.html"

    def test_explicit_config_is_kept(self) -> None:
        config = TemplateConfig(autoescape=False)
        assert Template("t", "x", config=config).config is config

    def test_repr(self) -> None:
        tpl = Template("page", "a{{ b }}")
        assert repr(tpl) == "<Template 'page' unparsed>"
        tpl.parse()
        assert repr(tpl) == "<Template 'page' 2 nodes>"


class TestParse:
    def test_parse_is_idempotent(self) -> None:
        tpl = Template("t", "Hello {{ name }}")
        assert tpl.parse() is tpl
        nodes = tpl.nodes
        tpl.parse()
        assert tpl.parsed
        assert tpl.nodes is nodes

    def test_failed_parse_leaves_template_unparsed(self) -> None:
        tpl = Template("t", "ok {{ broken")
        with pytest.raises(ParseError):
            tpl.parse()
        assert not tpl.parsed
        assert tpl.nodes == ()

    def test_parse_error_names_template(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_string("page.html", "{% if x")
        assert str(exc_info.value) == "page.html:1:1 file end reached within tag"

    def test_from_string_parses(self) -> None:
        assert from_string("t", "x").parsed


class TestExecute:
    def test_hello_world(self) -> None:
        tpl = from_string("greeting", "Hello {{ name }}!{# note #}")
        assert tpl.execute({"name": "World"}) == "Hello World!"

    def test_execute_parses_lazily(self) -> None:
        tpl = Template("t", "{{ a }}")
        assert tpl.execute({"a": 1}) == "1"
        assert tpl.parsed

    def test_execute_without_context(self) -> None:
        assert from_string("t", "[{{ missing }}]").execute() == "[]"

    def test_execute_with_context_object(self) -> None:
        ctx = Context(name="Ada")
        assert from_string("t", "{{ name }}").execute(ctx) == "Ada"

    def test_set_is_visible_on_caller_context(self) -> None:
        ctx = Context()
        from_string("t", "{% set answer = 42 %}").execute(ctx)
        assert ctx["answer"] == 42

    def test_render_keywords(self) -> None:
        tpl = from_string("t", "{{ a }}-{{ b }}")
        assert tpl.render(a=1, b=2) == "1-2"

    def test_render_keyword_named_self(self) -> None:
        assert from_string("t", "{{ self }}").render(self="me") == "me"

    def test_repeated_execution(self) -> None:
        tpl = from_string("t", "{% for i in items %}{{ i }}{% endfor %}")
        assert tpl.execute({"items": [1, 2]}) == "12"
        assert tpl.execute({"items": [3]}) == "3"

    def test_line_endings_preserved(self) -> None:
        source = "a\r\nb\n{{ x }}\r\n"
        assert from_string("t", source).execute({"x": "c"}) == "a\r\nb\nc\r\n"

    def test_autoescape_on_by_default(self) -> None:
        tpl = from_string("t", "{{ html }}")
        assert tpl.execute({"html": "<b>&</b>"}) == "&lt;b&gt;&amp;&lt;/b&gt;"

    def test_autoescape_off(self) -> None:
        tpl = from_string("t", "{{ html }}", config=TemplateConfig(autoescape=False))
        assert tpl.execute({"html": "<b>"}) == "<b>"

    def test_safe_bypasses_autoescape(self) -> None:
        tpl = from_string("t", "{{ html|safe }}")
        assert tpl.execute({"html": "<b>"}) == "<b>"

    def test_no_partial_output_on_error(self) -> None:
        tpl = from_string("t", "before {{ x|int }} after")
        with pytest.raises(ExecutionError):
            tpl.execute({"x": "not a number"})


class TestResolve:
    def test_resolve_without_locator(self) -> None:
        tpl = from_string("main", "x")
        with pytest.raises(ResolutionError, match="no template locator"):
            tpl.resolve("other")

    def test_resolve_shares_locator_and_config(self) -> None:
        locator = DictLocator({"other": "{{ x }}"})
        config = TemplateConfig(autoescape=False)
        tpl = from_string("main", "x", locator=locator, config=config)
        other = tpl.resolve("other")
        assert other.name == "other"
        assert other.parsed
        assert other.locator is locator
        assert other.config is config

    def test_resolve_missing_name(self) -> None:
        tpl = from_string("main", "x", locator=DictLocator({}))
        with pytest.raises(ResolutionError):
            tpl.resolve("nope")


class TestFromFile:
    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "page.html"
        path.write_text("Hi {{ name }}", encoding="utf-8")
        tpl = from_file(path)
        assert tpl.name == "page.html"
        assert tpl.render(name="Bo") == "Hi Bo"

    def test_from_file_default_locator_is_file_directory(self, tmp_path: Path) -> None:
        (tmp_path / "partials").mkdir()
        (tmp_path / "partials" / "header.html").write_text("<h1>{{ title }}</h1>", encoding="utf-8")
        (tmp_path / "page.html").write_text(
            "{% include 'partials/header.html' %}body", encoding="utf-8"
        )
        tpl = from_file(str(tmp_path / "page.html"))
        assert isinstance(tpl.locator, FileSystemLocator)
        assert tpl.locator.base_dir == tmp_path
        assert tpl.render(title="T") == "<h1>T</h1>body"

    def test_from_file_relative_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "rel.html").write_text("relative", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert from_file("rel.html").execute() == "relative"

    def test_from_file_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "utf8.html"
        path.write_text("¡Hola {{ name }}!", encoding="utf-8")
        assert from_file(path).render(name="Señor") == "¡Hola Señor!"

    def test_from_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ResolutionError):
            from_file(tmp_path / "missing.html")

    def test_missing_file_is_an_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            from_file(tmp_path / "missing.html")

    def test_from_file_undecodable_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.html"
        path.write_bytes(b"hi \xff\xfe {{ x }}")
        with pytest.raises(ResolutionError) as exc_info:
            from_file(path)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_include_of_undecodable_file(self, tmp_path: Path) -> None:
        (tmp_path / "binary.html").write_bytes(b"\xff\xfe")
        tpl = from_string("main", "{% include 'binary.html' %}", locator=FileSystemLocator(tmp_path))
        with pytest.raises(ExecutionError) as exc_info:
            tpl.execute()
        assert "could not find the template" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ResolutionError)

    def test_from_file_errors_use_base_name(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.html"
        path.write_text("{{ }}", encoding="utf-8")
        with pytest.raises(ParseError) as exc_info:
            from_file(path)
        assert str(exc_info.value) == "bad.html:1:1 empty filter"
