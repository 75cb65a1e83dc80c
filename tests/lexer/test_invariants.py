"""Property-based tests for lexer invariants using Hypothesis."""

from hypothesis import given, settings
from hypothesis import strategies as st

from plantilla.errors import ParseError
from plantilla.lexer import Lexer
from plantilla.nodes import ContentNode, FilterNode

# Literal text that never opens a region
plain_text = st.text(alphabet=st.characters(blacklist_characters="{"), max_size=200)
# Expression-safe variable names
names = st.from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True).filter(
    lambda n: n not in {"and", "or", "not", "in", "true", "false", "none"}
)


class TestLexerInvariants:
    @given(plain_text)
    @settings(max_examples=200)
    def test_plain_text_is_one_content_node(self, source: str) -> None:
        nodes = Lexer(source).tokenize()
        if not source:
            assert nodes == ()
        else:
            assert len(nodes) == 1
            assert nodes[0].text == source

    @given(st.lists(st.tuples(plain_text, names), max_size=6), plain_text)
    @settings(max_examples=100)
    def test_content_and_filters_alternate(self, pairs: list[tuple[str, str]], tail: str) -> None:
        source = "".join(f"{text}{{{{ {name} }}}}" for text, name in pairs) + tail
        nodes = Lexer(source).tokenize()

        filters = [n for n in nodes if isinstance(n, FilterNode)]
        assert [n.raw for n in filters] == [name for _, name in pairs]
        content = "".join(n.text for n in nodes if isinstance(n, ContentNode))
        assert content == "".join(text for text, _ in pairs) + tail

    @given(st.lists(st.tuples(plain_text, names), min_size=1, max_size=6))
    @settings(max_examples=100)
    def test_node_offsets_point_into_source(self, pairs: list[tuple[str, str]]) -> None:
        source = "".join(f"{text}{{{{ {name} }}}}" for text, name in pairs)
        for node in Lexer(source).tokenize():
            if isinstance(node, FilterNode):
                assert source[node.location.offset : node.location.offset + 2] == "{{"
            else:
                assert source.startswith(node.text, node.location.offset)

    @given(plain_text)
    @settings(max_examples=100)
    def test_error_points_at_opening_brace(self, prefix: str) -> None:
        source = prefix + "{{ }}"
        try:
            Lexer(source).tokenize()
        except ParseError as err:
            last_newline = prefix.rfind("\n")
            assert err.lineno == prefix.count("\n") + 1
            assert err.col_offset == len(prefix) - last_newline
        else:
            raise AssertionError("empty filter was accepted")
