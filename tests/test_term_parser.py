import pytest

from fd_wrapper.planning.term_parser import (
    MalformedLineError,
    TokenKind,
    is_comment,
    parse_action,
    parse_state,
    tokenize,
)
from fd_wrapper.planning.utils.term_types import Term, render_state


class TestTokenize:
    def test_token_kinds(self):
        kinds = [t.kind for t in tokenize("(on(a,b) x)")]
        assert kinds == [
            TokenKind.OPEN,
            TokenKind.ATOM,
            TokenKind.OPEN,
            TokenKind.ATOM,
            TokenKind.COMMA,
            TokenKind.ATOM,
            TokenKind.CLOSE,
            TokenKind.SPACE,
            TokenKind.ATOM,
            TokenKind.CLOSE,
        ]

    def test_whitespace_runs_collapse(self):
        tokens = list(tokenize("a  \t b"))
        assert [t.kind for t in tokens] == [TokenKind.ATOM, TokenKind.SPACE, TokenKind.ATOM]
        assert tokens[2].column == 5

    def test_restartable(self):
        line = "(pick-up a table)"
        assert list(tokenize(line)) == list(tokenize(line))


class TestParseState:
    def test_blocksworld_state(self):
        state = parse_state("(on(a,b) clear(c) handempty)")
        assert state == {Term("on", ("a", "b")), Term("clear", ("c",)), Term("handempty")}

    def test_whitespace_inside_arguments_is_ignored(self):
        assert parse_state("(on(a, b))") == {Term("on", ("a", "b"))}

    def test_duplicates_collapse(self):
        assert len(parse_state("(p p q(a) q(a))")) == 2

    def test_empty_state(self):
        assert parse_state("()") == frozenset()

    def test_trailing_newline_and_padding(self):
        assert parse_state("  (p q)  \n") == {Term("p"), Term("q")}

    def test_empty_argument_list_keeps_one_empty_argument(self):
        assert parse_state("(f())") == {Term("f", ("",))}

    def test_nested_arguments_are_rejected(self):
        with pytest.raises(MalformedLineError, match="nested"):
            parse_state("(on(a,f(b)))")

    def test_unbalanced_parentheses_are_rejected(self):
        with pytest.raises(MalformedLineError):
            parse_state("(on(a,b) clear(c)")
        with pytest.raises(MalformedLineError):
            parse_state("(on(a,b")

    def test_text_outside_parentheses_is_rejected(self):
        with pytest.raises(MalformedLineError):
            parse_state("(p) q")
        with pytest.raises(MalformedLineError):
            parse_state("p q")

    def test_error_reports_column(self):
        with pytest.raises(MalformedLineError) as excinfo:
            parse_state("(on(a,(b)))")
        assert excinfo.value.column == 6


class TestParseAction:
    def test_action_with_arguments(self):
        assert parse_action("(pick-up a table)") == Term("pick-up", ("a", "table"))
        assert str(parse_action("(pick-up a table)")) == "pick-up(a,table)"

    def test_action_without_arguments(self):
        assert parse_action("(noop)") == Term("noop")

    def test_repeated_spaces(self):
        assert parse_action("( move  a   b )") == Term("move", ("a", "b"))

    def test_empty_action_is_rejected(self):
        with pytest.raises(MalformedLineError):
            parse_action("()")

    def test_commas_and_nesting_are_rejected(self):
        with pytest.raises(MalformedLineError):
            parse_action("(move a,b)")
        with pytest.raises(MalformedLineError):
            parse_action("(move (a) b)")


def test_comment_detection():
    assert is_comment("; cost = 3 (unit cost)")
    assert not is_comment(" ; indented")
    assert not is_comment("(p)")


@pytest.mark.parametrize(
    "term",
    [
        Term("handempty"),
        Term("clear", ("c",)),
        Term("on", ("a", "b")),
        Term("at", ("ball-1", "room_a", "x2")),
    ],
)
def test_rendered_terms_parse_back(term):
    assert parse_state(render_state({term})) == {term}
    assert parse_action(term.to_pddl()) == term
