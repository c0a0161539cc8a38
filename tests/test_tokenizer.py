"""Tests for the tokenizer module."""

import pytest

from myshell.tokenizer import State, tokenize, transition


class TestBasicTokenization:
    def test_simple_command(self):
        assert tokenize("echo hello") == ["echo", "hello"]

    def test_multiple_args(self):
        assert tokenize("ls -la /tmp") == ["ls", "-la", "/tmp"]

    def test_empty_string(self):
        assert tokenize("") == []

    def test_whitespace_only(self):
        assert tokenize("   ") == []

    def test_single_word(self):
        assert tokenize("ls") == ["ls"]

    def test_repeated_spaces_collapse(self):
        assert tokenize("echo   hello    world") == ["echo", "hello", "world"]

    def test_preserves_flags_with_equals(self):
        assert tokenize("cmd --flag=value") == ["cmd", "--flag=value"]

    def test_operators_need_spaces(self):
        assert tokenize("echo hi > out.txt") == ["echo", "hi", ">", "out.txt"]
        assert tokenize("echo hi>out.txt") == ["echo", "hi>out.txt"]

    @pytest.mark.parametrize(
        "line",
        ["echo hello world", "  ls   -la  /tmp ", "a b  c   d", "cat /etc/hosts"],
    )
    def test_reparsing_unquoted_output_is_stable(self, line):
        tokens = tokenize(line)
        assert tokenize(" ".join(tokens)) == tokens
        assert tokens == line.split()


class TestSingleQuotes:
    def test_preserves_spaces(self):
        assert tokenize("echo 'hello   world'") == ["echo", "hello   world"]

    def test_quoted_word(self):
        assert tokenize("'a b'") == ["a b"]

    def test_backslash_is_literal(self):
        assert tokenize(r"echo 'a\b'") == ["echo", r"a\b"]

    def test_backslash_before_quote_is_literal(self):
        assert tokenize(r"echo 'a\'") == ["echo", "a\\"]

    def test_double_quote_is_literal(self):
        assert tokenize("""echo 'say "hi"'""") == ["echo", 'say "hi"']

    def test_adjacent_quoted_strings(self):
        assert tokenize("echo 'foo''bar'") == ["echo", "foobar"]

    def test_empty_quotes_produce_no_token(self):
        assert tokenize("echo ''") == ["echo"]


class TestDoubleQuotes:
    def test_preserves_spaces(self):
        assert tokenize('echo "hello   world"') == ["echo", "hello   world"]

    def test_escaped_double_quote(self):
        assert tokenize(r'"a\"b"') == ['a"b']

    def test_escaped_backslash(self):
        assert tokenize(r'"a\\b"') == ["a\\b"]

    def test_escaped_dollar(self):
        assert tokenize(r'"a\$b"') == ["a$b"]

    def test_backslash_before_ordinary_char_kept(self):
        assert tokenize(r'"a\nb"') == [r"a\nb"]

    def test_backslash_before_single_quote_kept(self):
        assert tokenize(r'''"it\'s"''') == [r"it\'s"]

    def test_backslash_before_space_kept(self):
        assert tokenize(r'"a\ b"') == [r"a\ b"]

    def test_single_quote_is_literal(self):
        assert tokenize('echo "it\'s fine"') == ["echo", "it's fine"]

    def test_quotes_join_with_bare_text(self):
        assert tokenize('a"b c"d') == ["ab cd"]


class TestEscapes:
    def test_escaped_space(self):
        assert tokenize(r"a\ b") == ["a b"]

    def test_escaped_quotes_outside_quotes(self):
        assert tokenize(r"echo \'hi\' \"there\"") == ["echo", "'hi'", '"there"']

    def test_escaped_backslash(self):
        assert tokenize(r"echo a\\n") == ["echo", r"a\n"]

    def test_escape_ordinary_char(self):
        assert tokenize(r"echo \n") == ["echo", "n"]

    def test_trailing_backslash_dropped(self):
        assert tokenize("echo abc\\") == ["echo", "abc"]


class TestUnterminated:
    def test_unterminated_single_quote(self):
        assert tokenize("'abc") == ["abc"]

    def test_unterminated_double_quote(self):
        assert tokenize('echo "abc def') == ["echo", "abc def"]

    def test_unterminated_after_escape(self):
        assert tokenize('"abc\\') == ["abc"]


class TestTransitions:
    def test_space_separates_when_bare(self):
        assert transition(State.BARE, " ") == (State.BARE, None)

    def test_space_literal_in_single(self):
        assert transition(State.SINGLE, " ") == (State.SINGLE, " ")

    def test_escaped_space_in_double_keeps_backslash(self):
        assert transition(State.DOUBLE_ESCAPED, " ") == (State.DOUBLE, "\\ ")

    def test_escaped_quote_in_double(self):
        assert transition(State.DOUBLE_ESCAPED, '"') == (State.DOUBLE, '"')

    def test_escape_outside_quotes(self):
        assert transition(State.BARE, "\\") == (State.BARE_ESCAPED, "")
        assert transition(State.BARE_ESCAPED, " ") == (State.BARE, " ")

    def test_quote_toggles(self):
        assert transition(State.BARE, "'") == (State.SINGLE, "")
        assert transition(State.SINGLE, "'") == (State.BARE, "")
        assert transition(State.BARE, '"') == (State.DOUBLE, "")
        assert transition(State.DOUBLE, '"') == (State.BARE, "")


class TestTilde:
    def test_bare_tilde(self):
        assert tokenize("cd ~", home="/home/tester") == ["cd", "/home/tester"]

    def test_tilde_path(self):
        assert tokenize("ls ~/docs", home="/home/tester") == ["ls", "/home/tester/docs"]

    def test_single_quoted_tilde_literal(self):
        assert tokenize("echo '~'", home="/home/tester") == ["echo", "~"]

    def test_double_quoted_tilde_literal(self):
        assert tokenize('echo "~/x"', home="/home/tester") == ["echo", "~/x"]

    def test_escaped_tilde_literal(self):
        assert tokenize(r"echo \~", home="/home/tester") == ["echo", "~"]

    def test_tilde_after_empty_quotes_literal(self):
        assert tokenize("echo ''~", home="/home/tester") == ["echo", "~"]

    def test_tilde_user_untouched(self):
        assert tokenize("ls ~other", home="/home/tester") == ["ls", "~other"]

    def test_inner_tilde_untouched(self):
        assert tokenize("echo a~b a/~", home="/home/tester") == ["echo", "a~b", "a/~"]

    def test_no_home_keeps_tilde(self):
        assert tokenize("cd ~") == ["cd", "~"]
