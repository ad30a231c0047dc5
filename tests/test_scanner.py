# tests/test_scanner.py
"""Tests for tokenizing templates and standalone-tag elision."""

import pytest

from moustachio.core.templating.scanner import DEFAULT_DELIMITERS, TagKind, TagToken, TextToken, scan
from moustachio.exceptions import MalformedTagError


def kinds(result):
    return [t.kind if isinstance(t, TagToken) else "text" for t in result.tokens]


class TestTagRecognition:
    @pytest.mark.parametrize("template,kind,name", [
        ("{{name}}", TagKind.VARIABLE, "name"),
        ("{{{name}}}", TagKind.UNESCAPED, "name"),
        ("{{&name}}", TagKind.UNESCAPED, "name"),
        ("{{#name}}", TagKind.SECTION, "name"),
        ("{{^name}}", TagKind.INVERTED, "name"),
        ("{{/name}}", TagKind.CLOSE, "name"),
        ("{{>name}}", TagKind.PARTIAL, "name"),
        ("{{! a comment }}", TagKind.COMMENT, "a comment"),
        ("{{ a.b.c }}", TagKind.VARIABLE, "a.b.c"),
        ("{{.}}", TagKind.VARIABLE, "."),
    ])
    def test_sigils(self, template, kind, name):
        (token,) = scan(template).tokens
        assert token.kind is kind
        assert token.name == name

    def test_text_between_tags(self):
        result = scan("a{{x}}b")
        assert result.tokens[0] == TextToken("a")
        assert result.tokens[2] == TextToken("b")

    def test_plain_text_is_one_token(self):
        assert scan("no tags here\n").tokens == [TextToken("no tags here\n")]

    def test_empty_template(self):
        result = scan("")
        assert result.tokens == []
        assert result.delimiters == DEFAULT_DELIMITERS

    def test_positions_are_recorded(self):
        tokens = scan("line one\n  {{x}}").tokens
        assert tokens[1].line == 2
        assert tokens[1].column == 3


class TestStandalone:
    def test_standalone_section_consumes_line(self):
        result = scan("a\n  {{#s}}  \nb")
        assert result.tokens[0] == TextToken("a\n")
        assert result.tokens[1].standalone is True
        assert result.tokens[2] == TextToken("b")

    def test_variable_is_never_standalone(self):
        result = scan("  {{x}}\n")
        assert [t.standalone for t in result.tokens if isinstance(t, TagToken)] == [False]
        assert result.tokens[0] == TextToken("  ")
        assert result.tokens[2] == TextToken("\n")

    def test_two_tags_on_a_line_are_not_standalone(self):
        result = scan("{{#a}}{{/a}}\n")
        assert [t.standalone for t in result.tokens if isinstance(t, TagToken)] == [False, False]
        assert result.tokens[-1] == TextToken("\n")

    def test_only_one_newline_is_removed(self):
        result = scan("{{! c }}\n\n")
        assert result.tokens[-1] == TextToken("\n")

    def test_standalone_partial_records_indent(self):
        token = scan("\t  {{>p}}\n").tokens[0]
        assert token.kind is TagKind.PARTIAL
        assert token.indent == "\t  "

    def test_inline_partial_has_no_indent(self):
        tokens = scan("  x {{>p}}\n").tokens
        assert tokens[1].indent == ""

    def test_crlf_line_ending(self):
        tokens = scan("{{#s}}\r\nbody").tokens
        assert tokens[1] == TextToken("body")


class TestDelimiters:
    def test_set_delimiter_changes_following_tags(self):
        result = scan("{{=<% %>=}}<%x%>{{y}}")
        assert kinds(result) == [TagKind.SET_DELIMITERS, TagKind.VARIABLE, "text"]
        assert result.tokens[1].name == "x"
        assert result.tokens[2] == TextToken("{{y}}")
        assert result.delimiters == ("<%", "%>")

    def test_custom_starting_delimiters(self):
        result = scan("[[x]] {{y}}", ("[[", "]]"))
        assert result.tokens[0].name == "x"
        assert result.delimiters == ("[[", "]]")

    def test_starting_delimiters_are_not_mutated_across_scans(self):
        scan("{{=| |=}}")
        assert scan("{{x}}").tokens[0].name == "x"


class TestMalformedTags:
    @pytest.mark.parametrize("template", [
        "{{x",
        "text {{#section",
        "{{{x}}",
        "{{=<% %>}}",
        "{{}}",
        "{{# }}",
        "{{a b}}",
        "{{a..b}}",
        "{{.a}}",
        "{{=<%=}}",
        "{{=< % %>=}}",
    ])
    def test_rejected(self, template):
        with pytest.raises(MalformedTagError):
            scan(template)

    def test_error_reports_position(self):
        with pytest.raises(MalformedTagError) as excinfo:
            scan("ok\nstill ok {{ bad tag }}")
        assert excinfo.value.line == 2
        assert excinfo.value.column == 10
        assert "line 2" in str(excinfo.value)

    def test_partial_names_may_contain_paths(self):
        assert scan("{{> dir/sub.part }}").tokens[0].name == "dir/sub.part"

    @pytest.mark.parametrize("delimiters", [("", "}}"), ("{ {", "}}"), ("{{", "=}}")])
    def test_invalid_starting_delimiters(self, delimiters):
        with pytest.raises(MalformedTagError):
            scan("x", delimiters)
