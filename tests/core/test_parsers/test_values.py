"""Tests for right-hand-side normalization and interpretation."""

import re

import pytest

from alembic_tree.graph.parsers.values import (
    DOWN_REVISION_RULES,
    ValueRule,
    bracket_depth,
    match_rule,
    normalize_rhs,
    parse_down_revisions,
    parse_revision,
    strip_inline_comment,
)


class TestStripInlineComment:
    def test_strips_trailing_comment(self):
        assert strip_inline_comment('"abc"  # the first one') == '"abc"'

    def test_keeps_hash_inside_quotes(self):
        assert strip_inline_comment('"a#b"  # note') == '"a#b"'

    def test_comment_without_space(self):
        assert strip_inline_comment('"abc"#note') == '"abc"'

    def test_no_comment(self):
        assert strip_inline_comment("None") == "None"

    def test_escaped_quote_does_not_close_string(self):
        assert strip_inline_comment(r'"a\"#b" # c') == r'"a\"#b"'

    def test_unterminated_quote_does_not_hide_comment(self):
        assert strip_inline_comment("'a1  # note") == "'a1"

    def test_closed_string_after_hash_is_kept(self):
        assert strip_inline_comment("'a#1', 'b2'") == "'a#1', 'b2'"


class TestNormalizeRhs:
    def test_collapses_whitespace(self):
        assert normalize_rhs("  ( 'a',\t  'b' )  ") == "( 'a', 'b' )"

    def test_strips_comment_then_trims(self):
        assert normalize_rhs("'abc'   # merge point") == "'abc'"

    @pytest.mark.parametrize(
        "raw",
        [
            "'abc'   # merge point",
            "  ( 'a',\t  'b' )  ",
            "None  #base",
            '"x # y"   # z',
            "'unterminated # still text",
            "",
        ],
    )
    def test_normalization_is_idempotent(self, raw):
        once = normalize_rhs(raw)
        assert normalize_rhs(once) == once


class TestParseRevision:
    def test_double_quoted(self):
        assert parse_revision('"a1"') == "a1"

    def test_single_quoted(self):
        assert parse_revision("'ae1027a6acf'") == "ae1027a6acf"

    def test_inner_whitespace_kept(self):
        assert parse_revision('" a1 "') == " a1 "

    def test_with_comment(self):
        assert parse_revision('"a1"  # initial') == "a1"

    def test_bare_token(self):
        assert parse_revision("a1") == "a1"

    def test_stray_quote_is_stripped(self):
        assert parse_revision("'a1") == "a1"

    def test_stray_quote_with_comment(self):
        assert parse_revision("'a1  # note") == "a1"

    def test_empty_literal_gives_empty_string(self):
        assert parse_revision('""') == ""


class TestParseDownRevisions:
    @pytest.mark.parametrize("raw", ["None", "none", "NULL", "null", "None  # base"])
    def test_none_is_empty(self, raw):
        assert parse_down_revisions(raw) == []

    def test_missing_line_is_empty(self):
        assert parse_down_revisions(None) == []

    def test_single_quoted(self):
        assert parse_down_revisions('"a1"') == ["a1"]

    def test_tuple(self):
        assert parse_down_revisions("('a1', 'b2')") == ["a1", "b2"]

    def test_list(self):
        assert parse_down_revisions('["a1", "b2"]') == ["a1", "b2"]

    def test_single_element_tuple(self):
        assert parse_down_revisions("('a1',)") == ["a1"]

    def test_sequence_keeps_duplicates(self):
        assert parse_down_revisions("('a1', 'a1')") == ["a1", "a1"]

    def test_tuple_without_parentheses(self):
        assert parse_down_revisions("'a1', 'b2'") == ["a1", "b2"]

    def test_bare_token(self):
        assert parse_down_revisions("a1_b2") == ["a1_b2"]

    @pytest.mark.parametrize(
        "raw",
        ["some_call()", "()", "[]", "a1 + b2", '""', "f'{prefix}'"],
    )
    def test_unrecognized_falls_back_to_empty(self, raw):
        assert parse_down_revisions(raw) == []


class TestRulePipeline:
    def test_rule_order(self):
        assert [r.name for r in DOWN_REVISION_RULES] == [
            "none",
            "quoted",
            "sequence",
            "bare_tuple",
            "bare",
            "fallback",
        ]

    def test_match_rule_reports_first_match(self):
        assert match_rule("None") == "none"
        assert match_rule("'a'") == "quoted"
        assert match_rule("('a', 'b')") == "sequence"
        assert match_rule("abc") == "bare"
        assert match_rule("1 + 2") == "fallback"

    def test_custom_rule_can_be_inserted(self):
        # Accept "a1|b2" pipe syntax ahead of the fallback
        pipe_rule = ValueRule(
            "pipe",
            re.compile(r"^\w+(\|\w+)+$"),
            lambda value, m: value.split("|"),
        )
        rules = DOWN_REVISION_RULES[:-1] + [pipe_rule, DOWN_REVISION_RULES[-1]]

        assert parse_down_revisions("a1|b2", rules) == ["a1", "b2"]
        assert parse_down_revisions("a1|b2") == []


class TestBracketDepth:
    def test_balanced(self):
        assert bracket_depth("('a', 'b')") == 0

    def test_open(self):
        assert bracket_depth("(") == 1

    def test_brackets_inside_quotes_ignored(self):
        assert bracket_depth("('(a',") == 1

    def test_comment_ignored(self):
        assert bracket_depth("'a',  # (") == 0
