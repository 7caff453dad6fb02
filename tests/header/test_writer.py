"""Tests for the metadata header writer."""

import pytest

from typepub.header import format_scalar, needs_quote, parse_header_lines, write_header


class TestNeedsQuote:
    """Quoting boundary for scalars."""

    def test_plain_alphanumeric(self):
        assert needs_quote("abc123") is False
        assert format_scalar("abc123") == "abc123"

    def test_colon(self):
        assert needs_quote("a:b") is True
        assert format_scalar("a:b") == '"a:b"'

    @pytest.mark.parametrize("char", list(":#-?&*![]{},>|'%@`"))
    def test_indicator_characters(self, char: str):
        assert needs_quote(f"a{char}b") is True

    @pytest.mark.parametrize("text", ["a b", "a\tb", "a\nb"])
    def test_whitespace(self, text: str):
        assert needs_quote(text) is True

    def test_unicode_letters_unquoted(self):
        assert format_scalar("标题") == "标题"

    def test_inner_double_quotes_escaped(self):
        assert format_scalar('say "hi"') == '"say \\"hi\\""'


class TestWriteHeader:
    """Tests for rendering a full mapping."""

    def test_scalar_bool_and_list(self):
        text = write_header({"title": "Hi There", "tags": ["a", "b"], "draft": False})

        assert text == 'title: "Hi There"\ntags:\n  - a\n  - b\ndraft: false'

    def test_true(self):
        assert write_header({"draft": True}) == "draft: true"

    def test_none(self):
        assert write_header({"slug": None}) == "slug:"

    def test_list_items_quoted(self):
        assert write_header({"tags": ["two words", "ok"]}) == 'tags:\n  - "two words"\n  - ok'

    def test_numbers_as_text(self):
        assert write_header({"cid": 42}) == "cid: 42"

    def test_empty_mapping(self):
        assert write_header({}) == ""

    def test_order_follows_mapping(self):
        assert write_header({"z": "1", "a": "2"}) == "z: 1\na: 2"


class TestRoundTrip:
    """Parsing written headers reproduces the mapping."""

    def test_title_tags_and_draft(self):
        metadata = {"title": "Hi There", "tags": ["a", "b"], "draft": False}
        assert parse_header_lines(write_header(metadata)) == metadata

    def test_awkward_values(self):
        metadata = {
            "title": 'He said "yes": ok',
            "dateCreated": "20240102T03:04:05",
            "tags": ["c++", "two words", "plain"],
            "slug": "my-post",
            "draft": True,
        }
        parsed = parse_header_lines(write_header(metadata))

        assert parsed == metadata
        assert list(parsed) == list(metadata)
