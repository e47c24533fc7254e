"""
Unit tests for the tokenizer.
"""

import pytest

from visibility_engine.models import InvalidModeError, TokenMode
from visibility_engine.tokenizer import count_lines, count_words, normalize_text, tokenize


class TestWordTokenization:
    """Tests for word-mode tokenization."""

    def test_splits_on_whitespace(self):
        """Test that runs of whitespace separate tokens."""
        assert tokenize("Hello   world\n\tagain") == ("Hello", "world", "again")

    def test_empty_and_none_input(self):
        """Test that empty, blank and None input yield no tokens."""
        assert tokenize("") == ()
        assert tokenize("   \n\t ") == ()
        assert tokenize(None) == ()

    def test_returns_immutable_sequence(self):
        """Test that tokens come back as a tuple."""
        assert isinstance(tokenize("one two"), tuple)

    def test_space_before_punctuation_removed(self):
        """Test that 'word ,' becomes 'word,'."""
        assert tokenize("word , next ; last !") == ("word,", "next;", "last!")

    def test_space_inserted_after_sentence_end(self):
        """Test that a capitalized word glued to a period is split off."""
        assert tokenize("First sentence.Second one") == ("First", "sentence.", "Second", "one")

    def test_space_inserted_before_lowercase_letter(self):
        """Test that any letter glued to sentence punctuation is split off."""
        assert tokenize("word.next thing") == ("word.", "next", "thing")
        assert tokenize("Really?yes!no") == ("Really?", "yes!", "no")

    def test_digits_after_period_kept_together(self):
        """Test that decimals and version numbers are not split."""
        assert tokenize("pi is 3.14 in v2.0") == ("pi", "is", "3.14", "in", "v2.0")

    def test_hostname_without_path_is_split(self):
        """Test that only domains followed by a path count as URLs."""
        assert tokenize("see example.com now") == ("see", "example.", "com", "now")

    def test_unicode_text(self):
        """Test tokenization of non-ASCII words."""
        assert tokenize("Ünïcödé text ñandú") == ("Ünïcödé", "text", "ñandú")

    def test_punctuation_only(self):
        """Test that punctuation-only input still produces tokens."""
        assert tokenize("!!! ???") == ("!!!", "???")

    def test_accepts_enum_mode(self):
        """Test that TokenMode members work as modes."""
        assert tokenize("a b", TokenMode.WORD) == ("a", "b")


class TestUrlProtection:
    """Tests for URLs surviving punctuation normalization."""

    def test_url_with_comma_is_single_token(self):
        """Test that a comma inside a URL does not split it."""
        tokens = tokenize("Visit https://example.com/a,b for info!", "word")

        assert tokens == ("Visit", "https://example.com/a,b", "for", "info!")

    def test_url_inside_parentheses(self):
        """Test that a URL followed by a closing parenthesis is kept intact."""
        normalized = normalize_text("(see https://x.com/a,b)")

        assert normalized == "(see https://x.com/a,b)"
        assert "https://x.com/a,b" in normalized

    def test_url_with_balanced_parentheses(self):
        """Test that parentheses belonging to the URL stay with it."""
        text = "See https://en.wikipedia.org/wiki/Foo_(bar) , ok.Then"

        assert normalize_text(text) == "See https://en.wikipedia.org/wiki/Foo_(bar), ok. Then"

    def test_url_with_trailing_period(self):
        """Test that a sentence period after a URL is not treated as part of it."""
        text = "Go to https://example.com/Docs.Intro."

        assert normalize_text(text) == text
        assert tokenize(text)[-1] == "https://example.com/Docs.Intro."

    def test_url_not_split_on_capitalized_segment(self):
        """Test that '.Intro' inside a URL does not get a space inserted."""
        assert tokenize("Read https://example.com/Docs.Intro now") == (
            "Read",
            "https://example.com/Docs.Intro",
            "now",
        )

    def test_bare_domain_with_path(self):
        """Test that domain-with-path URLs without a scheme are protected."""
        assert "example.com/Guide.Start" in tokenize("Docs at example.com/Guide.Start today")

    def test_adjacent_urls(self):
        """Test that neighbouring URLs both round-trip."""
        text = "https://a.com/One.Two https://b.com/Three.Four"

        assert tokenize(text) == ("https://a.com/One.Two", "https://b.com/Three.Four")

    def test_urls_joined_by_comma(self):
        """Test that two URLs glued by a comma come back unchanged."""
        text = "links: https://a.com/x,https://b.com/Y.Z"

        assert normalize_text(text) == text

    def test_repeated_url(self):
        """Test that the same URL twice is restored both times."""
        text = "https://a.com/A.B and https://a.com/A.B"

        assert tokenize(text) == ("https://a.com/A.B", "and", "https://a.com/A.B")

    def test_long_hyphenated_run(self):
        """Test that a long unbroken run without URLs is tokenized quickly and whole."""
        text = "a-" * 100_000 + "end"

        assert tokenize(text) == (text,)

    def test_long_dotted_run(self):
        """Test that a long dotted run without a path splits after every period."""
        assert tokenize("a." * 50_000) == ("a.",) * 50_000

    def test_many_labels_before_path(self):
        """Test that a deep subdomain with a path is still one URL."""
        url = "a." * 20 + "example.com/Path.Here"

        assert tokenize(f"see {url} now") == ("see", url, "now")

    def test_input_containing_private_use_characters(self):
        """Test that placeholders never collide with characters already in the text."""
        text = "\ue000 https://example.com/A.B \ue001"

        assert tokenize(text) == ("\ue000", "https://example.com/A.B", "\ue001")


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_collapses_whitespace_and_trims(self):
        """Test whitespace collapse and trimming."""
        assert normalize_text("  Hello \n\n  world  ") == "Hello world"

    def test_line_endings(self):
        """Test that CRLF and CR are treated as line breaks."""
        assert normalize_text("Hello\r\n, world\rnext") == "Hello, world next"

    def test_empty(self):
        """Test empty input."""
        assert normalize_text("") == ""
        assert normalize_text(None) == ""


class TestLineTokenization:
    """Tests for line-mode tokenization."""

    def test_trims_and_drops_empty_lines(self):
        """Test that lines are trimmed and blank lines dropped."""
        assert tokenize("  first line  \n\n second line \n", "line") == (
            "first line",
            "second line",
        )

    def test_mixed_line_endings(self):
        """Test CRLF and CR line breaks."""
        assert tokenize("a\r\nb\rc", "line") == ("a", "b", "c")

    def test_no_punctuation_normalization(self):
        """Test that line mode keeps lines verbatim apart from trimming."""
        assert tokenize("word , x", "line") == ("word , x",)


class TestCounts:
    """Tests for count helpers."""

    def test_count_words(self):
        """Test word counting."""
        assert count_words("One two, three.") == 3
        assert count_words("") == 0

    def test_count_lines(self):
        """Test line counting."""
        assert count_lines("a\nb\n\n") == 2
        assert count_lines(None) == 0


class TestInvalidMode:
    """Tests for unsupported modes."""

    def test_unknown_mode_raises(self):
        """Test that an unknown mode fails loudly."""
        with pytest.raises(InvalidModeError, match="Unsupported tokenization mode"):
            tokenize("some text", "char")

    def test_unknown_mode_raises_for_empty_text(self):
        """Test that mode is validated even when there is nothing to split."""
        with pytest.raises(InvalidModeError):
            tokenize("", "sentence")

    def test_invalid_mode_is_value_error(self):
        """Test that InvalidModeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            tokenize("x", "WORD")
