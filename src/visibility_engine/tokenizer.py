"""
Tokenizer for turning extracted page text into comparable units.

Word mode normalizes punctuation and whitespace before splitting, while
keeping URLs intact. Line mode splits on line breaks only.
"""

import re
from collections.abc import Iterator

from .models import TokenMode

# scheme://... or a bare domain followed by a path. Every prefix repetition is
# bounded, keeping a failed match from each word boundary short.
_URL_PATTERN = re.compile(
    r"\b[A-Za-z][A-Za-z0-9+-]{0,31}://\S+"
    r"|\b(?:www\.)?(?:[A-Za-z0-9-]{1,63}\.){1,32}[A-Za-z]{2,63}/\S*"
)

# Characters that end a sentence rather than a URL
_TRAILING_PUNCTUATION = ".,;:!?'\""
_CLOSING_BRACKETS = {")": "(", "]": "[", "}": "{"}

# Unicode private-use areas, used for URL placeholders
_PRIVATE_USE_RANGES = (
    (0xE000, 0xF8FF),
    (0xF0000, 0xFFFFD),
    (0x100000, 0x10FFFD),
)

_SPACE_BEFORE_PUNCTUATION = re.compile(r"\s+([,.;:!?])")
_SENTENCE_END_BEFORE_LETTER = re.compile(r"([.!?])([^\W\d_])")
_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str | None, mode: TokenMode | str = TokenMode.WORD) -> tuple[str, ...]:
    """
    Split text into an ordered sequence of normalized tokens.

    Args:
        text: Plain text (already stripped of markup)
        mode: 'word' or 'line'

    Returns:
        Tuple of non-empty tokens, empty for empty or blank input

    Raises:
        InvalidModeError: If mode is not 'word' or 'line'
    """
    mode = TokenMode.parse(mode)

    if not text:
        return ()

    if mode is TokenMode.LINE:
        lines = _standardize_line_endings(text).split("\n")
        return tuple(stripped for stripped in (line.strip() for line in lines) if stripped)

    normalized = normalize_text(text)
    if not normalized:
        return ()
    return tuple(normalized.split(" "))


def normalize_text(text: str | None) -> str:
    """
    Normalize line endings, punctuation spacing and whitespace.

    URLs are swapped for placeholder characters while punctuation is
    normalized and restored afterwards, so commas, parentheses and periods
    inside them survive untouched.

    Args:
        text: Input text

    Returns:
        Normalized single-line text
    """
    if not text:
        return ""

    text = _standardize_line_endings(text)
    text, placeholders = _protect_urls(text)

    text = _SPACE_BEFORE_PUNCTUATION.sub(r"\1", text)
    text = _SENTENCE_END_BEFORE_LETTER.sub(r"\1 \2", text)
    text = _WHITESPACE.sub(" ", text).strip()

    if placeholders:
        text = text.translate({ord(placeholder): url for placeholder, url in placeholders.items()})
    return text


def count_words(text: str | None) -> int:
    """Number of word tokens in text."""
    return len(tokenize(text, TokenMode.WORD))


def count_lines(text: str | None) -> int:
    """Number of non-empty lines in text."""
    return len(tokenize(text, TokenMode.LINE))


def _standardize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _protect_urls(text: str) -> tuple[str, dict[str, str]]:
    """
    Replace every URL with a single private-use placeholder character.

    Placeholders are never code points that already occur in the text.
    Identical URLs share one placeholder.

    Returns:
        Tuple of (protected text, mapping of placeholder -> URL)
    """
    assigned: dict[str, str] = {}
    free = _free_placeholders(text)

    def replace(match: re.Match) -> str:
        url, tail = _split_trailing_punctuation(match.group(0))
        placeholder = assigned.get(url)
        if placeholder is None:
            placeholder = next(free, None)
            if placeholder is None:
                return match.group(0)
            assigned[url] = placeholder
        return placeholder + tail

    protected = _URL_PATTERN.sub(replace, text)
    return protected, {placeholder: url for url, placeholder in assigned.items()}


def _free_placeholders(text: str) -> Iterator[str]:
    used = set(text)
    for start, stop in _PRIVATE_USE_RANGES:
        for code_point in range(start, stop + 1):
            char = chr(code_point)
            if char not in used:
                yield char


def _split_trailing_punctuation(candidate: str) -> tuple[str, str]:
    """
    Separate sentence punctuation and unbalanced closing brackets from a URL.

    Args:
        candidate: Raw regex match

    Returns:
        Tuple of (url, trailing text)
    """
    end = len(candidate)
    while end > 0:
        char = candidate[end - 1]
        if char in _TRAILING_PUNCTUATION:
            end -= 1
            continue
        opening = _CLOSING_BRACKETS.get(char)
        if opening and candidate.count(char, 0, end) > candidate.count(opening, 0, end):
            end -= 1
            continue
        break
    return candidate[:end], candidate[end:]
