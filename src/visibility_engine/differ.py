"""
Token differ for comparing initial and rendered page text.

Aligns two token sequences with a Longest Common Subsequence table and
classifies every token as same, added or removed.
"""

import html
import logging
from collections.abc import Iterable, Sequence

from .models import (
    DiffKind,
    DiffOperation,
    DiffReport,
    TokenMode,
    similarity_from_counts,
)
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

# Table size above which a comparison is noticeably slow; not enforced.
LARGE_TABLE_CELLS = 25_000_000


def diff_tokens(
    text1: str | None, text2: str | None, mode: TokenMode | str = TokenMode.WORD
) -> list[DiffOperation]:
    """
    Align two texts token by token.

    Args:
        text1: Initial text (what crawlers see)
        text2: Final text (what users see)
        mode: 'word' or 'line'

    Returns:
        Ordered operations; tokens only in text1 are DELETE, tokens only in
        text2 are ADD
    """
    mode = TokenMode.parse(mode)
    return _align(tokenize(text1, mode), tokenize(text2, mode))


def generate_diff_report(
    text1: str | None, text2: str | None, mode: TokenMode | str = TokenMode.WORD
) -> DiffReport:
    """
    Diff two texts and tally the operation kinds.

    Args:
        text1: Initial text
        text2: Final text
        mode: 'word' or 'line'

    Returns:
        DiffReport with operations, counts and a one-line summary
    """
    mode = TokenMode.parse(mode)
    tokens1 = tokenize(text1, mode)
    tokens2 = tokenize(text2, mode)
    operations = _align(tokens1, tokens2)

    same = added = removed = 0
    for operation in operations:
        if operation.kind is DiffKind.SAME:
            same += 1
        elif operation.kind is DiffKind.ADD:
            added += 1
        else:
            removed += 1

    return DiffReport(
        operations=operations,
        same=same,
        added=added,
        removed=removed,
        summary=f"Added: {added} • Removed: {removed} • Same: {same}",
        initial_token_count=len(tokens1),
        final_token_count=len(tokens2),
    )


def calculate_similarity(
    text1: str | None, text2: str | None, mode: TokenMode | str = TokenMode.WORD
) -> float:
    """
    Percentage of overlap between two texts, from 0 to 100.

    Computed as 2 * |LCS| / (|tokens1| + |tokens2|) rounded to one decimal.
    Symmetric in its two arguments.
    """
    mode = TokenMode.parse(mode)
    tokens1 = tokenize(text1, mode)
    tokens2 = tokenize(text2, mode)

    if tokens1 == tokens2:
        return 100.0

    seq1, seq2 = _encode(tokens1, tokens2)
    common = _lcs_table(seq1, seq2)[-1][-1]
    return similarity_from_counts(common, len(tokens1), len(tokens2))


def generate_html_diff(
    operations: Iterable[DiffOperation], mode: TokenMode | str = TokenMode.WORD
) -> str:
    """
    Render diff operations as HTML for visual inspection.

    Runs of added tokens are wrapped in <ins>, runs of removed tokens in
    <del>; unchanged tokens are left bare. Token text is HTML-escaped.

    Args:
        operations: Output of diff_tokens or DiffReport.operations
        mode: 'word' joins tokens with spaces, 'line' with newlines

    Returns:
        HTML fragment
    """
    separator = "\n" if TokenMode.parse(mode) is TokenMode.LINE else " "

    chunks: list[str] = []
    run_kind: DiffKind | None = None
    run: list[str] = []

    for operation in operations:
        if operation.kind is not run_kind and run:
            chunks.append(_render_run(run_kind, run, separator))
            run = []
        run_kind = operation.kind
        run.append(html.escape(operation.text))

    if run:
        chunks.append(_render_run(run_kind, run, separator))

    return separator.join(chunks)


def _render_run(kind: DiffKind | None, tokens: list[str], separator: str) -> str:
    text = separator.join(tokens)
    if kind is DiffKind.ADD:
        return f"<ins>{text}</ins>"
    if kind is DiffKind.DELETE:
        return f"<del>{text}</del>"
    return text


def _encode(tokens1: Sequence[str], tokens2: Sequence[str]) -> tuple[list[int], list[int]]:
    """
    Map each distinct token to a small integer.

    The symbol table lives only for this call.
    """
    symbols: dict[str, int] = {}
    seq1 = [symbols.setdefault(token, len(symbols)) for token in tokens1]
    seq2 = [symbols.setdefault(token, len(symbols)) for token in tokens2]
    return seq1, seq2


def _lcs_table(seq1: Sequence[int], seq2: Sequence[int]) -> list[list[int]]:
    """
    Build the (m+1) x (n+1) LCS length table.

    dp[i][j] is the LCS length of seq1[:i] and seq2[:j].
    """
    m, n = len(seq1), len(seq2)
    cells = (m + 1) * (n + 1)
    if cells > LARGE_TABLE_CELLS:
        logger.warning(
            "Large diff table (%d x %d tokens); consider truncating the input", m, n
        )
    else:
        logger.debug("Aligning %d x %d tokens", m, n)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        previous = dp[i - 1]
        row = dp[i]
        symbol = seq1[i - 1]
        for j in range(1, n + 1):
            if symbol == seq2[j - 1]:
                row[j] = previous[j - 1] + 1
            elif previous[j] >= row[j - 1]:
                row[j] = previous[j]
            else:
                row[j] = row[j - 1]
    return dp


def _align(tokens1: Sequence[str], tokens2: Sequence[str]) -> list[DiffOperation]:
    """
    Backtrack the LCS table into an ordered list of operations.

    On a tie between dropping a token from either side, the token from
    tokens1 is emitted as DELETE first (walking toward decreasing i).
    """
    seq1, seq2 = _encode(tokens1, tokens2)
    dp = _lcs_table(seq1, seq2)

    operations: list[DiffOperation] = []
    i, j = len(seq1), len(seq2)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and seq1[i - 1] == seq2[j - 1]:
            operations.append(DiffOperation(DiffKind.SAME, tokens1[i - 1]))
            i -= 1
            j -= 1
        elif j == 0 or (i > 0 and dp[i - 1][j] >= dp[i][j - 1]):
            operations.append(DiffOperation(DiffKind.DELETE, tokens1[i - 1]))
            i -= 1
        else:
            operations.append(DiffOperation(DiffKind.ADD, tokens2[j - 1]))
            j -= 1

    operations.reverse()
    return operations
