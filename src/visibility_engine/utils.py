"""
Formatting and hashing helpers for analysis results.
"""

import math


def hash_djb2(text: str | None) -> str:
    """
    DJB2 hash of a text, as lowercase hex.

    Hashes UTF-16 code units with 32-bit wraparound so the digest matches
    browser implementations of the same content fingerprint.

    Args:
        text: Text to hash

    Returns:
        Hex digest, or an empty string for empty input
    """
    if not text:
        return ""

    h = 5381
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (h * 33 + code_unit) & 0xFFFFFFFF
    return format(h, "x")


def pct(ratio: float) -> str:
    """Format a ratio as a percentage with one decimal, e.g. 0.425 -> '42.5%'."""
    if not isinstance(ratio, (int, float)) or not math.isfinite(ratio):
        return "–"
    return f"{ratio * 100:.1f}%"


def format_number_to_k(num: int | float) -> str:
    """
    Format a number in K/M notation for readability.

    Numbers below 10,000 are returned as-is.
    """
    if num >= 1_000_000:
        return _strip_zero_decimal(f"{num / 1_000_000:.1f}") + "M"
    if num >= 10_000:
        return _strip_zero_decimal(f"{num / 1000:.1f}") + "K"
    return str(num)


def _strip_zero_decimal(value: str) -> str:
    return value[:-2] if value.endswith(".0") else value
