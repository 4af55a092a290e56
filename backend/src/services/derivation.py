"""Derived blog fields computed from the post body at write time."""
import math
from typing import Any

EXCERPT_LENGTH = 200
EXCERPT_SUFFIX = "..."
WORDS_PER_MINUTE = 200


def build_excerpt(content: str) -> str:
    """Return the first 200 characters of content followed by an ellipsis."""
    return content[:EXCERPT_LENGTH] + EXCERPT_SUFFIX


def estimate_read_time(content: str) -> int:
    """Estimate reading minutes from the whitespace-separated word count, never below 1."""
    word_count = len(content.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def apply_derived_fields(values: dict[str, Any]) -> dict[str, Any]:
    """
    Fill excerpt and read_time from content in a write payload.

    Only acts when the payload carries content. An empty or missing excerpt is
    generated; read_time is always recomputed, replacing any supplied value.

    Args:
        values: Column values about to be written (mutated in place).

    Returns:
        The same dict, for chaining.
    """
    content = values.get("content")
    if content is None:
        return values
    if not values.get("excerpt"):
        values["excerpt"] = build_excerpt(content)
    values["read_time"] = estimate_read_time(content)
    return values
