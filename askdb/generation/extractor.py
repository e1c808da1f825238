"""Normalize raw model output into a bare SQL statement."""

import re

FENCE = "```"

_OPENING_FENCE = re.compile(r"^```(?:sql\b)?\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```$")
_FENCED_BLOCK = re.compile(r"```(?:sql\b)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def _strip_edges(text: str) -> str:
    previous = None
    while text != previous:
        previous = text
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text, count=1)
        text = text.strip()
    return text


def extract_sql(raw: str | None) -> str:
    """
    Strip markdown code fencing from a completion.

    Fences are removed from the start and end of the text. When prose
    surrounds a fenced block the block body is kept. The result never
    contains a fence marker, so applying this twice changes nothing.

    Example:
        >>> extract_sql("```sql\\nSELECT 1;\\n```")
        'SELECT 1;'
    """
    text = _strip_edges((raw or "").strip())
    if FENCE not in text:
        return text

    match = _FENCED_BLOCK.search(text)
    if match and match.group(1).strip():
        text = match.group(1)
    return text.replace(FENCE, "").strip()
