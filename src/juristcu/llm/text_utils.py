"""
Text processing utilities for the LLM layer.

Prompts carry a fixed-size prefix of the ruling body; replies and API
echoes are clipped to fixed sizes. All limits are in characters.
"""


def body_prefix(text: str | None, max_chars: int) -> str:
    """
    First `max_chars` characters of a document body.

    Plain character slicing: the corpus was extracted from PDFs and
    has no reliable sentence punctuation to cut on.

    Examples:
        >>> body_prefix("abcdef", 3)
        'abc'
        >>> body_prefix(None, 3)
        ''
    """
    if not text:
        return ""
    return text[:max_chars]


def clip(text: str, max_chars: int) -> str:
    """Cut text to at most `max_chars` characters (no ellipsis)."""
    if max_chars < 0:
        raise ValueError("max_chars must be non-negative")
    return text[:max_chars]


def preview(text: str, max_chars: int = 200) -> str:
    """
    Short echo of user input for responses and logs.

    Appends "..." only when something was cut.
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
