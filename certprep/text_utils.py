"""Shared text utility functions for the question service.

Provides common text processing functions used by the response parser
and the normalizer.
"""

import re

_FENCE_OPEN_PATTERN = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_PATTERN = re.compile(r"```\s*")
_CONTROL_CHAR_PATTERN = re.compile(r"[\u0000-\u001F\u007F-\u009F]")
_OPTION_PREFIX_PATTERN = re.compile(r"^[A-D][.)]\s*", re.IGNORECASE)


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code fence markers from text.

    LLMs often wrap JSON responses in markdown code blocks like:
    ```json
    [...]
    ```

    Unlike a single leading/trailing match, every fence marker is removed so
    that prose before or after the block does not prevent extraction.

    Args:
        text: Raw text that may contain markdown code fences

    Returns:
        Text with fence markers removed and surrounding whitespace stripped
    """
    if not text:
        return text

    cleaned = _FENCE_OPEN_PATTERN.sub("", text)
    cleaned = _FENCE_PATTERN.sub("", cleaned)
    return cleaned.strip()


def strip_control_characters(text: str) -> str:
    """Remove C0/C1 control characters, including raw newlines and tabs."""
    return _CONTROL_CHAR_PATTERN.sub("", text)


def strip_option_prefix(option: str) -> str:
    """Remove a leading "A. " / "b) " style letter prefix from an option."""
    return _OPTION_PREFIX_PATTERN.sub("", option).strip()
