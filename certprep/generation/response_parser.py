"""Recovery of JSON question arrays from raw model output.

Models are asked for a bare JSON array but regularly return something
close to it instead. This module recovers the array on a best-effort basis.
Exactly these malformations are repaired:

- markdown code fences around (or inside) the response
- explanatory prose before the first ``[`` or after the last ``]``
- missing commas between adjacent objects (``} {``), between a closing
  ``}``/``]`` and the next quoted key, and between adjacent string values
- repeated commas (``,,``) and trailing commas before ``]`` or ``}``
- raw control characters and the invalid escape ``\\'``
- a truncated final object (more ``{`` than ``}``), which is dropped

Anything else surfaces as :class:`ResponseParseError`, which callers treat
as an ordinary failed batch. Field contents are not validated here; that is
the normalizer's job.
"""

import json
import logging
import re
from typing import Any, List

from ..exceptions import ResponseParseError
from ..text_utils import strip_control_characters, strip_markdown_code_blocks

logger = logging.getLogger(__name__)

# Ordered (pattern, replacement) pairs applied by repair_json()
_REPAIRS = [
    # } {  ->  },{
    (re.compile(r"\}(\s*)\{"), r"},\1{"),
    # } "key  ->  },"key
    (re.compile(r"\}(\s+)\"([a-zA-Z])"), r'},\1"\2'),
    # ] "key  ->  ],"key
    (re.compile(r"\](\s+)\"([a-zA-Z])"), r'],\1"\2'),
    # "value" "key":  ->  "value","key":
    (re.compile(r"\"(\s+)\"([a-zA-Z]+)\":"), r'",\1"\2":'),
    # "a" "b"  ->  "a","b"
    (re.compile(r"\"(\s+)\""), r'",\1"'),
    # ,,  ->  ,
    (re.compile(r",+"), ","),
    # ,]  ->  ]   and   ,}  ->  }
    (re.compile(r",(\s*[\]}])"), r"\1"),
]


def extract_json_array(text: str) -> str:
    """Strip fences and slice the text to its outermost ``[...]`` span.

    Args:
        text: Raw generated text

    Returns:
        The substring from the first ``[`` to the last ``]`` inclusive

    Raises:
        ResponseParseError: If the text holds no bracketed span
    """
    if not text or not text.strip():
        raise ResponseParseError("Empty response text")

    cleaned = strip_markdown_code_blocks(text)

    first_bracket = cleaned.find("[")
    last_bracket = cleaned.rfind("]")
    if first_bracket == -1 or last_bracket == -1 or last_bracket <= first_bracket:
        raise ResponseParseError("Response does not contain a valid JSON array")

    return cleaned[first_bracket : last_bracket + 1]


def repair_json(text: str) -> str:
    """Apply the regex repairs, control-character cleanup and truncation fix.

    Args:
        text: A bracketed span as returned by :func:`extract_json_array`

    Returns:
        The repaired text (not guaranteed to be valid JSON)
    """
    repaired = text
    for pattern, replacement in _REPAIRS:
        repaired = pattern.sub(replacement, repaired)

    repaired = strip_control_characters(repaired)
    repaired = repaired.replace("\\'", "'")

    if repaired.count("{") > repaired.count("}"):
        last_complete = repaired.rfind("},")
        if last_complete > 0:
            repaired = repaired[: last_complete + 1] + "]"
            logger.debug("Dropped incomplete trailing object from truncated response")

    return repaired


def parse_json_array(text: str) -> Any:
    """Recover and decode the JSON array contained in a model response.

    Already-valid JSON is decoded without any repair so that well-formed
    responses are never altered by the heuristics.

    Args:
        text: Raw generated text

    Returns:
        The decoded JSON value of the bracketed span

    Raises:
        ResponseParseError: If the span cannot be decoded even after repair
    """
    span = extract_json_array(text)

    try:
        return json.loads(span)
    except json.JSONDecodeError:
        logger.debug("Response is not valid JSON, attempting repair")

    repaired = repair_json(span)
    try:
        return json.loads(repaired)
    except json.JSONDecodeError as e:
        logger.debug(f"Repaired response still invalid: {repaired[:500]}")
        raise ResponseParseError(f"Failed to parse JSON response: {e}") from e


def parse_question_array(text: str) -> List[Any]:
    """Decode a model response and require a JSON array at the top level.

    Raises:
        ResponseParseError: If decoding fails or the result is not a list
    """
    parsed = parse_json_array(text)
    if not isinstance(parsed, list):
        raise ResponseParseError(
            f"Invalid response format - expected array, got {type(parsed).__name__}"
        )
    return parsed
