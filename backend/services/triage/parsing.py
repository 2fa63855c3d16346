"""
Tolerant parsing of JSON payloads returned by language models.

Models asked for JSON sometimes wrap it in a code fence or add prose around
it. Parsing runs in two stages:

1. Strict: strip a wrapping ``` fence and parse the whole text.
2. Fallback: scan for the first balanced {...} region (ignoring braces
   inside string literals) and parse that.

The result is a ParseOk or ParseFailure; nothing is raised.
"""
import json
import logging
import re
from typing import Optional

from models.triage_models import ParseOk, ParseFailure, ParseResult

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)


def parse_structured_response(text: Optional[str]) -> ParseResult:
    """Parse a model response into a JSON object."""
    if not text or not text.strip():
        return ParseFailure(error="Empty response", raw=text or "")

    content = strip_code_fence(text.strip())
    try:
        payload = json.loads(content)
    except json.JSONDecodeError:
        pass
    else:
        if isinstance(payload, dict):
            return ParseOk(payload=payload)
        logger.debug(f"Top-level JSON is a {type(payload).__name__}, scanning for an object")

    region = find_balanced_object(text)
    if region is None:
        logger.warning("No JSON object found in model response")
        return ParseFailure(error="No JSON object found", raw=text)

    try:
        payload = json.loads(region)
    except json.JSONDecodeError as e:
        logger.warning(f"Embedded JSON object could not be parsed: {e}")
        return ParseFailure(error=f"Invalid JSON: {e}", raw=text)

    logger.info("Recovered JSON object embedded in model response")
    return ParseOk(payload=payload, recovered=True)


def strip_code_fence(text: str) -> str:
    """Remove a ``` or ```json fence wrapping the whole text."""
    match = FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def find_balanced_object(text: str) -> Optional[str]:
    """Return the first brace-balanced {...} substring, or None."""
    start = text.find("{")
    while start != -1:
        end = _match_closing_brace(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)
    return None


def _match_closing_brace(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None
