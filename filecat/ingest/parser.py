"""
Strict JSON parsing for uploaded content.

Parsing is all-or-nothing: either the whole text is valid JSON and a
value tree comes back, or ParseError is raised and nothing else is
produced.
"""

import json
from typing import Any, Optional, Union


class ParseError(Exception):
    """Raised when input text is not syntactically valid JSON."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        position: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.position = position

    def to_dict(self):
        detail = {"error": "parse_error", "message": self.message}
        if self.line is not None:
            detail["line"] = self.line
            detail["column"] = self.column
            detail["position"] = self.position
        return detail


def _reject_constant(name: str):
    # json accepts NaN/Infinity by default; they are not JSON
    raise ValueError(f"Invalid literal: {name}")


def parse_json(text: Union[str, bytes, bytearray]) -> Any:
    """
    Parse raw JSON text into Python values.

    Args:
        text: JSON document as str, or UTF-8 encoded bytes

    Returns:
        The parsed value (dict, list, str, int, float, bool or None)

    Raises:
        ParseError: If the text is empty, undecodable or malformed
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Invalid UTF-8 encoding: {e}") from e
    elif text.startswith("\ufeff"):
        text = text[1:]

    if not text.strip():
        raise ParseError("Empty input")

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON format: {e.msg}",
            line=e.lineno,
            column=e.colno,
            position=e.pos,
        ) from e
    except RecursionError as e:
        # Valid JSON can still nest deeper than the decoder's recursion limit
        raise ParseError("JSON nesting too deep to parse") from e
    except ValueError as e:
        raise ParseError(f"Invalid JSON format: {e}") from e
