"""Token parsers for the exposition line grammar

Every parser takes the full line and a start offset and returns the matched
token with the offset just past it, or raises LineParseError. Nothing here
skips whitespace: separators are matched explicitly with expect_literal.
"""
import re
from typing import Tuple

from metrics.models import to_f32
from .errors import LineParseError


ALPHA_RE = re.compile(r"[A-Za-z]+")
NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
REST_OF_LINE_RE = re.compile(r"[^\r\n]*")


def is_identifier_char(c: str) -> bool:
    """ASCII letters, digits and underscore"""
    return len(c) == 1 and c.isascii() and (c.isalnum() or c == "_")


def _match(pattern: re.Pattern, text: str, pos: int, what: str) -> Tuple[str, int]:
    match = pattern.match(text, pos)
    if match is None or match.end() == pos:
        raise LineParseError(f"expected {what} at column {pos + 1}", text, pos)
    return match.group(0), match.end()


def expect_literal(text: str, pos: int, literal: str) -> int:
    """Match an exact literal, returning the offset after it"""
    if not text.startswith(literal, pos):
        raise LineParseError(f"expected {literal!r} at column {pos + 1}", text, pos)
    return pos + len(literal)


def parse_identifier(text: str, pos: int) -> Tuple[str, int]:
    """Metric name or label key"""
    end = pos
    while end < len(text) and is_identifier_char(text[end]):
        end += 1
    if end == pos:
        raise LineParseError(f"expected identifier at column {pos + 1}", text, pos)
    return text[pos:end], end


def parse_alpha(text: str, pos: int) -> Tuple[str, int]:
    """Bare alphabetic token, as used for metric types"""
    return _match(ALPHA_RE, text, pos, "alphabetic token")


def parse_quoted_value(text: str, pos: int) -> Tuple[str, int]:
    """Everything between a pair of double quotes; no escapes"""
    pos = expect_literal(text, pos, '"')
    end = text.find('"', pos)
    if end == -1:
        raise LineParseError(f"unterminated label value at column {pos}", text, pos)
    return text[pos:end], end + 1


def parse_number(text: str, pos: int) -> Tuple[float, int]:
    """Decimal or exponential literal, narrowed to single precision"""
    token, end = _match(NUMBER_RE, text, pos, "number")
    return to_f32(float(token)), end


def parse_rest_of_line(text: str, pos: int) -> Tuple[str, int]:
    """Remaining text up to a line terminator, possibly empty"""
    match = REST_OF_LINE_RE.match(text, pos)
    return match.group(0), match.end()


def expect_end(text: str, pos: int) -> None:
    """Fail unless the whole line has been consumed"""
    if pos != len(text):
        raise LineParseError(f"unexpected trailing input at column {pos + 1}", text, pos)
