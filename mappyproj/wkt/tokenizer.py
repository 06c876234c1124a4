from __future__ import annotations

import re
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple, Union

from mappyproj.utils.exceptions import WktParseError


class TokenType(Enum):
    STRING = "string"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPEN = "opening bracket"
    CLOSE = "closing bracket"
    COMMA = "comma"
    END = "end of input"


class Token(NamedTuple):
    """
    A lexical token of WKT text.

    Attributes:
        type: The token type
        value: The decoded value: the unquoted text of a string, a float for a number,
            the bracket character for brackets
        text: The raw source text of the token
        position: The character offset of the token in the source
    """

    type: TokenType
    value: Union[str, float]
    text: str
    position: int

    def describe(self) -> str:
        if self.type is TokenType.END:
            return "end of input"
        return f"{self.type.value} {self.text!r}"


_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_WHITESPACE_RE = re.compile(r"\s+")

_PUNCTUATION = {
    "[": TokenType.OPEN,
    "(": TokenType.OPEN,
    "]": TokenType.CLOSE,
    ")": TokenType.CLOSE,
    ",": TokenType.COMMA,
}


def line_column(text: str, position: int) -> Tuple[int, int]:
    """Get the 1-based line and column of a character offset."""
    line = text.count("\n", 0, position) + 1
    column = position - (text.rfind("\n", 0, position) + 1) + 1
    return line, column


def parse_error(
    text: str,
    message: str,
    position: int,
    expected: Optional[str] = None,
    found: Optional[str] = None,
) -> WktParseError:
    line, column = line_column(text, position)
    return WktParseError(message, position, line, column, expected, found)


def _read_string(text: str, start: int) -> Tuple[str, int]:
    # a doubled quote inside a string is an escaped quote
    chars = []
    i = start + 1
    while i < len(text):
        c = text[i]
        if c == '"':
            if i + 1 < len(text) and text[i + 1] == '"':
                chars.append('"')
                i += 2
                continue
            return "".join(chars), i + 1
        chars.append(c)
        i += 1
    raise parse_error(
        text, "unterminated string", start, expected="closing quote", found="end of input"
    )


def tokenize(text: str) -> List[Token]:
    """
    Split WKT text into tokens.

    The returned list always ends with an END token.

    Args:
        text: The WKT text

    Returns:
        The tokens, in order

    Raises:
        WktParseError: On a character that cannot start any token or an unterminated string
    """
    tokens: List[Token] = []
    i = 0
    n = len(text)
    while i < n:
        ws = _WHITESPACE_RE.match(text, i)
        if ws:
            i = ws.end()
            continue

        c = text[i]
        if c in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[c], c, c, i))
            i += 1
        elif c == '"':
            value, end = _read_string(text, i)
            tokens.append(Token(TokenType.STRING, value, text[i:end], i))
            i = end
        elif _NUMBER_RE.match(text, i):
            m = _NUMBER_RE.match(text, i)
            tokens.append(Token(TokenType.NUMBER, float(m.group()), m.group(), i))
            i = m.end()
        elif _IDENTIFIER_RE.match(text, i):
            m = _IDENTIFIER_RE.match(text, i)
            tokens.append(Token(TokenType.IDENTIFIER, m.group(), m.group(), i))
            i = m.end()
        else:
            raise parse_error(
                text,
                f"unexpected character {c!r}",
                i,
                expected="a string, number, keyword, bracket or comma",
                found=repr(c),
            )

    tokens.append(Token(TokenType.END, "", "", n))
    return tokens
