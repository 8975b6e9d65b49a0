"""Token scanner for the zone-file format."""
from __future__ import annotations

import codecs
import enum
import functools
import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import IO, Callable, Iterator

from .errors import ScanError

logger = logging.getLogger(__name__)

KEYWORDS: frozenset[str] = frozenset({"zone", "ttl"})
RECORD_TYPES: frozenset[str] = frozenset({"A", "AAAA", "CNAME", "TXT", "MX", "NS"})

_INTEGER = re.compile(r"[+-]?[0-9]+")


class TokenKind(enum.Enum):
    IDENT = "Identifier"
    KEYWORD = "Keyword"
    IP = "IP Address"
    INT = "Integer"
    RECTYPE = "Record Type"
    NEWLINE = "Newline"
    EOF = "EOF"


@dataclass(frozen=True, slots=True)
class Token:
    """Single classified token.

    Attributes:
        kind (TokenKind): Token class.
        value (str): Literal text with quotes and escapes removed.
        line (int): 1-based line the token starts on.
    """

    kind: TokenKind
    value: str
    line: int = 0

    def __str__(self) -> str:
        if self.kind is TokenKind.NEWLINE:
            return f"{self.kind.value}: \\n"
        if self.kind is TokenKind.EOF:
            return self.kind.value
        return f"{self.kind.value}: {self.value}"


def classify(text: str) -> TokenKind:
    """Classify an unquoted word."""
    if _INTEGER.fullmatch(text):
        return TokenKind.INT
    if text in KEYWORDS:
        return TokenKind.KEYWORD
    if text in RECORD_TYPES:
        return TokenKind.RECTYPE
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return TokenKind.IDENT
    return TokenKind.IP


class Scanner:
    """Split a zone-file stream into tokens.

    Whitespace and ``;`` comments are discarded, ``"..."`` quotes and ``\\``
    escapes are resolved, and every line break is returned as a NEWLINE token.

    A word that contained a quoted section is always an IDENT token, skipping
    the integer, keyword, record type and IP classification applied to bare
    words. So ``"300"`` stays text and ``""`` is an empty identifier, which is
    what lets :meth:`Zone.format` quote any name and read it back unchanged.

    Args:
        stream: Binary (decoded as UTF-8, leading byte-order mark dropped) or
            text stream. The stream is never closed by the scanner.
    """

    def __init__(self, stream: IO[bytes] | IO[str]) -> None:
        self._read_char: Callable[[], str]
        if isinstance(stream.read(0), bytes):
            reader = codecs.getreader("utf-8-sig")(stream)
            self._read_char = functools.partial(reader.read, 1, 1)
        else:
            self._read_char = functools.partial(stream.read, 1)
        self._pushback: str | None = None
        self._done = False
        self.line = 1

    def _read(self) -> str:
        if self._pushback is not None:
            ch, self._pushback = self._pushback, None
            return ch
        return self._read_char()

    def _unread(self, ch: str) -> None:
        self._pushback = ch

    def next(self) -> Token:
        """Return the next token; EOF is returned on every call after exhaustion.

        Raises:
            ScanError: On a quote left open at a line break or end of input.
            OSError: Propagated from the underlying stream.
        """
        token = self._scan()
        logger.debug("token %s", token)
        return token

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def _scan(self) -> Token:
        if self._done:
            return Token(TokenKind.EOF, "", self.line)

        buf: list[str] = []
        start = self.line
        in_comment = False
        in_quote = False
        quoted = False
        escaped = False

        while True:
            ch = self._read()

            if not ch:
                if in_quote:
                    raise ScanError("unterminated quoted construct", line=self.line)
                if buf or quoted:
                    break
                self._done = True
                return Token(TokenKind.EOF, "", self.line)

            if ch == "\n":
                if in_quote:
                    raise ScanError("line break inside quoted construct", line=self.line)
                if buf or quoted:
                    self._unread(ch)
                    break
                self.line += 1
                return Token(TokenKind.NEWLINE, ch, start)

            if in_comment:
                continue

            if escaped:
                buf.append(ch)
                escaped = False
                continue

            if ch == "\\":
                escaped = True
                continue

            if ch == '"':
                in_quote = not in_quote
                quoted = True
                continue

            if in_quote:
                buf.append(ch)
                continue

            if ch == ";":
                in_comment = True
                continue

            if ch.isspace():
                if buf or quoted:
                    self._unread(ch)
                    break
                continue

            buf.append(ch)

        value = "".join(buf)
        kind = TokenKind.IDENT if quoted else classify(value)
        return Token(kind, value, start)
