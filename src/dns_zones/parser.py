"""Recursive-descent parser turning scanner tokens into a Zone."""
from __future__ import annotations

import ipaddress
import logging
from types import MappingProxyType
from typing import IO, NoReturn

from .domain import Domain, RecordName
from .errors import InvalidNameError, ScanError, SemanticError, ZoneError, ZoneSyntaxError
from .records import ADDRESS_TYPES, MAX_TTL, TARGET_TYPES, Record, RecType, TXTData, Zone
from .scanner import Scanner, Token, TokenKind

logger = logging.getLogger(__name__)

_LINE_END = (TokenKind.NEWLINE, TokenKind.EOF)


class Parser:
    """Parse one zone file.

    Each loop iteration of :meth:`parse` consumes exactly one line: keyword and
    record handlers read the rest of their line including its terminator.

    Args:
        scanner: Token source for the file.
        label: Diagnostic name prefixed to every error, usually the file name.

    Attributes:
        warnings: Non-fatal problems noticed while parsing.
    """

    def __init__(self, scanner: Scanner, label: str) -> None:
        self.scanner = scanner
        self.label = label
        self.warnings: list[str] = []
        self._line = 1
        self._authority: Domain | None = None
        self._default_ttl: int | None = None
        self._records: dict[str, list[Record]] = {}

    def parse(self) -> Zone:
        """Run the parser to the end of input.

        Returns:
            Zone: The fully populated, read-only zone.

        Raises:
            ScanError: On malformed quoting.
            ZoneSyntaxError: On tokens that do not fit the grammar.
            SemanticError: On repeated keywords, duplicate records or a
                missing ``zone`` declaration.
        """
        while True:
            tok = self._next()
            if tok.kind is TokenKind.NEWLINE:
                continue
            if tok.kind is TokenKind.EOF:
                break
            if tok.kind is TokenKind.KEYWORD:
                self._handle_keyword(tok)
            elif tok.kind is TokenKind.IDENT:
                self._add_record(self._parse_record(tok))
            else:
                self._fail(ZoneSyntaxError, f"Unexpected token: {tok}")

        if self._authority is None:
            self._fail(SemanticError, "no zone declaration found")

        zone = Zone(
            authority=self._authority,
            default_ttl=self._default_ttl,
            records=MappingProxyType({k: tuple(v) for k, v in self._records.items()}),
            source=self.label,
        )
        logger.debug("%s: parsed zone %s with %d records", self.label, zone.authority, len(zone))
        return zone

    def pos(self) -> str:
        """Short ``label:line`` string for log messages."""
        return f"{self.label}:{self._line}"

    def _next(self) -> Token:
        try:
            tok = self.scanner.next()
        except ScanError as exc:
            exc.label = self.label
            exc.line = self.scanner.line
            raise
        self._line = tok.line
        return tok

    def _fail(self, kind: type[ZoneError], reason: str) -> NoReturn:
        raise kind(reason, label=self.label, line=self._line)

    def _expect_line_end(self, what: str) -> None:
        tok = self._next()
        if tok.kind not in _LINE_END:
            self._fail(ZoneSyntaxError, f"Unexpected value after {what}: {tok}")

    def _parse_ttl(self, tok: Token) -> int:
        ttl = int(tok.value)
        if ttl <= 0:
            self._fail(ZoneSyntaxError, f"TTL value cannot be <=0, got {ttl}")
        if ttl > MAX_TTL:
            self._fail(ZoneSyntaxError, f"TTL value cannot exceed {MAX_TTL}, got {ttl}")
        return ttl

    def _parse_record(self, name_tok: Token) -> Record:
        text = name_tok.value
        if text.endswith(".") and Domain.is_valid(text):
            self._fail(ZoneSyntaxError, f"{text} is an FQDN - names relative to the zone are allowed only")
        try:
            name = RecordName.parse(text)
        except InvalidNameError as exc:
            self._fail(ZoneSyntaxError, str(exc))

        type_tok = self._next()
        if type_tok.kind is not TokenKind.RECTYPE:
            self._fail(ZoneSyntaxError, f"Expected a record type, got: {type_tok}")
        rtype = RecType(type_tok.value)

        data = self._next()
        if data.kind in _LINE_END:
            self._fail(ZoneSyntaxError, f"Expected data field for {rtype} record, got: {data}")

        fields: dict[str, object] = {}
        if rtype in ADDRESS_TYPES:
            fields["address"] = self._parse_address(rtype, data)
        elif rtype in TARGET_TYPES:
            if data.kind is not TokenKind.IDENT:
                self._fail(ZoneSyntaxError, f"Expected a domain, got: {data}")
            try:
                fields["target"] = Domain.parse(data.value)
            except InvalidNameError as exc:
                self._fail(ZoneSyntaxError, str(exc))
        else:
            fields["txt"] = TXTData.from_text(data.value)

        tok = self._next()
        if tok.kind is TokenKind.INT:
            fields["ttl"] = self._parse_ttl(tok)
            self._expect_line_end("record TTL")
        elif tok.kind not in _LINE_END:
            self._fail(ZoneSyntaxError, f"Expected an integer in TTL field, got: {tok}")

        return Record(name=name, rtype=rtype, **fields)

    def _parse_address(self, rtype: RecType, data: Token) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
        if data.kind is not TokenKind.IP:
            self._fail(ZoneSyntaxError, f"Expected IP address, got: {data}")
        addr = ipaddress.ip_address(data.value)
        expected = 4 if rtype is RecType.A else 6
        if addr.version != expected:
            self._fail(ZoneSyntaxError, f"{rtype} record requires an IPv{expected} address, got {addr}")
        return addr

    def _add_record(self, record: Record) -> None:
        group = self._records.setdefault(str(record.name).lower(), [])
        for other in group:
            if (other.rtype, other.address, other.target, other.txt) == (
                record.rtype, record.address, record.target, record.txt
            ):
                self._fail(SemanticError, f"duplicate record: {record.format()}")
        group.append(record)

    def _handle_keyword(self, keyword: Token) -> None:
        if keyword.value == "zone":
            self._handle_zone()
        elif keyword.value == "ttl":
            self._handle_ttl()
        else:
            self._fail(ZoneSyntaxError, f"Unexpected keyword: {keyword}")

    def _handle_zone(self) -> None:
        tok = self._next()
        if self._authority is not None:
            self._fail(SemanticError, f"zone domain already specified for this zone: {self._authority}")
        if tok.kind is not TokenKind.IDENT:
            self._fail(ZoneSyntaxError, f"Expected a domain after zone keyword, got: {tok}")
        try:
            domain = Domain.parse(tok.value)
        except InvalidNameError as exc:
            self._fail(ZoneSyntaxError, f"Invalid domain specified for zone: {exc}")
        if domain.is_apex:
            self._fail(ZoneSyntaxError, "zone domain cannot be @")
        if not domain.fqdn:
            warning = f"{self.pos()} Zone domain {domain} is not an FQDN. Will assume it is."
            logger.warning("%s", warning)
            self.warnings.append(warning)
            domain = domain.qualified()
        self._expect_line_end("zone specification")
        self._authority = domain

    def _handle_ttl(self) -> None:
        tok = self._next()
        if self._default_ttl is not None:
            self._fail(SemanticError, f"default ttl already specified for this zone: {self._default_ttl}")
        if tok.kind is not TokenKind.INT:
            self._fail(ZoneSyntaxError, f"Expected an integer after ttl keyword, got: {tok}")
        ttl = self._parse_ttl(tok)
        self._expect_line_end("ttl specification")
        self._default_ttl = ttl


def parse_zone(stream: IO[bytes] | IO[str], label: str) -> Zone:
    """Parse a whole zone file from ``stream``.

    Args:
        stream: Readable binary (UTF-8) or text stream.
        label: Diagnostic name used in error messages.

    Returns:
        Zone: The parsed zone.

    Raises:
        ZoneError: On any malformed input.
        OSError: Propagated from the stream.
    """
    return Parser(Scanner(stream), label).parse()
