"""Data structures representing zones and their records."""
from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from dnslib import A, AAAA, CNAME, MX, NS, QTYPE, RR, TXT

from .domain import Domain, RecordName
from .scanner import TokenKind, classify

TXT_CHUNK_SIZE = 255
MAX_TTL = 2**31 - 1

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class RecType(str, enum.Enum):
    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    TXT = "TXT"
    MX = "MX"
    NS = "NS"

    def __str__(self) -> str:
        return self.value


ADDRESS_TYPES = frozenset({RecType.A, RecType.AAAA})
TARGET_TYPES = frozenset({RecType.CNAME, RecType.MX, RecType.NS})


class TXTData(tuple):
    """TXT payload stored as UTF-8 chunks of at most 255 bytes."""

    @classmethod
    def from_text(cls, text: str) -> TXTData:
        raw = text.encode("utf-8")
        chunks = [raw[i:i + TXT_CHUNK_SIZE] for i in range(0, len(raw), TXT_CHUNK_SIZE)]
        return cls(chunks or [b""])

    def __str__(self) -> str:
        return b"".join(self).decode("utf-8")


def quote_word(text: str) -> str:
    """Render ``text`` so the scanner reads it back as one identifier."""
    plain = (
        text
        and classify(text) is TokenKind.IDENT
        and not any(ch.isspace() or ch in ';"\\' for ch in text)
    )
    if plain:
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True, slots=True)
class Record:
    """Single record of a zone.

    Exactly one payload attribute is meaningful, selected by ``rtype``:
    ``address`` for A/AAAA, ``target`` for CNAME/MX/NS and ``txt`` for TXT.

    Attributes:
        name (RecordName): Zone-relative owner name.
        rtype (RecType): Record type.
        address: IP address payload.
        target (Domain): Target domain payload.
        txt (TXTData): Text payload.
        ttl (int | None): Time to live in seconds, None to use the zone default.
    """

    name: RecordName
    rtype: RecType
    address: IPAddress | None = None
    target: Domain | None = None
    txt: TXTData | None = None
    ttl: int | None = None

    def ttl_or_default(self, zone: Zone) -> int | None:
        """Resolve the record's TTL against its zone.

        Args:
            zone: Zone owning the record.

        Returns:
            int | None: The record's own TTL, else the zone default TTL, or
            None when neither is set.
        """
        if self.ttl is None:
            return zone.default_ttl
        return self.ttl

    @property
    def data(self) -> str:
        """Presentation text of the payload."""
        if self.rtype in ADDRESS_TYPES:
            return str(self.address)
        if self.rtype in TARGET_TYPES:
            return str(self.target)
        return str(self.txt)

    def format(self) -> str:
        """Render the record as one zone-file line (without newline)."""
        if self.rtype in ADDRESS_TYPES:
            data = self.data
        else:
            data = quote_word(self.data)
        fields = [quote_word(str(self.name)), self.rtype.value, data]
        if self.ttl is not None:
            fields.append(str(self.ttl))
        return " ".join(fields)

    def to_rr(self, zone: Zone) -> RR:
        """Build a ``dnslib.RR`` with absolute names, for presentation."""
        owner = self.name.absolute(zone.authority)
        ttl = self.ttl_or_default(zone) or 0
        if self.rtype is RecType.A:
            rdata = A(str(self.address))
        elif self.rtype is RecType.AAAA:
            rdata = AAAA(str(self.address))
        elif self.rtype is RecType.TXT:
            rdata = TXT(list(self.txt))
        else:
            target = _absolute_target(self.target, zone)
            if self.rtype is RecType.CNAME:
                rdata = CNAME(target)
            elif self.rtype is RecType.MX:
                rdata = MX(target)
            else:
                rdata = NS(target)
        return RR(owner, getattr(QTYPE, self.rtype.value), ttl=ttl, rdata=rdata)


def _absolute_target(target: Domain, zone: Zone) -> str:
    if target.is_apex:
        return str(zone.authority)
    if target.fqdn:
        return str(target)
    return f"{target}.{zone.authority}"


@dataclass(frozen=True)
class Zone:
    """Configuration of one authority domain.

    Attributes:
        authority (Domain): Fully-qualified domain the zone is responsible for.
        default_ttl (int | None): TTL applied to records without their own.
        records: Read-only mapping of lowercased record name to the records
            defined for it, in file order.
        source (str): Diagnostic label of the file the zone came from.
    """

    authority: Domain
    default_ttl: int | None = None
    records: Mapping[str, tuple[Record, ...]] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    source: str = ""

    def get(self, name: RecordName | str) -> tuple[Record, ...]:
        return self.records.get(str(name).lower(), ())

    def __iter__(self) -> Iterator[Record]:
        for group in self.records.values():
            yield from group

    def __len__(self) -> int:
        return sum(len(group) for group in self.records.values())

    def format(self) -> str:
        """Serialize the zone back into the zone-file format."""
        lines = [f"zone {self.authority}"]
        if self.default_ttl is not None:
            lines.append(f"ttl {self.default_ttl}")
        lines.extend(record.format() for record in self)
        return "\n".join(lines) + "\n"

    def to_rrs(self) -> list[RR]:
        """Build ``dnslib.RR`` objects for every record.

        Returns:
            list[RR]: One resource record per zone record, with absolute
            owner names and TTLs resolved against the zone default.
        """
        return [record.to_rr(self) for record in self]

    def to_bind(self) -> str:
        """Render the records in standard master-file syntax."""
        lines = [f"$ORIGIN {self.authority}"]
        if self.default_ttl is not None:
            lines.append(f"$TTL {self.default_ttl}")
        lines.extend(rr.toZone() for rr in self.to_rrs())
        return "\n".join(lines) + "\n"
