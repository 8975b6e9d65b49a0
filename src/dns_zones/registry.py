"""Zone registry with longest-suffix authority matching."""
from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .domain import Domain
from .errors import DuplicateZoneError
from .records import Zone

logger = logging.getLogger(__name__)


class RegistryBuilder:
    """Mutable phase of a registry: collects zones and rejects duplicates.

    ``add`` is safe to call from several threads. Once :meth:`build` has been
    called the builder refuses further inserts.
    """

    def __init__(self) -> None:
        self._zones: dict[Domain, Zone] = {}
        self._lock = threading.Lock()
        self._built = False

    def add(self, zone: Zone) -> None:
        """Insert ``zone`` keyed by its authority.

        Raises:
            DuplicateZoneError: If a zone for the same authority is present.
            RuntimeError: If the builder was already finalized.
        """
        key = zone.authority.qualified()
        with self._lock:
            if self._built:
                raise RuntimeError("registry already built")
            existing = self._zones.get(key)
            if existing is not None:
                raise DuplicateZoneError(
                    f"Duplicate zone: {existing.authority} (already defined in {existing.source or '?'})",
                    label=zone.source or None,
                )
            self._zones[key] = zone
        logger.debug("registered zone %s from %s", key, zone.source)

    def build(self) -> Registry:
        with self._lock:
            self._built = True
            return Registry(self._zones)


class Registry(Mapping[Domain, Zone]):
    """Read-only mapping of authority domain to zone.

    Safe for concurrent readers since nothing mutates it after construction.
    """

    def __init__(self, zones: Mapping[Domain, Zone]) -> None:
        self._zones = MappingProxyType(dict(zones))

    def __getitem__(self, key: Domain) -> Zone:
        return self._zones[key]

    def __iter__(self) -> Iterator[Domain]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def match(self, domain: Domain | str) -> Zone | None:
        """Find the most specific zone whose authority is a suffix of ``domain``.

        For example ``a.b.example.com.`` matches a ``b.example.com.`` zone if
        present, otherwise ``example.com.``, otherwise ``com.``. The root is
        never an implicit match.

        Args:
            domain: Query name; relative names are treated as fully qualified.

        Returns:
            The matching zone, or None if no configured authority applies.

        Raises:
            InvalidNameError: If ``domain`` is a string that is not a valid name.
        """
        if isinstance(domain, str):
            domain = Domain.parse(domain)
        current = domain.qualified()
        while True:
            zone = self._zones.get(current)
            if zone is not None:
                return zone
            current, tld = current.parent()
            if tld:
                return None


def build_registry(zones: Iterable[Zone]) -> Registry:
    """Assemble ``zones`` into a registry.

    Raises:
        DuplicateZoneError: On the first authority defined twice.
    """
    builder = RegistryBuilder()
    for zone in zones:
        builder.add(zone)
    return builder.build()
