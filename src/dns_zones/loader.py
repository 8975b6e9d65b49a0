"""Zone file discovery and registry loading."""
from __future__ import annotations

import concurrent.futures
import logging
import os
from typing import Iterable, Sequence

from .parser import Parser
from .records import Zone
from .registry import Registry, RegistryBuilder
from .scanner import Scanner

logger = logging.getLogger(__name__)


def find_zone_files(path: str, extensions: Sequence[str] = ()) -> list[str]:
    """Collect zone files under ``path``.

    Args:
        path: A directory, walked recursively, or a single file.
        extensions: Suffixes to keep (e.g. ``".zone"``); empty keeps all.

    Returns:
        Sorted absolute paths with symlinks resolved. Hidden files and
        directories are skipped.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"no such file or directory: {path}")
    if os.path.isfile(path):
        return [os.path.realpath(path)]

    def walk_error(exc: OSError) -> None:
        raise exc

    found: set[str] = set()
    for root, dirs, files in os.walk(path, onerror=walk_error, followlinks=True):
        dirs[:] = [d for d in dirs if not d.startswith(".")]
        for name in files:
            if name.startswith("."):
                continue
            if extensions and not name.endswith(tuple(extensions)):
                continue
            found.add(os.path.realpath(os.path.join(root, name)))
    logger.debug("found %d zone files under %s", len(found), path)
    return sorted(found)


def load_zone_file(path: str) -> Zone:
    """Parse one zone file, labelling errors with its base name."""
    with open(path, "rb") as f:
        parser = Parser(Scanner(f), os.path.basename(path))
        zone = parser.parse()
    logger.info("loaded zone %s from %s: %d records", zone.authority, path, len(zone))
    return zone


def load_zones(paths: Iterable[str], workers: int = 4) -> Registry:
    """Parse ``paths`` in parallel and assemble the results into a registry.

    Parsing happens on a thread pool; results are inserted in input order on
    the calling thread, so duplicate reporting is deterministic.

    Raises:
        ZoneError: The first parse or duplicate-authority failure.
        OSError: If a file cannot be read.
    """
    paths = list(paths)
    builder = RegistryBuilder()
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(load_zone_file, path) for path in paths]
        try:
            for future in futures:
                builder.add(future.result())
        except BaseException:
            for future in futures:
                future.cancel()
            raise
    registry = builder.build()
    logger.info("registry built: %d zones", len(registry))
    return registry
