"""CLI for loading and inspecting zone files."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .config import LOG_LEVELS, Settings, load_settings
from .domain import Domain
from .errors import InvalidNameError, ZoneError
from .loader import find_zone_files, load_zones
from .registry import Registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_NO_MATCH = 3


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed CLI options:
            - config (str | None): Path to YAML settings file.
            - zones (str | None): Zone directory or file, overrides the settings.
            - log_level (str | None): Logging level, overrides the settings.
            - workers (int | None): Parser threads, overrides the settings.
            - format (str): Output format for loaded zones.
            - match (list[str]): Query names to resolve to their authority.
    """
    parser = argparse.ArgumentParser(
        prog="dns-zones",
        description="Load zone files and look up zones of authority",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", default=None, help="Path to YAML settings")
    parser.add_argument("--zones", default=None, help="Directory (or file) containing zone files")
    parser.add_argument("--log-level", default=None, choices=LOG_LEVELS, help="Log level")
    parser.add_argument("--workers", type=int, default=None, help="Parser threads")
    parser.add_argument(
        "--format",
        default="summary",
        choices=["summary", "zone", "bind"],
        help="How to print the loaded zones",
    )
    parser.add_argument(
        "--match",
        action="append",
        default=[],
        metavar="NAME",
        help="Print the zone of authority for NAME (repeatable)",
    )
    return parser.parse_args(argv)


def configure_logging(log_level: str) -> None:
    """Configure root logging for the CLI.

    Args:
        log_level (str): Logging level name; unknown names fall back to INFO.

    Returns:
        None
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Merge the settings file (if any) with command-line overrides.

    Raises:
        ValueError: On invalid settings.
        OSError: If the settings file cannot be read.
    """
    settings = load_settings(args.config) if args.config else Settings()
    if args.zones is not None:
        settings.zones = args.zones
    if args.log_level is not None:
        settings.log_level = args.log_level
    if args.workers is not None:
        if args.workers <= 0:
            raise ValueError(f"workers must be positive, got {args.workers}")
        settings.workers = args.workers
    if not settings.zones:
        raise ValueError("missing required setting: zones (use --zones or the settings file)")
    return settings


def print_registry(registry: Registry, fmt: str) -> None:
    for authority in sorted(registry, key=lambda d: tuple(reversed(d.labels))):
        zone = registry[authority]
        if fmt == "zone":
            print(zone.format())
        elif fmt == "bind":
            print(zone.to_bind())
        else:
            ttl = zone.default_ttl if zone.default_ttl is not None else "-"
            print(f"{authority}\tttl={ttl}\trecords={len(zone)}\t{zone.source}")


def print_matches(registry: Registry, queries: Sequence[Domain]) -> bool:
    """Print the authority of each query; returns False if any had none."""
    ok = True
    for name in queries:
        zone = registry.match(name)
        if zone is None:
            print(f"{name}: no authority")
            ok = False
        else:
            print(f"{name}: {zone.authority} ({zone.source})")
    return ok


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI entry point.

    Returns:
        int: Process exit status: 0 on success, 1 when settings or zones fail
        to load, 3 when a ``--match`` name has no zone of authority.
    """
    args = parse_args(argv)
    configure_logging(args.log_level or "INFO")
    try:
        settings = resolve_settings(args)
        logging.getLogger().setLevel(settings.log_level)
        logger.debug("parsing zone files in %s", settings.zones)
        paths = find_zone_files(settings.zones, settings.extensions)
        registry = load_zones(paths, workers=settings.workers)
        queries = [Domain.parse(name) for name in args.match]
    except (ZoneError, InvalidNameError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return EXIT_LOAD_ERROR

    print_registry(registry, args.format)
    if not print_matches(registry, queries):
        return EXIT_NO_MATCH
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
