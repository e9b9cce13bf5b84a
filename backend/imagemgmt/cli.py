"""
Command line entry point for resolving image versions.

Usage:
    imagemgmt-resolve spark hive
    imagemgmt-resolve spark hive --key myproject.daily_flow
    imagemgmt-resolve --all
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Dict, List, Optional

from imagemgmt.core.exceptions import DomainException
from imagemgmt.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve image versions under the active rampup plans")
    parser.add_argument("image_types", nargs="*", help="Image types to resolve")
    parser.add_argument("--all", action="store_true", help="Resolve every registered image type")
    parser.add_argument("--key", help="Workload key for sticky selection, e.g. <project>.<flow>")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


async def resolve(image_types: List[str], key: Optional[str] = None, resolve_all: bool = False) -> Dict[str, str]:
    """
    Resolve versions against the configured database.

    Args:
        image_types: Image type names
        key: Optional workload key; random selection when absent
        resolve_all: Resolve every registered image type instead of image_types
    """
    from imagemgmt.core.database import async_session_maker
    from imagemgmt.repositories import ImageTypeRepository, ImageVersionRepository, RampupRepository
    from imagemgmt.services.batch_resolver import BatchResolver
    from imagemgmt.services.rampup_resolver import build_strategy

    strategy = build_strategy("deterministic" if key else None, key=key)
    async with async_session_maker() as session:
        resolver = BatchResolver(
            RampupRepository(session),
            ImageVersionRepository(session),
            image_type_store=ImageTypeRepository(session),
        )
        if resolve_all:
            return await resolver.resolve_all_image_types(strategy)
        return await resolver.resolve_all(image_types, strategy)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.all and not args.image_types:
        parser.error("provide image types or --all")

    try:
        versions = await resolve(args.image_types, key=args.key, resolve_all=args.all)
    except DomainException as e:
        logger.error(f"Version resolution failed: {e.message}")
        print(json.dumps({"error": e.__class__.__name__, "detail": e.message, **e.details}), file=sys.stderr)
        return 1

    print(json.dumps(versions, indent=2))
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
