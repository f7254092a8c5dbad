"""Command line entry point: generate a collection, or deploy its metadata."""

import argparse
import logging
import sys
from pathlib import Path

from ..config import (
    CONFIG_FILE,
    MEDIA_DIR,
    METADATA_DIR,
    OUTPUT_DIR,
    GenerationSettings,
)
from ..engine import GenerationEngine
from ..errors import GenerationError, NiftyError
from ..models import load_config
from ..services.deploy import DeployService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="nifty", description="A NFT generation tool.")
    commands = ap.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="Generate the token media and metadata from configuration")
    gen.add_argument("source", type=Path, help="Source directory containing the configuration and assets")
    gen.add_argument("-c", "--config", default=CONFIG_FILE, help="Configuration file name")
    gen.add_argument("-o", "--output", default=OUTPUT_DIR, help="Output directory name")
    gen.add_argument("--media", default=MEDIA_DIR, help="Media output directory name")
    gen.add_argument("--metadata", default=METADATA_DIR, help="Metadata output directory name")
    gen.add_argument("--workers", type=int, help="Parallel token workers (default: NIFTY_WORKERS or CPU count)")
    gen.add_argument("--encoder-workers", type=int, help="Parallel video encodes (default: NIFTY_ENCODER_WORKERS or 2)")
    gen.add_argument("--seed", default=None, help="Random seed (logged when omitted)")
    gen.add_argument("--keep-going", action="store_true", help="Continue after a token fails")
    gen.add_argument("--clean", action="store_true", help="Clear an existing output directory")
    _add_verbosity(gen)

    dep = commands.add_parser("deploy", help="Point metadata at the deployed media")
    dep.add_argument("source", type=Path, help="Source directory containing the output")
    dep.add_argument("--base-uri", required=True, help="Base URI of the deployed media, ending with '/'")
    dep.add_argument("-o", "--output", default=OUTPUT_DIR, help="Output directory name")
    dep.add_argument("--metadata", default=METADATA_DIR, help="Metadata output directory name")
    _add_verbosity(dep)

    return ap


def _add_verbosity(parser: argparse.ArgumentParser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    group.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")


def _init_logging(args: argparse.Namespace):
    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)-7s %(name)s: %(message)s")


def generate(args: argparse.Namespace) -> int:
    # Flags left unset fall back to the NIFTY_* environment settings
    overrides = {
        name: value
        for name, value in (("workers", args.workers), ("encoder_workers", args.encoder_workers))
        if value is not None
    }
    settings = GenerationSettings(
        source=args.source,
        config_file=args.config,
        output=args.output,
        media=args.media,
        metadata=args.metadata,
        seed=args.seed,
        fail_fast=not args.keep_going,
        clean=args.clean,
        **overrides,
    )
    config = load_config(settings.config_path)
    engine = GenerationEngine(config, settings)

    try:
        report = engine.generate()
    except GenerationError as e:
        report = e.report

    stats = report.get_stats()
    print(f"\n=== RESULTS (seed {report.seed}) ===", flush=True)
    for failure in report.failures:
        print(f"  FAILED {failure}", flush=True)
    print(
        f"Total: {stats['generated']} generated, {stats['failed']} failed, "
        f"{stats['skipped']} skipped",
        flush=True,
    )
    return 0 if report.ok else 1


def deploy(args: argparse.Namespace) -> int:
    metadata_path = args.source / args.output / args.metadata
    updated = DeployService(metadata_path).deploy(args.base_uri)
    print(f"Updated {updated} metadata files", flush=True)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _init_logging(args)

    try:
        if args.command == "generate":
            return generate(args)
        return deploy(args)
    except NiftyError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning("interrupted - in-flight tokens were completed, the rest skipped")
        return 130


if __name__ == "__main__":
    sys.exit(main())
