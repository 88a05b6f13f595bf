#!/usr/bin/env python3
"""
Kolej Finder CLI
Look up dormitory residents by block/room/floor or by name
"""
import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from finder.config import FinderSettings
from finder.core import FinderError
from finder.filters import QueryFilter, compile_filter
from finder.matching import Dumper, NameMatcher
from finder.output import FORMATS, STDOUT, OutputWriter, detect_format, open_output
from extractor.cache import RecordCache
from extractor.directory import DirectorySource
from extractor.orchestrator import BatchFetcher, FetchReport, OnBatch

logger = logging.getLogger(__name__)

EPILOG = """
Block types:
  A - Koleje pod Palackeho vrchem   (blocks 2, 3, 4, 5)
  B - Purkynovy koleje              (blocks 2, 4, 5, 7)
  C - Listovy koleje                (blocks 1, 2, 3)
  D - Manesovy koleje               (blocks 1, 2)

Examples:
  # Single person from B02 on the 3rd floor named "Smith"
  kolej-finder find Smith -b B02 --floor 3

  # All the people named "Tomas" from all blocks and rooms
  kolej-finder find Tomas -m

  # Dump all the people from all A blocks
  kolej-finder dump --block-type A

  # Dump everybody, then search the dump instead of the server
  kolej-finder dump -o database.json
  kolej-finder find name -i database.json -o output.csv
"""


def setup_logging(verbose: bool):
    """Progress goes to stderr; -v shows it, otherwise only warnings"""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    for name in ("finder", "extractor"):
        log = logging.getLogger(name)
        log.handlers[:] = [handler]
        log.setLevel(logging.INFO if verbose else logging.WARNING)
        log.propagate = False


def build_filter(args) -> QueryFilter:
    return QueryFilter(
        block=args.block,
        room=args.room,
        floor=args.floor,
        block_type=args.block_type,
        block_number=args.block_number,
    )


def build_settings(args) -> FinderSettings:
    delay = args.fetch_delay / 1000.0 if args.fetch_delay is not None else None
    return FinderSettings.from_env().merged(batch_size=args.batch_size, fetch_delay=delay)


async def fetch_all(
    settings: FinderSettings,
    queries: List[str],
    consumer: OnBatch,
    cache: Optional[RecordCache] = None,
) -> FetchReport:
    """Run the fetcher against the cache when one is loaded, else the directory"""
    if cache is not None:
        return await BatchFetcher(settings, cache=cache).run(queries, consumer)
    async with DirectorySource(settings) as source:
        return await BatchFetcher(settings, source=source).run(queries, consumer)


def cmd_find(args, writer: OutputWriter) -> OnBatch:
    """Handle find command"""
    matcher = NameMatcher(args.name, writer, multiple=args.multiple)
    logger.info('Trying to find a person named "%s"...', matcher.needle)
    return matcher


def cmd_dump(args, writer: OutputWriter) -> OnBatch:
    """Handle dump command"""
    logger.info("Dumping all the people matching the filter...")
    return Dumper(writer)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)

    out = common.add_argument_group("output")
    out.add_argument("-o", "--output", default=STDOUT,
                     help="Target file to output the results to (default: stdout)")
    out.add_argument("--format", choices=FORMATS,
                     help="Output format (default: text, or guessed from -o extension)")
    out.add_argument("-i", "--input", type=Path,
                     help="Dumped JSON data to use instead of fetching from the server")
    out.add_argument("--batch-size", type=int,
                     help="Number of rooms to fetch at once (default: 10)")
    out.add_argument("--fetch-delay", type=int,
                     help="Delay in ms between fetching batches (default: 300)")
    out.add_argument("-v", "--verbose", action="store_true",
                     help="Show progress information on stderr")

    flt = common.add_argument_group("filter")
    flt.add_argument("-b", "--block", help="Block, e.g. A01")
    flt.add_argument("-r", "--room", type=int, help="Room, e.g. 218")
    flt.add_argument("--floor", type=int, help="Floor, e.g. 2 (ignored if -r is set)")
    flt.add_argument("--block-type", help="Block type A-D (ignored if -b is set)")
    flt.add_argument("--block-number", type=int, help="Block number (ignored if -b is set)")

    parser = argparse.ArgumentParser(
        prog="kolej-finder",
        description="Kolej Finder - find dormitory residents by room or name",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    find_parser = subparsers.add_parser(
        "find", parents=[common], help="Find a person by name, surname or login"
    )
    find_parser.add_argument("name", help="Name to find (case and diacritics insensitive)")
    find_parser.add_argument("-m", "--multiple", action="store_true",
                             help="Return every match instead of stopping at the first")
    find_parser.set_defaults(handler=cmd_find)

    dump_parser = subparsers.add_parser(
        "dump", parents=[common], help="Dump all the people matching the filter"
    )
    dump_parser.set_defaults(handler=cmd_dump)

    return parser


def run(args) -> FetchReport:
    settings = build_settings(args)
    fmt = detect_format(args.output, args.format)

    logger.info("Trying to compile the input filter...")
    queries = compile_filter(build_filter(args))
    logger.info("Filter compiled successfully with %d results to fetch.", len(queries))

    cache = None
    if args.input:
        logger.info("Trying to load input file...")
        cache = RecordCache.from_file(args.input)
        logger.info("Input file loaded successfully (%d people).", len(cache))

    writer = open_output(args.output, fmt)
    try:
        consumer = args.handler(args, writer)
        report = asyncio.run(fetch_all(settings, queries, consumer, cache))
    finally:
        writer.write(None)

    logger.info("Finished fetching the queries.")
    return report


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.verbose)

    try:
        run(args)
    except FinderError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # bad settings or an empty name to find
        print(f"❌ Invalid argument: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
