"""
Command-line driver: builds an index from files or a web crawl, writes the
index and word counts, and runs a query file against it.

Usage (from repo root):
    python driver.py -path input/text -index index.json -counts counts.json
    python driver.py -url https://example.com/ -limit 20 -threads 4 \\
        -query queries.txt -results results.json

Every flag is optional; a missing flag disables that step. Supplying -threads
or -url switches to the thread-safe index and multi-threaded builders.
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Iterable

from . import index_builder
from .inverted_index import InvertedIndex, ThreadSafeInvertedIndex
from .json_writer import write_index, write_word_counts
from .log import setup_logging
from .query_parser import MultiThreadedQueryParser, QueryParser
from .web_crawler import DEFAULT_LIMIT, WebCrawler
from .work_queue import DEFAULT_THREADS

logger = logging.getLogger(__name__)

DEFAULT_INDEX = Path("index.json")
DEFAULT_COUNTS = Path("counts.json")
DEFAULT_RESULTS = Path("results.json")


def positive_int(value: str | None, default: int, flag: str) -> int:
    """Parse value as a positive integer, falling back to default (with a warning) if it is not one."""
    if not value:
        return default
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        logger.warning("Invalid %s value %r, using %d", flag, value, default)
        return default
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build and search a positional inverted index.")
    parser.add_argument("-path", type=Path, default=None,
                        help="Text file or directory of text files to index.")
    parser.add_argument("-url", default=None, help="Seed URL to crawl.")
    parser.add_argument("-limit", default=None,
                        help=f"Maximum number of pages to crawl (default: {DEFAULT_LIMIT}).")
    parser.add_argument("-threads", nargs="?", const="", default=None,
                        help=f"Use a pool of worker threads (default size: {DEFAULT_THREADS}).")
    parser.add_argument("-index", nargs="?", type=Path, const=DEFAULT_INDEX, default=None,
                        help=f"Write the inverted index as JSON (default: {DEFAULT_INDEX}).")
    parser.add_argument("-counts", nargs="?", type=Path, const=DEFAULT_COUNTS, default=None,
                        help=f"Write word counts per location as JSON (default: {DEFAULT_COUNTS}).")
    parser.add_argument("-query", type=Path, default=None, help="File with one query per line.")
    parser.add_argument("-exact", action="store_true", help="Exact search instead of partial search.")
    parser.add_argument("-results", nargs="?", type=Path, const=DEFAULT_RESULTS, default=None,
                        help=f"Write search results as JSON (default: {DEFAULT_RESULTS}).")
    parser.add_argument("-debug", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("-log", default=None, help="Also append the log to this file.")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log)
    start = time.perf_counter()

    multithreaded = args.threads is not None or args.url is not None
    threads = positive_int(args.threads, DEFAULT_THREADS, "-threads")

    if multithreaded:
        index: InvertedIndex = ThreadSafeInvertedIndex()
        query_parser: QueryParser = MultiThreadedQueryParser(index, threads)
    else:
        index = InvertedIndex()
        query_parser = QueryParser(index)

    if args.url is not None:
        limit = positive_int(args.limit, DEFAULT_LIMIT, "-limit")
        try:
            WebCrawler(limit).crawl(index, args.url, threads)
        except ValueError as e:
            logger.error("Not crawling: %s", e)

    if args.path is not None:
        try:
            if multithreaded:
                index_builder.build_multithreaded(args.path, index, threads)
            else:
                index_builder.build(args.path, index)
        except OSError as e:
            logger.error("Unable to build from path %s: %s", args.path, e)

    if args.index is not None:
        try:
            write_index(index, args.index)
            logger.info("Index saved to %s", args.index)
        except OSError as e:
            logger.error("Unable to write index to %s: %s", args.index, e)

    if args.counts is not None:
        try:
            write_word_counts(index, args.counts)
            logger.info("Word counts saved to %s", args.counts)
        except OSError as e:
            logger.error("Unable to write word counts to %s: %s", args.counts, e)

    if args.query is not None:
        try:
            query_parser.parse_file(args.query, args.exact)
        except (OSError, ValueError) as e:
            logger.error("Unable to read queries from %s: %s", args.query, e)

    if args.results is not None:
        try:
            query_parser.write_results(args.results)
            logger.info("Search results saved to %s", args.results)
        except OSError as e:
            logger.error("Unable to write search results to %s: %s", args.results, e)

    logger.info("Elapsed: %f seconds", time.perf_counter() - start)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
