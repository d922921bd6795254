"""
Query parsing and search over a built index.

Each query line is cleaned, stemmed, deduplicated and sorted; the space-joined
form is the key results are stored under, so a query that normalizes to one
already searched is never searched again. Results are written in query order.
"""

import logging
from pathlib import Path
from threading import Lock

from .inverted_index import InvertedIndex, SearchResult, ThreadSafeInvertedIndex
from .json_writer import write_search_results_file
from .tokenizer import new_stemmer, parse, read_text_file
from .work_queue import DEFAULT_THREADS, WorkQueue

logger = logging.getLogger(__name__)


def clean_line(line: str) -> list[str]:
    """Return the sorted, unique stems of the words in line."""
    stemmer = new_stemmer()
    return sorted({stemmer.stem(word) for word in parse(line)})


def read_lines(path: Path):
    """Yield the lines of the query file at path, decoded like the indexed text files."""
    yield from read_text_file(path).splitlines()


class QueryParser:
    """Single-threaded query parser: one search per distinct normalized query."""

    def __init__(self, index: InvertedIndex) -> None:
        self.index = index
        self._results: dict[str, list[SearchResult]] = {}

    def parse_file(self, path: Path, exact: bool) -> None:
        """Search every line of the query file at path."""
        for line in read_lines(path):
            self.parse_line(line, exact)
        logger.info("Searched %d distinct queries from %s", len(self._results), path)

    def parse_line(self, line: str, exact: bool) -> None:
        query = clean_line(line)
        joined = " ".join(query)
        if not joined or joined in self._results:
            return
        self._results[joined] = self.index.search(query, exact)

    def results(self) -> dict[str, list[SearchResult]]:
        """Snapshot of query -> ranked results, sorted by query."""
        return {query: list(ranked) for query, ranked in sorted(self._results.items())}

    def queries(self) -> list[str]:
        return sorted(self._results)

    def write_results(self, path: Path) -> None:
        write_search_results_file(self.results(), path)


class MultiThreadedQueryParser(QueryParser):
    """
    Query parser that searches each line on a worker thread. The results map
    has its own lock, held for the memo check and for the insert but never
    during the search itself.
    """

    def __init__(self, index: ThreadSafeInvertedIndex, threads: int = DEFAULT_THREADS) -> None:
        if threads < 0:
            raise ValueError(f"Invalid thread count: {threads}")
        super().__init__(index)
        self.threads = threads or DEFAULT_THREADS
        self._results_lock = Lock()

    def parse_file(self, path: Path, exact: bool) -> None:
        with WorkQueue(self.threads) as work_queue:
            for line in read_lines(path):
                work_queue.submit(lambda line=line: self.parse_line(line, exact))
        logger.info("Searched %d distinct queries from %s with %d threads",
                    len(self.queries()), path, self.threads)

    def parse_line(self, line: str, exact: bool) -> None:
        query = clean_line(line)
        joined = " ".join(query)
        with self._results_lock:
            if not joined or joined in self._results:
                return

        # two lines racing here may both search; only the first result is kept
        ranked = self.index.search(query, exact)
        with self._results_lock:
            self._results.setdefault(joined, ranked)

    def results(self) -> dict[str, list[SearchResult]]:
        with self._results_lock:
            return super().results()

    def queries(self) -> list[str]:
        with self._results_lock:
            return super().queries()
