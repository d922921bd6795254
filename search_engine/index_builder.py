"""
Index builder: fills an inverted index from the text files under a directory.
Single-threaded builds add every token straight into the index; multi-threaded
builds tokenize each file into a private local index on a worker and publish it
with one merge, so the shared index lock is taken once per file.
"""

import logging
import re
from pathlib import Path

from .inverted_index import InvertedIndex, ThreadSafeInvertedIndex
from .tokenizer import new_stemmer, parse, read_text_file
from .work_queue import DEFAULT_THREADS, WorkQueue

logger = logging.getLogger(__name__)

# Files ending in .txt or .text (case-insensitive)
TEXT_FILE = re.compile(r".+\.te?xt$", re.IGNORECASE)


def is_text_file(path: Path) -> bool:
    return bool(TEXT_FILE.match(path.name)) and path.is_file()


def find_text_files(root: Path) -> list[Path]:
    """
    List the text files under root (recursive, sorted). A root that is itself
    a file is returned as the only entry, whatever its extension.
    """
    root = Path(root)
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise FileNotFoundError(f"No such file or directory: {root}")
    return sorted(p for p in root.rglob("*") if is_text_file(p))


def index_file(filepath: Path, index: InvertedIndex) -> int:
    """
    Read filepath line by line and add every stemmed token to index, using the
    path as location and positions counting up from 1.
    Returns the number of tokens added.
    """
    filepath = Path(filepath)
    location = str(filepath)
    stemmer = new_stemmer()
    position = 1
    for line in read_text_file(filepath).splitlines():
        for word in parse(line):
            index.add(stemmer.stem(word), location, position)
            position += 1
    return position - 1


def build(root: Path, index: InvertedIndex) -> int:
    """
    Build index from every text file under root, one file after another.
    Unreadable files are logged and skipped. Returns the number of files indexed.
    """
    indexed = 0
    for filepath in find_text_files(root):
        try:
            tokens = index_file(filepath, index)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s: %s", filepath, e)
            continue
        indexed += 1
        logger.debug("Indexed %s (%d tokens)", filepath, tokens)
    logger.info("Indexed %d files under %s", indexed, root)
    return indexed


def _index_and_merge(filepath: Path, index: ThreadSafeInvertedIndex) -> None:
    local = InvertedIndex()
    try:
        tokens = index_file(filepath, local)
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", filepath, e)
        return
    index.merge(local)
    logger.debug("Indexed %s (%d tokens)", filepath, tokens)


def build_multithreaded(
    root: Path,
    index: ThreadSafeInvertedIndex,
    threads: int = DEFAULT_THREADS,
    *,
    work_queue: WorkQueue | None = None,
) -> int:
    """
    Build index from every text file under root using a pool of threads,
    one task per file. Blocks until every file has been merged.
    Returns the number of files submitted.

    A caller-owned work_queue is drained but left running; otherwise a pool of
    threads workers is created and shut down here.
    """
    files = find_text_files(root)
    owned = work_queue is None
    queue = work_queue or WorkQueue(threads)
    try:
        for filepath in files:
            queue.submit(lambda filepath=filepath: _index_and_merge(filepath, index))
        queue.drain()
    finally:
        if owned:
            queue.shutdown()
    logger.info("Indexed %d files under %s with %d threads", len(files), root, queue.size)
    return len(files)
