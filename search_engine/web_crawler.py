"""
web_crawler.py - Breadth-first web crawler feeding the shared index

Starting from one seed URL, every page is fetched, stripped to its visible
text, stemmed into a local index keyed by the page URL and merged into the
shared index in one step. Links found on the page are scheduled on the work
queue until the visited-page limit is reached; after that no new pages are
scheduled and the crawl ends once the queue drains.
"""

import logging
from threading import Lock
from urllib.parse import urlparse

from .html_fetcher import DEFAULT_REDIRECTS, fetch
from .inverted_index import InvertedIndex, ThreadSafeInvertedIndex
from .link_parser import SCHEMES, clean, list_links
from .tokenizer import get_stemmed_tokens_from_html
from .work_queue import DEFAULT_THREADS, WorkQueue

logger = logging.getLogger(__name__)

# The default maximum number of pages to visit
DEFAULT_LIMIT = 50


def validate_url(url: str) -> str:
    """Return url without its fragment, or raise ValueError if it is not an absolute http(s) URL."""
    parsed = urlparse(url)
    if parsed.scheme not in SCHEMES or not parsed.netloc:
        raise ValueError(f"Invalid URL: {url!r}")
    return clean(url)


class WebCrawler:
    """
    Crawls at most `limit` pages into a ThreadSafeInvertedIndex.

    The visited set has its own lock, separate from the index lock; the two
    are never held together.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT, redirects: int = DEFAULT_REDIRECTS) -> None:
        if limit < 1:
            logger.warning("Invalid crawl limit %d, using %d", limit, DEFAULT_LIMIT)
            limit = DEFAULT_LIMIT
        self.limit = limit
        self.redirects = redirects
        self._visited: set[str] = set()
        self._visited_lock = Lock()
        self._stopped = False

    @property
    def visited(self) -> frozenset[str]:
        with self._visited_lock:
            return frozenset(self._visited)

    @property
    def stopped(self) -> bool:
        """True once the limit was reached and scheduling stopped."""
        return self._stopped

    def crawl(self, index: ThreadSafeInvertedIndex, seed: str, threads: int = DEFAULT_THREADS) -> int:
        """
        Crawl from seed into index with a pool of threads, blocking until done.
        Raises ValueError for an invalid seed. Returns the number of pages visited.
        """
        seed = validate_url(seed)
        with WorkQueue(threads) as work_queue:
            with self._visited_lock:
                self._visited.add(seed)
            work_queue.submit_tracked(lambda: self._process(seed, index, work_queue))
        pages = len(self.visited)
        logger.info("Crawl complete: %d pages visited from %s", pages, seed)
        return pages

    def _process(self, url: str, index: ThreadSafeInvertedIndex, work_queue: WorkQueue) -> None:
        html = fetch(url, self.redirects)
        if html is None:
            return

        local = InvertedIndex()
        local.add_all(get_stemmed_tokens_from_html(html), url)
        index.merge(local)
        logger.info("Indexed %s (%d words)", url, local.word_count(url))

        if self._stopped:
            return
        links = list_links(url, html)
        with self._visited_lock:
            for link in links:
                if len(self._visited) >= self.limit:
                    # remaining links on this page are dropped, not deferred
                    self._stopped = True
                    logger.debug("Reached limit of %d pages", self.limit)
                    break
                if link not in self._visited:
                    self._visited.add(link)
                    work_queue.submit_tracked(
                        lambda link=link: self._process(link, index, work_queue))
