"""
Parses outbound links from the anchor tags of an HTML page.
"""

import logging
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

SCHEMES = {"http", "https"}


def clean(url: str) -> str:
    """Remove the fragment of url, if any."""
    return urldefrag(url)[0]


def list_links(base: str, html: str) -> list[str]:
    """
    Return the http(s) links found in the href attribute of every anchor tag,
    made absolute against base and stripped of fragments, in the order found.
    """
    soup = BeautifulSoup(html, "lxml")
    links = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        try:
            link = clean(urljoin(base, href))
            parsed = urlparse(link)
        except ValueError as e:
            logger.debug("Malformed link %r on %s: %s", href, base, e)
            continue
        if parsed.scheme in SCHEMES and parsed.netloc:
            links.append(link)
    return links
