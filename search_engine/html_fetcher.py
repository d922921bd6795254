"""
Fetches web pages for the crawler.

Only successful HTML responses yield content. Redirects are followed by hand
so the number of hops stays bounded by the caller's budget.
"""

import logging
from urllib.parse import urljoin

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "SearchEngineBot/1.0"
HEADERS = {"User-Agent": USER_AGENT, "Accept": "text/html,application/xhtml+xml"}
TIMEOUT = 10  # seconds, per request
DEFAULT_REDIRECTS = 3


def is_html(response: requests.Response) -> bool:
    """True if the Content-Type header starts with text/html (case-insensitive)."""
    return response.headers.get("Content-Type", "").lower().startswith("text/html")


def is_redirect(response: requests.Response) -> bool:
    """True for a 3xx status that carries a Location header."""
    return 300 <= response.status_code < 400 and "Location" in response.headers


def fetch(url: str, redirects: int = 0, session: requests.Session | None = None) -> str | None:
    """
    Fetch url and return its HTML, following up to `redirects` redirects.
    Returns None when the final response is not a 2xx HTML page or the
    request fails.
    """
    http = session or requests
    try:
        response = http.get(url, headers=HEADERS, timeout=TIMEOUT, allow_redirects=False)
        while is_redirect(response) and redirects > 0:
            redirects -= 1
            url = urljoin(url, response.headers["Location"])
            response = http.get(url, headers=HEADERS, timeout=TIMEOUT, allow_redirects=False)
    except requests.RequestException as e:
        logger.warning("Failed %s: %s", url, e)
        return None

    if 200 <= response.status_code < 300 and is_html(response):
        return response.text
    logger.debug("Skipping %s: status <%d>, type %r", url, response.status_code,
                 response.headers.get("Content-Type"))
    return None
