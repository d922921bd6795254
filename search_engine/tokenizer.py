"""
Text parser and stemmer shared by the index builders, the crawler and the query parsers.
Cleans plain text or HTML into lowercase alphabetic tokens and reduces each to its
English Snowball stem, so index vocabulary and query vocabulary stay comparable.
"""

import re
import unicodedata
import warnings
from pathlib import Path
from bs4 import BeautifulSoup, Comment, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.stem.snowball import SnowballStemmer

STEMMER_LANGUAGE = "english"

# Elements whose text is never page content
BLOCK_ELEMENTS = ["head", "style", "script", "noscript", "svg"]

_NON_LETTERS = re.compile(r"[^\w\s]|[\d_]")


def new_stemmer() -> SnowballStemmer:
    """Return a fresh English Snowball stemmer (one per task, they are cheap)."""
    return SnowballStemmer(STEMMER_LANGUAGE)


def clean(text: str) -> str:
    """
    Decompose accented characters, drop every character that is not a letter
    or whitespace, and lowercase the result.
    """
    text = unicodedata.normalize("NFD", text)
    return _NON_LETTERS.sub("", text).lower()


def parse(text: str) -> list[str]:
    """Clean text and split it into tokens. Returns [] for blank text."""
    if not text:
        return []
    return clean(text).split()


def stem_tokens(tokens: list[str], stemmer: SnowballStemmer | None = None) -> list[str]:
    """Stem a list of tokens."""
    stemmer = stemmer or new_stemmer()
    return [stemmer.stem(t) for t in tokens]


def parse_and_stem(text: str, stemmer: SnowballStemmer | None = None) -> list[str]:
    """Parse text and return its stems in order of appearance."""
    return stem_tokens(parse(text), stemmer)


def strip_block_elements(html: str) -> BeautifulSoup:
    """
    Parse html and remove comments and elements that never hold visible
    content (head, style, script, noscript, svg).
    """
    soup = BeautifulSoup(html, "lxml")
    for element in soup(BLOCK_ELEMENTS):
        element.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup


def strip_html(html: str) -> str:
    """
    Extract visible text from HTML content: block elements and tags are
    removed and entities decoded.
    """
    soup = strip_block_elements(html)
    return soup.get_text(separator=" ")


def get_stemmed_tokens_from_html(html: str, stemmer: SnowballStemmer | None = None) -> list[str]:
    """Strip html down to its visible text and return the stemmed tokens."""
    return parse_and_stem(strip_html(html), stemmer)


def read_text_file(filepath: Path) -> str:
    """
    Read text file content, handling common encodings.
    """
    for encoding in ("utf-8", "latin-1"):
        try:
            return Path(filepath).read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not decode file: {filepath}")
