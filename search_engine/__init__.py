"""Positional inverted index with multi-threaded file indexing, web crawling and search."""

from .inverted_index import InvertedIndex, SearchResult, ThreadSafeInvertedIndex
from .index_builder import build, build_multithreaded, find_text_files
from .query_parser import MultiThreadedQueryParser, QueryParser, clean_line
from .rwlock import ReadWriteLock
from .web_crawler import WebCrawler
from .work_queue import WorkQueue
