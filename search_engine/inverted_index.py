"""
Positional inverted index and search results.

The index maps word -> location -> sorted positions, and keeps a word count
per location (the number of tokens added for it, not distinct words). Words
are kept in sorted order so a prefix search only walks the contiguous run of
words that start with the query term.
"""

import bisect
import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Collection, Iterable, Mapping

from .rwlock import ReadWriteLock


@dataclass
class SearchResult:
    """
    A location matched by a query.
    - where: document path or URL
    - count: total positions found across the matching query words
    - score: count / total words at the location
    """

    where: str
    count: int = 0
    score: float = 0.0

    def sort_key(self) -> tuple:
        """Score descending, then count descending, then location ascending."""
        return (-self.score, -self.count, self.where)

    def to_dict(self) -> dict:
        return {"where": self.where, "count": self.count, "score": self.score}

    def __repr__(self) -> str:
        return f"SearchResult(where={self.where!r}, count={self.count}, score={self.score:.8f})"


class InvertedIndex:
    """
    Inverted index: word -> location -> set of positions, plus per-location word counts.
    Not thread safe; see ThreadSafeInvertedIndex.
    """

    def __init__(self) -> None:
        self._index: dict[str, dict[str, set[int]]] = {}
        self._words: list[str] = []  # sorted keys of _index
        self._word_count: dict[str, int] = {}

    def add(self, word: str, location: str, position: int) -> None:
        """
        Record word at position in location and count one more word for location.
        The word count is not deduplicated: call once per token occurrence.
        """
        locations = self._index.get(word)
        if locations is None:
            locations = self._index[word] = {}
            bisect.insort(self._words, word)
        locations.setdefault(location, set()).add(position)
        self._word_count[location] = self._word_count.get(location, 0) + 1

    def add_all(self, words: Iterable[str], location: str, start: int = 1) -> int:
        """Add words at consecutive positions from start. Returns the next free position."""
        position = start
        for word in words:
            self.add(word, location, position)
            position += 1
        return position

    def merge(self, other: "InvertedIndex") -> None:
        """
        Absorb all postings and word counts from other (normally a local index
        built from one document): positions are unioned, counts summed.
        """
        if other is self:
            return
        for word, other_locations in other._index.items():
            locations = self._index.get(word)
            if locations is None:
                locations = self._index[word] = {}
                bisect.insort(self._words, word)
            for location, positions in other_locations.items():
                if location in locations:
                    locations[location].update(positions)
                else:
                    locations[location] = set(positions)
        for location, count in other._word_count.items():
            self._word_count[location] = self._word_count.get(location, 0) + count

    def contains(self, word: str, location: str | None = None, position: int | None = None) -> bool:
        locations = self._index.get(word)
        if locations is None:
            return False
        if location is None:
            return True
        positions = locations.get(location)
        if positions is None:
            return False
        return position is None or position in positions

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def size(self) -> int:
        """Number of distinct words."""
        return len(self._index)

    def __len__(self) -> int:
        return self.size()

    def num_locations(self, word: str) -> int:
        return len(self._index.get(word, ()))

    def num_positions(self, word: str, location: str) -> int:
        return len(self._index.get(word, {}).get(location, ()))

    def words(self) -> tuple[str, ...]:
        """All indexed words in sorted order."""
        return tuple(self._words)

    def locations(self, word: str) -> tuple[str, ...]:
        return tuple(sorted(self._index.get(word, ())))

    def positions(self, word: str, location: str) -> tuple[int, ...]:
        return tuple(sorted(self._index.get(word, {}).get(location, ())))

    def word_counts(self) -> Mapping[str, int]:
        """Read-only snapshot of location -> total words, sorted by location."""
        return MappingProxyType(dict(sorted(self._word_count.items())))

    def word_count(self, location: str) -> int:
        return self._word_count.get(location, 0)

    def num_documents(self) -> int:
        return len(self._word_count)

    def to_dict(self) -> dict[str, dict[str, list[int]]]:
        """Nested word -> location -> positions, all levels sorted, for JSON output."""
        return {
            word: {
                location: sorted(positions)
                for location, positions in sorted(self._index[word].items())
            }
            for word in self._words
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def search(self, query: Collection[str], exact: bool) -> list[SearchResult]:
        """Run an exact or partial search for the cleaned, stemmed, unique query words."""
        if exact:
            return self.exact_search(query)
        return self.partial_search(query)

    def exact_search(self, query: Collection[str]) -> list[SearchResult]:
        """Match only index words identical to a query word."""
        results: dict[str, SearchResult] = {}
        for word in sorted(set(query)):
            if word in self._index:
                self._add_results(word, results)
        return _rank(results)

    def partial_search(self, query: Collection[str]) -> list[SearchResult]:
        """Match every index word that starts with a query word."""
        results: dict[str, SearchResult] = {}
        for prefix in sorted(set(query)):
            # sorted order keeps every word with this prefix in one contiguous run
            for i in range(bisect.bisect_left(self._words, prefix), len(self._words)):
                word = self._words[i]
                if not word.startswith(prefix):
                    break
                self._add_results(word, results)
        return _rank(results)

    def _add_results(self, word: str, results: dict[str, SearchResult]) -> None:
        for location, positions in self._index[word].items():
            result = results.get(location)
            if result is None:
                result = results[location] = SearchResult(location)
            result.count += len(positions)
            result.score = result.count / self._word_count[location]


def _rank(results: dict[str, SearchResult]) -> list[SearchResult]:
    return sorted(results.values(), key=SearchResult.sort_key)


class ThreadSafeInvertedIndex(InvertedIndex):
    """
    InvertedIndex shared between worker threads. Mutations take the write
    lock, everything else the read lock, so a reader never sees a half-merged
    document.
    """

    def __init__(self) -> None:
        super().__init__()
        self._lock = ReadWriteLock()

    def add(self, word: str, location: str, position: int) -> None:
        with self._lock.write_lock():
            super().add(word, location, position)

    def add_all(self, words: Iterable[str], location: str, start: int = 1) -> int:
        words = list(words)
        with self._lock.write_lock():
            position = start
            for word in words:
                InvertedIndex.add(self, word, location, position)
                position += 1
            return position

    def merge(self, other: InvertedIndex) -> None:
        if other is self:
            return
        # take a consistent copy of a shared source before locking ourselves
        if isinstance(other, ThreadSafeInvertedIndex):
            other = other.snapshot()
        with self._lock.write_lock():
            super().merge(other)

    def snapshot(self) -> InvertedIndex:
        """A plain, unshared copy of the current contents."""
        copy = InvertedIndex()
        with self._lock.read_lock():
            InvertedIndex.merge(copy, self)
        return copy

    def contains(self, word: str, location: str | None = None, position: int | None = None) -> bool:
        with self._lock.read_lock():
            return super().contains(word, location, position)

    def size(self) -> int:
        with self._lock.read_lock():
            return super().size()

    def num_locations(self, word: str) -> int:
        with self._lock.read_lock():
            return super().num_locations(word)

    def num_positions(self, word: str, location: str) -> int:
        with self._lock.read_lock():
            return super().num_positions(word, location)

    def words(self) -> tuple[str, ...]:
        with self._lock.read_lock():
            return super().words()

    def locations(self, word: str) -> tuple[str, ...]:
        with self._lock.read_lock():
            return super().locations(word)

    def positions(self, word: str, location: str) -> tuple[int, ...]:
        with self._lock.read_lock():
            return super().positions(word, location)

    def word_counts(self) -> Mapping[str, int]:
        with self._lock.read_lock():
            return super().word_counts()

    def word_count(self, location: str) -> int:
        with self._lock.read_lock():
            return super().word_count(location)

    def num_documents(self) -> int:
        with self._lock.read_lock():
            return super().num_documents()

    def to_dict(self) -> dict[str, dict[str, list[int]]]:
        with self._lock.read_lock():
            return super().to_dict()

    def exact_search(self, query: Collection[str]) -> list[SearchResult]:
        with self._lock.read_lock():
            return super().exact_search(query)

    def partial_search(self, query: Collection[str]) -> list[SearchResult]:
        with self._lock.read_lock():
            return super().partial_search(query)
