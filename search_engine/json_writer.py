"""
Pretty JSON output for the index, the word counts and the search results.

Index and counts are plain nested mappings written with json.dump (2-space
indentation). Search results are laid out by hand because scores must keep
exactly 8 decimal places. Empty data writes an empty file.
Write errors propagate to the caller.
"""

import json
from pathlib import Path
from typing import Mapping, Sequence, TextIO

from .inverted_index import InvertedIndex, SearchResult

INDENT = "  "


def _dump(data: Mapping, path: Path) -> None:
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        if data:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")


def write_index(index: InvertedIndex, path: Path) -> None:
    """Write word -> location -> [positions] to path."""
    _dump(index.to_dict(), path)


def write_word_counts(index: InvertedIndex, path: Path) -> None:
    """Write location -> word count to path."""
    _dump(dict(index.word_counts()), path)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _write_result(result: SearchResult, f: TextIO, level: int) -> None:
    pad = INDENT * level
    f.write(f"{pad}{{\n")
    f.write(f"{pad}{INDENT}\"where\": {_quote(result.where)},\n")
    f.write(f"{pad}{INDENT}\"count\": {result.count},\n")
    f.write(f"{pad}{INDENT}\"score\": {result.score:.8f}\n")
    f.write(f"{pad}}}")


def write_search_results(results: Mapping[str, Sequence[SearchResult]], f: TextIO) -> None:
    """Write query -> [{where, count, score}, ...] to an open text stream."""
    if not results:
        return
    f.write("{\n")
    for i, (query, ranked) in enumerate(results.items()):
        if i:
            f.write(",\n")
        f.write(f"{INDENT}{_quote(query)}: [\n")
        for j, result in enumerate(ranked):
            if j:
                f.write(",\n")
            _write_result(result, f, 2)
        if ranked:
            f.write("\n")
        f.write(f"{INDENT}]")
    f.write("\n}\n")


def write_search_results_file(results: Mapping[str, Sequence[SearchResult]], path: Path) -> None:
    with open(Path(path), "w", encoding="utf-8") as f:
        write_search_results(results, f)
