import io
import json

from search_engine.inverted_index import InvertedIndex, SearchResult
from search_engine.json_writer import (
    write_index,
    write_search_results,
    write_search_results_file,
    write_word_counts,
)


def test_write_index(tmp_path, cat_index):
    path = tmp_path / "index.json"
    write_index(cat_index, path)
    text = path.read_text(encoding="utf-8")
    assert json.loads(text)["the"] == {"doc.txt": [1, 5]}
    assert '\n  "the": {\n    "doc.txt": [\n      1,\n      5\n    ]\n  }' in text


def test_empty_outputs_are_empty_files(tmp_path):
    index = InvertedIndex()
    write_index(index, tmp_path / "index.json")
    write_word_counts(index, tmp_path / "counts.json")
    write_search_results_file({}, tmp_path / "results.json")
    for name in ("index.json", "counts.json", "results.json"):
        assert (tmp_path / name).read_text(encoding="utf-8") == ""


def test_write_word_counts(tmp_path, cat_index):
    path = tmp_path / "counts.json"
    write_word_counts(cat_index, path)
    assert json.loads(path.read_text(encoding="utf-8")) == {"doc.txt": 6}


def test_write_search_results_layout():
    results = {
        "cat": [SearchResult("b.txt", 2, 2 / 3), SearchResult("a.txt", 1, 0.125)],
        "zebra": [],
    }
    out = io.StringIO()
    write_search_results(results, out)
    assert out.getvalue() == (
        "{\n"
        "  \"cat\": [\n"
        "    {\n"
        "      \"where\": \"b.txt\",\n"
        "      \"count\": 2,\n"
        "      \"score\": 0.66666667\n"
        "    },\n"
        "    {\n"
        "      \"where\": \"a.txt\",\n"
        "      \"count\": 1,\n"
        "      \"score\": 0.12500000\n"
        "    }\n"
        "  ],\n"
        "  \"zebra\": [\n"
        "  ]\n"
        "}\n"
    )
    parsed = json.loads(out.getvalue())
    assert parsed["cat"][0] == {"where": "b.txt", "count": 2, "score": 0.66666667}


def test_write_errors_propagate(tmp_path, cat_index):
    import pytest

    with pytest.raises(OSError):
        write_index(cat_index, tmp_path / "missing" / "index.json")
