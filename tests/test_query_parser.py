import pytest

from search_engine.inverted_index import InvertedIndex, ThreadSafeInvertedIndex
from search_engine.query_parser import MultiThreadedQueryParser, QueryParser, clean_line


@pytest.fixture
def query_file(tmp_path):
    path = tmp_path / "queries.txt"
    path.write_text(
        "cats\n"
        "The CAT\n"
        "the cat the\n"
        "\n"
        "42 !!\n"
        "dog mat\n"
        "zebra\n",
        encoding="utf-8",
    )
    return path


def make_index(cls):
    index = cls()
    index.add_all("the cat sat on the mat".split(), "a.txt")
    index.add_all("the dog chased the cat and the catalog".split(), "b.txt")
    return index


def test_clean_line_sorts_stems_and_dedupes():
    assert clean_line("The cats, the CAT!") == ["cat", "the"]
    assert clean_line("  123 ") == []


def test_parse_line_memoizes_normalized_query():
    calls = []

    class CountingIndex(InvertedIndex):
        def search(self, query, exact):
            calls.append(list(query))
            return super().search(query, exact)

    parser = QueryParser(CountingIndex())
    parser.parse_line("the cat", exact=True)
    parser.parse_line("Cat THE the", exact=True)
    parser.parse_line("", exact=True)
    assert calls == [["cat", "the"]]
    assert parser.queries() == ["cat the"]


def test_parse_file_exact(query_file):
    parser = QueryParser(make_index(InvertedIndex))
    parser.parse_file(query_file, exact=True)
    results = parser.results()

    assert list(results) == ["cat", "cat the", "dog mat", "zebra"]
    assert [(r.where, r.count) for r in results["cat"]] == [("a.txt", 1), ("b.txt", 1)]
    assert results["cat"][0].score == pytest.approx(1 / 6)
    # equal scores of 0.5: the higher count ranks first
    assert [(r.where, r.count) for r in results["cat the"]] == [("b.txt", 4), ("a.txt", 3)]
    assert results["zebra"] == []


def test_parse_file_partial(query_file):
    parser = QueryParser(make_index(InvertedIndex))
    parser.parse_file(query_file, exact=False)
    cat = parser.results()["cat"]
    # b.txt matches cat and catalog: 2/8 beats a.txt's 1/6
    assert [(r.where, r.count) for r in cat] == [("b.txt", 2), ("a.txt", 1)]


def test_missing_query_file_raises(tmp_path):
    parser = QueryParser(InvertedIndex())
    with pytest.raises(OSError):
        parser.parse_file(tmp_path / "missing.txt", exact=True)


@pytest.mark.parametrize("exact", [True, False])
def test_multithreaded_matches_single_threaded(query_file, exact):
    single = QueryParser(make_index(InvertedIndex))
    single.parse_file(query_file, exact)

    multi = MultiThreadedQueryParser(make_index(ThreadSafeInvertedIndex), threads=4)
    multi.parse_file(query_file, exact)

    assert multi.results() == single.results()


def test_multithreaded_never_duplicates_entries(tmp_path):
    path = tmp_path / "queries.txt"
    path.write_text("cat the\nthe cat\nCAT THE\n" * 50, encoding="utf-8")
    parser = MultiThreadedQueryParser(make_index(ThreadSafeInvertedIndex), threads=8)
    parser.parse_file(path, exact=True)
    assert parser.queries() == ["cat the"]


def test_multithreaded_rejects_negative_threads():
    with pytest.raises(ValueError):
        MultiThreadedQueryParser(ThreadSafeInvertedIndex(), threads=-1)


def test_write_results(tmp_path, query_file):
    parser = MultiThreadedQueryParser(make_index(ThreadSafeInvertedIndex), threads=2)
    parser.parse_file(query_file, exact=True)
    out = tmp_path / "results.json"
    parser.write_results(out)
    text = out.read_text(encoding="utf-8")
    assert text.startswith("{\n  \"cat\": [\n    {\n      \"where\": \"a.txt\",\n")
    assert "\"score\": 0.16666667" in text
