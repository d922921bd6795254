import pytest

from search_engine.inverted_index import InvertedIndex


@pytest.fixture
def text_dir(tmp_path):
    """A small corpus: two text files, a nested one, and files that are not text."""
    corpus = tmp_path / "corpus"
    corpus.mkdir()
    (corpus / "animals.txt").write_text("The cat sat on the mat.\nThe dog sat too.\n", encoding="utf-8")
    (corpus / "catalog.TEXT").write_text("Catalog of cats: cat, cats, catalogs!", encoding="utf-8")
    nested = corpus / "nested"
    nested.mkdir()
    (nested / "running.txt").write_text("Running runners run 42 times.", encoding="utf-8")
    (corpus / "notes.md").write_text("cat cat cat", encoding="utf-8")
    (corpus / "data.txt.bak").write_text("cat", encoding="utf-8")
    return corpus


@pytest.fixture
def cat_index():
    """Index of the single document "the cat sat on the mat"."""
    index = InvertedIndex()
    index.add_all(["the", "cat", "sat", "on", "the", "mat"], "doc.txt")
    return index


def assert_consistent(index):
    """Positions are strictly ascending and word counts match the postings."""
    totals = {}
    for word in index.words():
        for location in index.locations(word):
            positions = index.positions(word, location)
            assert positions, (word, location)
            assert list(positions) == sorted(set(positions))
            totals[location] = totals.get(location, 0) + len(positions)
    assert totals == dict(index.word_counts())
