"""Unit tests for token table and merge-rank loading."""

import json

import pytest

import gptok
from gptok import ResourceError, load_gpt3_tables, parse_merge_ranks, parse_vocabulary

from conftest import TOY_MERGES, base_vocab, build_tables


# Token table
# ---------------------------------------------------------------------------


def test_parse_vocabulary():
    """A complete JSON table parses into a read-only mapping."""
    vocab, _ = build_tables(TOY_MERGES)
    parsed = parse_vocabulary(json.dumps(vocab))
    assert dict(parsed) == vocab
    with pytest.raises(TypeError):
        parsed["new"] = 1  # type: ignore[index]


def test_parse_vocabulary_accepts_bytes():
    """Raw UTF-8 bytes are accepted."""
    parsed = parse_vocabulary(json.dumps(base_vocab()).encode("utf-8"))
    assert len(parsed) == 256


@pytest.mark.parametrize(
    "data",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps({**base_vocab(), "bad": -1}),
        json.dumps({**base_vocab(), "bad": "7"}),
        json.dumps({**base_vocab(), "bad": True}),
    ],
)
def test_parse_vocabulary_rejects_malformed(data):
    """Structural problems are fatal ResourceErrors."""
    with pytest.raises(ResourceError):
        parse_vocabulary(data, source="encoder.json")


def test_parse_vocabulary_requires_byte_tokens():
    """A table missing any single-byte token is rejected."""
    vocab = base_vocab()
    del vocab["Ġ"]
    with pytest.raises(ResourceError, match="byte tokens"):
        parse_vocabulary(json.dumps(vocab))


# Merge ranks
# ---------------------------------------------------------------------------


def test_parse_merge_ranks():
    """Ranks count data lines from zero, skipping the header and blank lines."""
    ranks = parse_merge_ranks("#version: 0.2\na b\n\nc d\n")
    assert dict(ranks) == {("a", "b"): 0, ("c", "d"): 1}


def test_header_is_always_skipped():
    """The first line is ignored even when it looks like a rule."""
    ranks = parse_merge_ranks("x y\na b")
    assert dict(ranks) == {("a", "b"): 0}


def test_parse_merge_ranks_accepts_bytes():
    """Raw UTF-8 bytes are accepted."""
    ranks = parse_merge_ranks("#v\nĠ t\n".encode("utf-8"))
    assert dict(ranks) == {("Ġ", "t"): 0}


@pytest.mark.parametrize(
    "data,line_no",
    [
        ("#v\na b\na b c\n", 3),
        ("#v\nlonely\n", 2),
        ("#v\na b\n\na b\n", 4),
    ],
)
def test_parse_merge_ranks_rejects_malformed(data, line_no):
    """Bad or duplicate rules report their line number."""
    with pytest.raises(ResourceError) as exc:
        parse_merge_ranks(data, source="vocab.bpe")
    assert exc.value.line_no == line_no
    assert exc.value.resource_path == "vocab.bpe"


# Files
# ---------------------------------------------------------------------------


def test_load_missing_file(tmp_path):
    """A missing file raises ResourceError naming the path."""
    path = tmp_path / "nope.json"
    with pytest.raises(ResourceError) as exc:
        gptok.load_vocabulary(path)
    assert exc.value.resource_path == str(path)


def test_load_gpt3_tables_from_directory(resource_dir):
    """Local encoder.json and vocab.bpe are used when a directory is given."""
    tables = load_gpt3_tables(resource_dir)
    vocab, ranks = build_tables(TOY_MERGES)
    assert dict(tables.vocab) == vocab
    assert dict(tables.ranks) == ranks


def test_load_gpt3_tables_from_environment(resource_dir, monkeypatch):
    """GPTOK_RESOURCE_DIR points the loader at local files."""
    monkeypatch.setenv("GPTOK_RESOURCE_DIR", str(resource_dir))
    tables = load_gpt3_tables()
    assert len(tables.ranks) == len(TOY_MERGES)


def test_load_gpt3_tables_wraps_fetch_failure(monkeypatch):
    """Download failures become ResourceErrors."""
    monkeypatch.delenv("GPTOK_RESOURCE_DIR", raising=False)

    def _offline(url):
        raise OSError("network unreachable")

    monkeypatch.setattr(gptok.vocab, "read_file_cached", _offline)
    with pytest.raises(ResourceError, match="network unreachable"):
        load_gpt3_tables()


def test_load_gpt3_tables_rejects_malformed_merges(resource_dir):
    """A broken merge file aborts loading."""
    (resource_dir / "vocab.bpe").write_text("#v\na b c\n", encoding="utf-8")
    with pytest.raises(ResourceError):
        load_gpt3_tables(resource_dir)
