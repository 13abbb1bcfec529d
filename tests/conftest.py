"""Shared fixtures: a small synthetic vocabulary and the real GPT-3 one."""

import json

import pytest

import gptok
from gptok.byte_map import bytes_to_unicode

# merge rules of the toy vocabulary, in rank order
TOY_MERGES: list[tuple[str, str]] = [
    ("h", "e"),
    ("l", "l"),
    ("he", "ll"),
    ("hell", "o"),
    ("Ġ", "w"),
    ("o", "r"),
    ("Ġw", "or"),
    ("l", "d"),
    ("Ġwor", "ld"),
]


def base_vocab() -> dict[str, int]:
    """Return a vocabulary holding only the 256 byte tokens, id == byte value."""
    return {char: b for b, char in bytes_to_unicode().items()}


def build_tables(
    merges: list[tuple[str, str]],
) -> tuple[dict[str, int], dict[tuple[str, str], int]]:
    """Return (vocab, ranks) with merged tokens numbered from 256 in rank order."""
    vocab = base_vocab()
    ranks = {}
    for rank, pair in enumerate(merges):
        ranks[pair] = rank
        vocab["".join(pair)] = 256 + rank
    return vocab, ranks


def write_resources(directory, merges: list[tuple[str, str]]) -> None:
    """Write encoder.json and vocab.bpe for ``merges`` into ``directory``."""
    vocab, _ = build_tables(merges)
    (directory / "encoder.json").write_text(json.dumps(vocab), encoding="utf-8")
    lines = ["#version: 0.2"] + [f"{a} {b}" for a, b in merges]
    (directory / "vocab.bpe").write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def toy_tables():
    """Return the (vocab, ranks) pair of the toy vocabulary."""
    return build_tables(TOY_MERGES)


@pytest.fixture
def toy_tokenizer(toy_tables):
    """Return a Tokenizer over the toy vocabulary."""
    vocab, ranks = toy_tables
    return gptok.Tokenizer(vocab, ranks, cache_size=None, timeout=None)


@pytest.fixture
def resource_dir(tmp_path):
    """Return a directory with toy encoder.json and vocab.bpe files."""
    write_resources(tmp_path, TOY_MERGES)
    return tmp_path


@pytest.fixture(scope="session")
def gpt3_tokenizer():
    """Return a Tokenizer over the real GPT-3 vocabulary, skipping if unavailable."""
    try:
        tables = gptok.load_gpt3_tables()
    except gptok.ResourceError as e:
        pytest.skip(f"gpt-3 vocabulary unavailable: {e}")
    return gptok.Tokenizer.from_tables(tables)
