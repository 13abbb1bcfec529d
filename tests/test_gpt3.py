"""Reference tests against the real GPT-2/GPT-3 vocabulary.

Skipped when the vocabulary files can be neither read from
``GPTOK_RESOURCE_DIR`` nor downloaded.
"""

import pytest

CORPUS = [
    "Hello world",
    "The quick brown fox jumps over the lazy dog.",
    "I'm sure they'll say it's fine, we've done it before.",
    "Numbers: 3.14159, 2024, 1,000,000 and -42",
    "你好，世界！这是一个测试。",
    "日本語のテキストと한국어 텍스트",
    "emoji 🎉👋🏽 and flags 🇺🇳 🏳️‍🌈",
    "mixed   spacing\tand\nnew\n\nlines  ",
    "def f(x):\n    return x ** 2  # square\n",
    "<|endoftext|> is plain text here",
]


def test_reference_vector(gpt3_tokenizer):
    """'Hello world' encodes to the well-known ids."""
    assert gpt3_tokenizer.encode("Hello world") == [15496, 995]
    assert gpt3_tokenizer.count_tokens("Hello world") == 2


def test_vocabulary_shape(gpt3_tokenizer):
    """The r50k vocabulary has 50257 tokens and 50000 merges."""
    assert gpt3_tokenizer.vocab_size() == 50257
    assert len(gpt3_tokenizer.ranks) == 50000


@pytest.mark.parametrize("text", CORPUS)
def test_count_and_round_trip(gpt3_tokenizer, text):
    """Counts match encode length and ids decode to the input."""
    ids = gpt3_tokenizer.encode(text)
    assert gpt3_tokenizer.count_tokens(text) == len(ids)
    assert gpt3_tokenizer.decode(ids) == text
    assert all(0 <= i < 50257 for i in ids)


@pytest.fixture(scope="module")
def tiktoken_gpt2():
    """Return tiktoken's gpt2 encoding, skipping if it cannot be loaded."""
    tiktoken = pytest.importorskip("tiktoken")
    try:
        return tiktoken.get_encoding("gpt2")
    except Exception as e:
        pytest.skip(f"tiktoken gpt2 encoding unavailable: {e}")


@pytest.mark.parametrize("text", CORPUS)
def test_matches_tiktoken(gpt3_tokenizer, tiktoken_gpt2, text):
    """Ids agree with tiktoken's gpt2 encoding."""
    assert gpt3_tokenizer.encode(text) == tiktoken_gpt2.encode_ordinary(text)
