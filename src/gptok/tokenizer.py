"""
Byte-level BPE tokenizer facade.

Text flows one way through the pipeline::

    text -> chunks -> byte-mapped strings -> merged sub-tokens -> ids
"""

import logging
import os
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType

from . import _config
from ._bpe import BytePairEncoder
from ._sanitise import _render_token
from .byte_map import decode_chars, encode_bytes
from .cache import BpeCache
from .errors import GptokError, ResourceError, VocabularyError
from .pattern import TokenPattern
from .pretokenize import Pretokenizer
from .types import MergeRanks, Token, Vocabulary
from .vocab import (
    VocabularyTables,
    load_gpt3_tables,
    load_merge_ranks,
    load_vocabulary,
)

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Encode text into the token ids of a fixed byte-level BPE vocabulary.

    The vocabulary, merge ranks and byte table never change after
    construction. The only mutable state is the BPE cache, which tolerates
    concurrent writers, so a single instance can be shared across threads.
    """

    def __init__(
        self,
        vocab: Vocabulary,
        ranks: MergeRanks,
        pattern: str = TokenPattern.GPT2,
        cache_size: int | None | object = _config.UNSET,
        timeout: float | None | object = _config.UNSET,
    ) -> None:
        """
        :param vocab: Token string -> id mapping.
        :param ranks: Merge pair -> rank mapping.
        :param pattern: Pretokenizer split pattern.
        :param cache_size: BPE cache capacity, ``None`` for unbounded.
                           Defaults to ``GPTOK_BPE_CACHE_SIZE``.
        :param timeout: Pretokenizer timeout in seconds, ``None`` to disable.
                        Defaults to ``GPTOK_PRETOKENIZE_TIMEOUT``.
        """
        if cache_size is _config.UNSET:
            cache_size = _config.bpe_cache_size()

        self.vocab: Vocabulary = MappingProxyType(dict(vocab))
        # id -> token string, for decoding
        self.decoder: dict[Token, str] = {tok_id: tok for tok, tok_id in self.vocab.items()}
        self.ranks: MergeRanks = MappingProxyType(dict(ranks))
        self.pretokenizer = Pretokenizer(pattern, timeout=timeout)
        self.bpe = BytePairEncoder(self.ranks, BpeCache(cache_size))  # type: ignore[arg-type]

        log.debug(
            f"tokenizer ready: {len(self.vocab)} tokens, {len(self.ranks)} merge rules, "
            f"cache capacity {self.bpe.cache.capacity or 'unbounded'}"
        )

    @classmethod
    def from_tables(cls, tables: VocabularyTables, **kwargs) -> "Tokenizer":
        """Build a tokenizer from already loaded tables."""
        return cls(tables.vocab, tables.ranks, **kwargs)

    @classmethod
    def from_files(
        cls, encoder_path: str | Path, merges_path: str | Path, **kwargs
    ) -> "Tokenizer":
        """
        Build a tokenizer from local resource files.

        :param encoder_path: Path to an ``encoder.json`` style token table.
        :param merges_path: Path to a ``vocab.bpe`` style merge list.
        :raises ResourceError: If either file is missing or malformed.
        """
        return cls(load_vocabulary(encoder_path), load_merge_ranks(merges_path), **kwargs)

    def encode(self, text: str | None) -> list[Token]:
        """
        Encode text into a sequence of token ids.

        :param text: Text to encode. ``None`` and ``""`` give ``[]``.
        :raises VocabularyError: If a merged sub-token has no vocabulary entry.
        :raises TokenizationError: If pretokenization times out.
        """
        return list(self._iter_ids(text))

    def count_tokens(self, text: str | None) -> int:
        """Return ``len(self.encode(text))`` without building the id list."""
        return sum(1 for _ in self._iter_ids(text))

    def encode_batch(
        self, texts: list[str], num_workers: int | None = None
    ) -> list[list[Token]]:
        """
        Encode many texts, in parallel when more than one worker is available.

        :param texts: Text inputs to encode.
        :param num_workers: Thread count, defaults to the cpu count.
        :returns: Encoded token sequences in input order.
        """
        if not texts:
            return []

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)  # "0" interpreted as 1 worker

        if workers == 1 or len(texts) == 1:
            return [self.encode(text) for text in texts]

        # map keeps input order
        with ThreadPoolExecutor(max_workers=min(workers, len(texts))) as pool:
            return list(pool.map(self.encode, texts))

    def decode_bytes(self, tokens: list[Token]) -> bytes:
        """
        Map token ids back to the exact bytes they were encoded from.

        :raises VocabularyError: If any id is not in the vocabulary.
        """
        chars = []
        for tok in tokens:
            try:
                chars.append(self.decoder[tok])
            except KeyError:
                raise VocabularyError("token not found in vocabulary", invalid_tok=tok)

        return decode_chars("".join(chars))

    def decode(self, tokens: list[Token], errors: str = "replace") -> str:
        """
        Decode token ids back into text.

        :param errors: How to handle invalid UTF-8, passed to ``bytes.decode``.
        :raises VocabularyError: If any id is not in the vocabulary.
        """
        return self.decode_bytes(tokens).decode("utf-8", errors=errors)

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self.vocab)

    def cache_len(self) -> int:
        """Return the number of memoized chunks."""
        return len(self.bpe.cache)

    def _iter_ids(self, text: str | None) -> Iterator[Token]:
        if not text:
            return

        vocab = self.vocab
        for chunk in self.pretokenizer.split(text):
            # surrogatepass keeps lone surrogates encodable instead of raising
            token = encode_bytes(chunk.encode("utf-8", "surrogatepass"))
            for piece in self.bpe.encode_chunk(token).split(" "):
                try:
                    yield vocab[piece]
                except KeyError:
                    raise VocabularyError(
                        "merged sub-token not found in vocabulary",
                        invalid_tok=_render_token(piece),
                    )


# Default tokenizer
# ===================================================================================

_default: Tokenizer | None = None
_default_error: GptokError | None = None
_default_lock = threading.Lock()


def get_tokenizer() -> Tokenizer:
    """
    Return the shared GPT-3 tokenizer, building it on first use.

    Exactly one build happens even when many threads race on the first call.
    A failed build is not retried: later calls raise a ``ResourceError``
    chained to the original failure.

    :raises ResourceError: If the vocabulary resources cannot be loaded.
    """
    global _default, _default_error
    if _default is not None:
        return _default

    with _default_lock:
        if _default is None:
            if _default_error is not None:
                raise ResourceError(
                    "default tokenizer failed to load earlier"
                ) from _default_error
            try:
                _default = Tokenizer.from_tables(load_gpt3_tables())
            except GptokError as e:
                _default_error = e
                raise
    return _default


def encode(text: str | None) -> list[Token]:
    """Encode ``text`` with the shared GPT-3 tokenizer."""
    return get_tokenizer().encode(text)


def count_tokens(text: str | None) -> int:
    """Count the tokens of ``text`` with the shared GPT-3 tokenizer."""
    return get_tokenizer().count_tokens(text)
