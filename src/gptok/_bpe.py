"""
Core Byte Pair Encoding (BPE) operations.
"""

import logging
import math

from .cache import BpeCache
from .types import MergeRanks, TokenPair

log = logging.getLogger(__name__)

# rank given to pairs with no merge rule, above every real rank
UNRANKED = math.inf


def get_pairs(symbols: list[str]) -> list[TokenPair]:
    """Return adjacent symbol pairs in left-to-right order."""
    return list(zip(symbols, symbols[1:]))


def bpe_merge(symbols: list[str], target: TokenPair) -> list[str]:
    """
    Merge all occurrences of a target pair into a single symbol.

    Occurrences are merged leftmost first and never overlap, so ``a a a``
    merged on ``(a, a)`` becomes ``aa a``.
    """
    merged: list[str] = []

    i = 0
    n = len(symbols)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and symbols[i] == target[0] and symbols[i + 1] == target[1]:
            merged.append(symbols[i] + symbols[i + 1])
            i += 2
        else:
            merged.append(symbols[i])
            i += 1

    return merged


class BytePairEncoder:
    """
    Reduce byte-mapped chunks to vocabulary sub-tokens by rank-ordered merging.

    Results are memoized in a :class:`BpeCache`. The encoder holds no other
    mutable state, so one instance can serve any number of threads.
    """

    def __init__(self, ranks: MergeRanks, cache: BpeCache | None = None) -> None:
        # pair -> merge priority, lower merges first
        self.ranks = ranks
        self.cache = cache if cache is not None else BpeCache()

    def encode_chunk(self, token: str) -> str:
        """
        Apply BPE merges to one byte-mapped chunk.

        :param token: Chunk with one byte-table character per original byte.
        :returns: Merged sub-tokens joined by single spaces.
        """
        cached = self.cache.get(token)
        if cached is not None:
            return cached

        word = list(token)
        pairs = get_pairs(word)
        # single symbol chunk: nothing to merge
        if not pairs:
            return self.cache.put(token, token)

        ranks = self.ranks
        while True:
            # min() keeps the first of several equal ranks, so the leftmost
            # pair wins a tie
            bigram = min(pairs, key=lambda pair: ranks.get(pair, UNRANKED))
            # lowest pair has no rule: nothing left to merge
            if bigram not in ranks:
                break

            word = bpe_merge(word, bigram)
            if len(word) == 1:
                break
            pairs = get_pairs(word)

        return self.cache.put(token, " ".join(word))
