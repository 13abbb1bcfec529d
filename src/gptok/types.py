"""
Core types for tokenization.
"""

from collections.abc import Mapping
from typing import TypeAlias

Token: TypeAlias = int
TokenPair: TypeAlias = tuple[str, str]
Vocabulary: TypeAlias = Mapping[str, Token]
MergeRanks: TypeAlias = Mapping[TokenPair, int]
ByteTable: TypeAlias = Mapping[int, str]
