"""gptok: byte-level BPE tokenization for the GPT-2/GPT-3 vocabulary."""

from .byte_map import bytes_to_unicode, unicode_to_bytes
from .cache import BpeCache
from .errors import (
    ConfigError,
    GptokError,
    PatternError,
    ResourceError,
    TokenizationError,
    TokenLimitError,
    VocabularyError,
)
from .limits import ensure_within_limit, validate_max_tokens
from .partition import PartitioningOptions, TextPartitioner
from .pattern import TokenPattern
from .pretokenize import Pretokenizer
from .tokenizer import Tokenizer, count_tokens, encode, get_tokenizer
from .vocab import (
    VocabularyTables,
    load_gpt3_tables,
    load_merge_ranks,
    load_vocabulary,
    parse_merge_ranks,
    parse_vocabulary,
)

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gptok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "Pretokenizer",
    "TokenPattern",
    "BpeCache",
    "VocabularyTables",
    "PartitioningOptions",
    "TextPartitioner",
    "GptokError",
    "ResourceError",
    "VocabularyError",
    "TokenizationError",
    "PatternError",
    "ConfigError",
    "TokenLimitError",
    "get_tokenizer",
    "encode",
    "count_tokens",
    "bytes_to_unicode",
    "unicode_to_bytes",
    "load_gpt3_tables",
    "load_vocabulary",
    "load_merge_ranks",
    "parse_vocabulary",
    "parse_merge_ranks",
    "validate_max_tokens",
    "ensure_within_limit",
]
