"""
Loading of the token table and merge-rank table.

Two resources define a byte-level BPE vocabulary:

- ``encoder.json``: a JSON object mapping each token string (written in
  byte-table characters) to its integer id.
- ``vocab.bpe``: a header line followed by one merge rule per line, two
  whitespace separated symbols each. A rule's rank is its position among the
  data lines, so earlier rules merge first.

Both tables are validated completely before use, and every problem is fatal.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from tiktoken.load import read_file_cached

from . import _config
from ._decorators import measure_time
from .byte_map import bytes_to_unicode
from .errors import ResourceError
from .types import MergeRanks, TokenPair, Vocabulary

log = logging.getLogger(__name__)

ENCODER_FILENAME = "encoder.json"
MERGES_FILENAME = "vocab.bpe"

# official r50k_base files, also used by tiktoken's "gpt2" encoding
GPT3_ENCODER_URL = "https://openaipublic.blob.core.windows.net/gpt-2/encodings/main/encoder.json"
GPT3_MERGES_URL = "https://openaipublic.blob.core.windows.net/gpt-2/encodings/main/vocab.bpe"


@dataclass(frozen=True)
class VocabularyTables:
    """Immutable pair of tables a tokenizer is built from."""

    vocab: Vocabulary
    ranks: MergeRanks


def parse_vocabulary(data: str | bytes, source: str | None = None) -> Vocabulary:
    """
    Parse a serialized token table.

    :param data: JSON text of a ``{token: id}`` object.
    :param source: Where the data came from, for error messages.
    :returns: Read-only token -> id mapping.
    :raises ResourceError: If the structure is malformed or a byte token is missing.
    """
    try:
        obj = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResourceError(f"malformed token table: {e}", resource_path=source) from e

    if not isinstance(obj, dict):
        raise ResourceError("token table must be a JSON object", resource_path=source)

    for tok, tok_id in obj.items():
        # bool is an int subclass, reject it explicitly
        if not isinstance(tok_id, int) or isinstance(tok_id, bool) or tok_id < 0:
            raise ResourceError(
                f"token {tok!r} has invalid id {tok_id!r}", resource_path=source
            )

    # every single byte must be encodable on its own
    missing = [c for c in bytes_to_unicode().values() if c not in obj]
    if missing:
        raise ResourceError(
            f"token table lacks {len(missing)} byte tokens (first: {missing[0]!r})",
            resource_path=source,
        )

    log.debug(f"parsed {len(obj)} vocabulary entries")
    return MappingProxyType(obj)


def parse_merge_ranks(data: str | bytes, source: str | None = None) -> MergeRanks:
    """
    Parse a merge list into pair ranks.

    The first line is a header and is skipped, as are blank lines.

    :param data: Text of the merge list.
    :param source: Where the data came from, for error messages.
    :returns: Read-only pair -> rank mapping, rank 0 merging first.
    :raises ResourceError: If a line does not hold exactly two symbols or a pair repeats.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ResourceError("merge list is not valid UTF-8", resource_path=source) from e

    ranks: dict[TokenPair, int] = {}
    lines = data.split("\n")
    # line numbers are 1-based and include the header
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        parts = line.split()
        if len(parts) != 2:
            raise ResourceError(
                f"merge rule must hold two symbols: {line.strip()!r}",
                resource_path=source,
                line_no=line_no,
            )
        pair: TokenPair = (parts[0], parts[1])
        if pair in ranks:
            raise ResourceError(
                f"duplicate merge rule: {line.strip()!r}",
                resource_path=source,
                line_no=line_no,
            )
        ranks[pair] = len(ranks)

    log.debug(f"parsed {len(ranks)} merge rules")
    return MappingProxyType(ranks)


def _read_file(path: Path) -> bytes:
    """Read a local resource, wrapping I/O failures."""
    if not path.is_file():
        raise ResourceError("resource file does not exist", resource_path=str(path))
    try:
        return path.read_bytes()
    except OSError as e:
        raise ResourceError(f"cannot read resource: {e}", resource_path=str(path)) from e


def load_vocabulary(path: str | Path) -> Vocabulary:
    """Load a token table from a local ``encoder.json`` style file."""
    path = Path(path)
    return parse_vocabulary(_read_file(path), source=str(path))


def load_merge_ranks(path: str | Path) -> MergeRanks:
    """Load merge ranks from a local ``vocab.bpe`` style file."""
    path = Path(path)
    return parse_merge_ranks(_read_file(path), source=str(path))


def _fetch(url: str) -> bytes:
    """Download a resource through tiktoken's blob cache."""
    try:
        return read_file_cached(url)
    except Exception as e:
        raise ResourceError(f"cannot fetch resource: {e}", resource_path=url) from e


@measure_time("loading gpt-3 vocabulary")
def load_gpt3_tables(resource_dir: str | Path | None = None) -> VocabularyTables:
    """
    Load the GPT-2/GPT-3 token table and merge ranks.

    Local files are used when ``resource_dir`` (or ``GPTOK_RESOURCE_DIR``) is
    set. Otherwise the official files are downloaded once and kept in
    tiktoken's cache directory.

    :raises ResourceError: If either resource is missing, unreadable or malformed.
    """
    directory = Path(resource_dir) if resource_dir is not None else _config.resource_dir()

    if directory is not None:
        log.info(f"loading vocabulary from {directory}")
        vocab = load_vocabulary(directory / ENCODER_FILENAME)
        ranks = load_merge_ranks(directory / MERGES_FILENAME)
    else:
        log.info("loading vocabulary from openai public blob storage")
        vocab = parse_vocabulary(_fetch(GPT3_ENCODER_URL), source=GPT3_ENCODER_URL)
        ranks = parse_merge_ranks(_fetch(GPT3_MERGES_URL), source=GPT3_MERGES_URL)

    log.info(f"vocabulary loaded: {len(vocab)} tokens, {len(ranks)} merge rules")
    return VocabularyTables(vocab=vocab, ranks=ranks)
