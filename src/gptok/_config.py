"""Environment driven settings for gptok."""

import os
from pathlib import Path

from .errors import ConfigError

RESOURCE_DIR_ENV = "GPTOK_RESOURCE_DIR"
CACHE_SIZE_ENV = "GPTOK_BPE_CACHE_SIZE"
TIMEOUT_ENV = "GPTOK_PRETOKENIZE_TIMEOUT"

# upper bound for a single pretokenizer pass, in seconds
DEFAULT_TIMEOUT: float = 5.0

# default argument marker: "read the setting from the environment"
UNSET = object()


def resource_dir() -> Path | None:
    """Return the local directory holding encoder.json and vocab.bpe, if configured."""
    raw = os.environ.get(RESOURCE_DIR_ENV, "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def bpe_cache_size() -> int | None:
    """
    Return the configured BPE cache capacity.

    ``None`` means the cache grows without bound.
    """
    raw = os.environ.get(CACHE_SIZE_ENV, "").strip()
    if not raw:
        return None
    try:
        size = int(raw)
    except ValueError:
        raise ConfigError("cache size must be an integer", name=CACHE_SIZE_ENV, value=raw)
    if size < 0:
        raise ConfigError("cache size must not be negative", name=CACHE_SIZE_ENV, value=raw)
    return size or None


def pretokenize_timeout() -> float | None:
    """
    Return the regex timeout for pretokenization.

    ``None`` disables the guard.
    """
    raw = os.environ.get(TIMEOUT_ENV, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError("timeout must be a number", name=TIMEOUT_ENV, value=raw)
    return timeout if timeout > 0 else None
