"""Token budget checks for callers sizing model requests."""

import logging

from .errors import ConfigError, TokenLimitError
from .tokenizer import Tokenizer, get_tokenizer

log = logging.getLogger(__name__)


def validate_max_tokens(max_tokens: int | None) -> None:
    """
    Check a request's token budget.

    :raises ConfigError: If ``max_tokens`` is set and below 1.
    """
    if max_tokens is not None and max_tokens < 1:
        raise ConfigError(
            "max tokens must be greater than zero", name="max_tokens", value=max_tokens
        )


def ensure_within_limit(
    text: str | None, max_tokens: int, tokenizer: Tokenizer | None = None
) -> int:
    """
    Count the tokens of ``text`` and check them against ``max_tokens``.

    :param tokenizer: Tokenizer to count with, the shared GPT-3 one by default.
    :returns: The token count.
    :raises ConfigError: If ``max_tokens`` is below 1.
    :raises TokenLimitError: If the text needs more than ``max_tokens`` tokens.
    """
    validate_max_tokens(max_tokens)
    tok = tokenizer if tokenizer is not None else get_tokenizer()

    n_tokens = tok.count_tokens(text)
    if n_tokens > max_tokens:
        raise TokenLimitError(
            "text exceeds token limit", token_count=n_tokens, max_tokens=max_tokens
        )
    log.debug(f"text uses {n_tokens}/{max_tokens} tokens")
    return n_tokens
