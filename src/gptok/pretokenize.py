"""Regex-driven segmentation of raw text into BPE chunks."""

import logging

import regex as re

from . import _config
from .errors import PatternError, TokenizationError
from .pattern import TokenPattern

log = logging.getLogger(__name__)


class Pretokenizer:
    """
    Split text into the ordered chunks that BPE runs on independently.

    Matching follows the alternation order of the pattern: contractions,
    letter runs, digit runs, symbol runs (each with an optional leading
    space), trailing whitespace, then any other whitespace run.
    """

    def __init__(
        self,
        pattern: str = TokenPattern.GPT2,
        timeout: float | None | object = _config.UNSET,
    ) -> None:
        """
        :param pattern: Split pattern, ``regex`` syntax.
        :param timeout: Seconds allowed per ``split`` call. ``None`` disables
                        the guard, as does any value <= 0. Defaults to
                        ``GPTOK_PRETOKENIZE_TIMEOUT``.
        """
        self.pat: str = pattern.value if isinstance(pattern, TokenPattern) else pattern
        self.compiled_pat: re.Pattern[str] = _compile_pattern(self.pat)
        if timeout is _config.UNSET:
            timeout = _config.pretokenize_timeout()
        # zero or negative disables the guard, same as the environment setting
        self.timeout: float | None = timeout if timeout is None or timeout > 0 else None

    def split(self, text: str) -> list[str]:
        """
        Split ``text`` into chunks.

        The chunks are gap free and non-overlapping, so ``"".join(chunks) == text``.

        :raises TokenizationError: If matching exceeds the timeout.
        """
        try:
            return self.compiled_pat.findall(text, timeout=self.timeout)
        except TimeoutError as e:
            log.warning(f"pretokenization timed out after {self.timeout} s")
            raise TokenizationError(
                "pretokenization timed out", input_len=len(text)
            ) from e


def _compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile and validate a regex pattern.

    :param pattern: Regex pattern string to compile.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e)
