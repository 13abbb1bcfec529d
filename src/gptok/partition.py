"""
Token-aware splitting of plain text into lines and overlapping paragraphs.

Used to size document partitions before they are embedded or sent to a model.
Budgets are measured with a token counter, the shared GPT-3 tokenizer's
``count_tokens`` unless another one is supplied.
"""

import logging
from dataclasses import dataclass
from typing import Callable, TypeAlias

from .errors import ConfigError
from .tokenizer import get_tokenizer

log = logging.getLogger(__name__)

TokenCounter: TypeAlias = Callable[[str], int]

# tried in order when a line is over budget, coarsest first
_SEPARATORS: tuple[str, ...] = (". ", "! ", "? ", "; ", ": ", ", ", " ")


@dataclass
class PartitioningOptions:
    """Token budgets for :class:`TextPartitioner`."""

    max_tokens_per_line: int = 300
    max_tokens_per_paragraph: int = 1000
    overlapping_tokens: int = 100

    def validate(self) -> None:
        """
        Check that the budgets are consistent.

        :raises ConfigError: If any budget is out of range.
        """
        if self.max_tokens_per_paragraph < 1:
            raise ConfigError(
                "paragraph budget must be at least 1",
                name="max_tokens_per_paragraph",
                value=self.max_tokens_per_paragraph,
            )
        if self.max_tokens_per_line < 1:
            raise ConfigError(
                "line budget must be at least 1",
                name="max_tokens_per_line",
                value=self.max_tokens_per_line,
            )
        if self.overlapping_tokens < 0:
            raise ConfigError(
                "overlap must not be negative",
                name="overlapping_tokens",
                value=self.overlapping_tokens,
            )
        if self.max_tokens_per_line > self.max_tokens_per_paragraph:
            raise ConfigError(
                "line budget must not exceed paragraph budget",
                name="max_tokens_per_line",
                value=self.max_tokens_per_line,
            )
        if self.overlapping_tokens >= self.max_tokens_per_paragraph:
            raise ConfigError(
                "overlap must be smaller than paragraph budget",
                name="overlapping_tokens",
                value=self.overlapping_tokens,
            )


class TextPartitioner:
    """Split text into lines, then pack lines into overlapping paragraphs."""

    def __init__(
        self,
        options: PartitioningOptions | None = None,
        token_counter: TokenCounter | None = None,
    ) -> None:
        self.options = options if options is not None else PartitioningOptions()
        self.options.validate()
        self._token_counter = token_counter

    def count(self, text: str) -> int:
        """Count tokens with the configured counter."""
        # the default vocabulary loads on first count, not at construction
        counter = self._token_counter or get_tokenizer().count_tokens
        return counter(text)

    def split(self, text: str) -> list[str]:
        """Split ``text`` into paragraphs within the paragraph budget."""
        return self.split_paragraphs(self.split_lines(text))

    def split_lines(self, text: str) -> list[str]:
        """
        Split ``text`` on newlines and break up lines over the line budget.

        Blank lines are dropped and the remaining lines are stripped.
        """
        lines: list[str] = []
        for raw in text.replace("\r\n", "\n").split("\n"):
            line = raw.strip()
            if line:
                lines.extend(self._split_line(line, 0))
        log.debug(f"split text into {len(lines)} lines")
        return lines

    def split_paragraphs(self, lines: list[str]) -> list[str]:
        """
        Pack lines into paragraphs.

        Each paragraph holds at most ``max_tokens_per_paragraph -
        overlapping_tokens`` tokens of its own lines. Every paragraph after
        the first is prefixed with the trailing words of its predecessor.
        """
        opts = self.options
        budget = opts.max_tokens_per_paragraph - opts.overlapping_tokens
        paragraphs = self._pack(lines, budget, joiner="\n")

        if opts.overlapping_tokens == 0 or len(paragraphs) < 2:
            return paragraphs

        result = [paragraphs[0]]
        for prev, para in zip(paragraphs, paragraphs[1:]):
            overlap = self._tail(prev, opts.overlapping_tokens)
            result.append(f"{overlap} {para}" if overlap else para)

        log.debug(f"packed {len(lines)} lines into {len(result)} paragraphs")
        return result

    def _split_line(self, line: str, sep_idx: int) -> list[str]:
        max_tokens = self.options.max_tokens_per_line
        if self.count(line) <= max_tokens:
            return [line]

        for idx in range(sep_idx, len(_SEPARATORS)):
            pieces = _split_keep(line, _SEPARATORS[idx])
            if len(pieces) < 2:
                continue
            out: list[str] = []
            for packed in self._pack(pieces, max_tokens, joiner=""):
                packed = packed.strip()
                if packed:
                    # a single piece can still be over budget
                    out.extend(self._split_line(packed, idx + 1))
            return out

        # no separator left: halve by characters
        if len(line) < 2:
            return [line]
        mid = len(line) // 2
        return self._split_line(line[:mid], len(_SEPARATORS)) + self._split_line(
            line[mid:], len(_SEPARATORS)
        )

    def _pack(self, pieces: list[str], max_tokens: int, joiner: str) -> list[str]:
        """Greedily join consecutive pieces while the result stays in budget."""
        packed: list[str] = []
        current = ""
        for piece in pieces:
            candidate = f"{current}{joiner}{piece}" if current else piece
            if current and self.count(candidate) > max_tokens:
                packed.append(current)
                current = piece
            else:
                current = candidate
        if current:
            packed.append(current)
        return packed

    def _tail(self, text: str, max_tokens: int) -> str:
        """Return the longest run of trailing words within ``max_tokens``."""
        words = text.split()
        tail = ""
        for i in range(len(words) - 1, -1, -1):
            candidate = " ".join(words[i:])
            if self.count(candidate) > max_tokens:
                break
            tail = candidate
        return tail


def _split_keep(text: str, sep: str) -> list[str]:
    """Split on ``sep`` and keep it at the end of each piece."""
    parts = text.split(sep)
    pieces = [part + sep for part in parts[:-1]] + [parts[-1]]
    return [piece for piece in pieces if piece]
