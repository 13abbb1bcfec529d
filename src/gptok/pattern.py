from enum import Enum

from .errors import PatternError


class TokenPattern(str, Enum):
    """
    Pre-defined regex patterns for splitting text before BPE.

    Source: https://github.com/openai/tiktoken/blob/main/tiktoken_ext/openai_public.py
    """

    # OpenAI r50k_base, shared by GPT-2 and the GPT-3 model family
    GPT2 = (
        r"'s|'t|'re|'ve|'m|'ll|'d|"
        r" ?\p{L}+|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )
    GPT3 = GPT2
    R50K = GPT2

    @classmethod
    def get(cls, name: str) -> str:
        """Get patterns by name (case-insensitive)."""
        try:
            return cls[name.upper().replace("-", "_")].value
        except KeyError:
            raise PatternError(
                f"Unknown pattern: {name!r}. "
                f"Valid patterns: {', '.join(cls.__members__)}"
            )
