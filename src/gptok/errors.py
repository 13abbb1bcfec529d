"""Custom exception hierarchy for gptok tokenization errors."""

import regex as re


class GptokError(Exception):
    """Base exception for all gptok errors."""


class ResourceError(GptokError):
    """Raised when the vocabulary or merge-rank resources cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        resource_path: str | None = None,
        line_no: int | None = None,
    ) -> None:
        """Initialize with optional resource path and line number appended to the message."""
        extra = " "
        if resource_path:
            extra += f"(path: {resource_path}) "
        if line_no is not None:
            extra += f"(line: {line_no}) "
        super().__init__((message + extra).rstrip())
        self.resource_path = resource_path
        self.line_no = line_no


class VocabularyError(GptokError):
    """Raised when a token or id has no entry in the loaded vocabulary."""

    def __init__(
        self,
        message: str,
        *,
        invalid_tok: str | int | None = None,
    ) -> None:
        """Initialize with the offending token or id appended to the message."""
        extra = " "
        # encoding: merged sub-token missing from vocab
        # decoding: id missing from inverted vocab
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok!r}) "
        super().__init__((message + extra).rstrip())
        self.invalid_tok = invalid_tok


class TokenizationError(GptokError):
    """Raised when tokenization fails."""

    def __init__(self, message: str, *, input_len: int | None = None) -> None:
        extra = " "
        if input_len is not None:
            extra += f"(input length: {input_len}) "
        super().__init__((message + extra).rstrip())
        self.input_len = input_len


class PatternError(GptokError):
    """Raised when compiling and/or validating regex patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__((message + extra).rstrip())
        self.pattern = pattern
        self.regex_err = regex_err


class ConfigError(GptokError):
    """Raised when a configuration value or option is invalid."""

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        value: object = None,
    ) -> None:
        extra = " "
        if name:
            extra += f"(name: {name}) "
        if value is not None:
            extra += f"(got {value!r}) "
        super().__init__((message + extra).rstrip())
        self.name = name
        self.value = value


class TokenLimitError(GptokError):
    """Raised when text needs more tokens than a request allows."""

    def __init__(self, message: str, *, token_count: int, max_tokens: int) -> None:
        super().__init__(f"{message} (tokens: {token_count}) (max: {max_tokens})")
        self.token_count = token_count
        self.max_tokens = max_tokens
