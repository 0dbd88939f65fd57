# errors.py
# Exception types and recoverable diagnostics for the tokenizer.

from dataclasses import dataclass
from typing import List


class BPEError(Exception):
    """Base class for every error raised by charbpe."""


class TokenNotFoundError(BPEError, KeyError):
    def __init__(self, token_id: int):
        self.token_id = token_id
        super().__init__(token_id)

    def __str__(self) -> str:
        return f"Token ID {self.token_id} not found in vocab."


class MissingCharactersError(BPEError, ValueError):
    """A word holds characters that have no vocabulary entry. Recoverable during encode."""

    def __init__(self, word: str, missing: List[str]):
        self.word = word
        self.missing = missing
        super().__init__(f"Characters not found in vocab: {missing}")


class InvalidVocabSizeError(BPEError, ValueError):
    def __init__(self, vocab_size: int):
        self.vocab_size = vocab_size
        super().__init__(f"vocab_size must be positive, got {vocab_size}")


class InvalidDocumentError(BPEError, ValueError):
    """A persisted vocabulary or merges document has the wrong shape."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


@dataclass(frozen=True)
class SkippedMerge:
    # line is 1-based within the merges document (after any header)
    line: int
    entry: str
    reason: str

    def __str__(self) -> str:
        return f"merge {self.line} ({self.entry}): {self.reason}"
