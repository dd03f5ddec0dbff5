from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, Optional


class CandidateKey(NamedTuple):
    """A guessed key byte and the histogram entry it was derived from."""

    key: int
    source_byte: int
    count: int


@dataclass(frozen=True, slots=True)
class ScoredDecryption:
    """One candidate decryption and its English-likeness score."""

    text: str
    score: int
    key: int
    plaintext: bytes = b""

    def __iter__(self):
        # Unpacks as the (text, score) pair.
        return iter((self.text, self.score))


@dataclass(frozen=True, slots=True)
class LineResult:
    """Outcome of cracking one line of a batch. Exactly one of result/error is set."""

    line_number: int
    line: str
    result: Optional[ScoredDecryption] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("LineResult needs exactly one of result or error")

    @property
    def ok(self) -> bool:
        return self.result is not None
