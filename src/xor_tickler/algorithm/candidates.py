from typing import Iterable, List, Tuple

from xor_tickler.algorithm.histogram import Histogram
from xor_tickler.errors import InsufficientHistogramData
from xor_tickler.models.candidates import CandidateKey


def rank_histogram(hist: Histogram) -> List[Tuple[int, int]]:
    """Order (byte, count) entries by count descending, then byte value ascending."""
    return sorted(hist.items(), key=lambda entry: (-entry[1], entry[0]))


def generate_candidates(letters: Iterable[int], hist: Histogram, rank_depth: int) -> List[CandidateKey]:
    """
    Guess single-byte keys by assuming each of the rank_depth + 1 most frequent
    ciphertext bytes is the encryption of one of the given letters.

    Candidates are letter-major, then rank-major.
    """
    if rank_depth < 0:
        raise ValueError("rank_depth must not be negative")

    wanted = rank_depth + 1
    if len(hist) <= wanted:
        raise InsufficientHistogramData(requested=wanted, available=len(hist))

    top_entries = rank_histogram(hist)[:wanted]

    candidates = []
    for letter in letters:
        for byte, count in top_entries:
            candidates.append(CandidateKey(letter ^ byte, byte, count))
    return candidates
