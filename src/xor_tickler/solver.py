from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from xor_tickler.algorithm.candidates import generate_candidates
from xor_tickler.algorithm.histogram import build_histogram
from xor_tickler.algorithm.scoring import score_english
from xor_tickler.algorithm.xor import xor_bytes
from xor_tickler.config import DEFAULT_RANK_DEPTH, ENG_FREQ_LETTERS
from xor_tickler.errors import InsufficientHistogramData, InvalidHexDigit
from xor_tickler.logs import get_logger
from xor_tickler.models.candidates import LineResult, ScoredDecryption
from xor_tickler.utils import bytes_to_str, decode_hex

log = get_logger(__name__)


def score_candidates(
    ciphertext: bytes,
    *,
    rank_depth: int = DEFAULT_RANK_DEPTH,
    letters: bytes = ENG_FREQ_LETTERS,
) -> List[ScoredDecryption]:
    """Decrypt and score the ciphertext with every candidate key, in generation order."""
    hist = build_histogram(ciphertext)
    candidates = generate_candidates(letters, hist, rank_depth)

    scored = []
    for candidate in candidates:
        maybe_decrypted = xor_bytes(ciphertext, bytes([candidate.key]))
        scored.append(ScoredDecryption(
            text=bytes_to_str(maybe_decrypted),
            score=score_english(maybe_decrypted),
            key=candidate.key,
            plaintext=maybe_decrypted,
        ))
    return scored


def pick_best(decryptions: Iterable[ScoredDecryption]) -> Optional[ScoredDecryption]:
    """Highest score wins; on a tie the earliest one is kept."""
    best = None
    for decryption in decryptions:
        if best is None or decryption.score > best.score:
            best = decryption
    return best


def crack_one(
    ciphertext: bytes,
    *,
    rank_depth: int = DEFAULT_RANK_DEPTH,
    letters: bytes = ENG_FREQ_LETTERS,
) -> ScoredDecryption:
    """
    Recover the plaintext of a single-byte XOR ciphertext.

    Raises InsufficientHistogramData when the ciphertext has too few distinct
    bytes for the requested rank depth.
    """
    best = pick_best(score_candidates(ciphertext, rank_depth=rank_depth, letters=letters))
    if best is None:
        raise ValueError("No candidate keys to try; letters must not be empty")
    log.debug("cracked", key=best.key, score=best.score, ciphertext_len=len(ciphertext))
    return best


def crack_best(
    ciphertexts: Sequence[bytes],
    *,
    rank_depth: int = DEFAULT_RANK_DEPTH,
    max_workers: Optional[int] = None,
) -> ScoredDecryption:
    """
    Crack every ciphertext and return the highest scoring decryption overall.
    A later ciphertext only replaces the current best with a strictly greater score.
    """
    if not ciphertexts:
        raise ValueError("crack_best needs at least one ciphertext")

    def crack(ciphertext: bytes) -> ScoredDecryption:
        return crack_one(ciphertext, rank_depth=rank_depth)

    if max_workers:
        # map() yields in input order, so the reduction below stays deterministic.
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(crack, ciphertexts))
    else:
        results = [crack(ciphertext) for ciphertext in ciphertexts]

    best = pick_best(results)
    log.info("best decryption", score=best.score, key=best.key, candidates=len(results))
    return best


def crack_lines(
    lines: Iterable[str],
    *,
    rank_depth: int = DEFAULT_RANK_DEPTH,
    skip_errors: bool = True,
    max_workers: Optional[int] = None,
) -> List[LineResult]:
    """
    Hex-decode and crack each line of a batch. Blank lines are ignored.

    With skip_errors, a malformed line is recorded as a failed LineResult and
    the batch continues; otherwise the first error (in line order) is raised.
    """
    numbered = [
        (line_number, line.strip())
        for line_number, line in enumerate(lines, start=1)
        if line.strip()
    ]

    def crack_line(numbered_line: Tuple[int, str]) -> LineResult:
        line_number, line = numbered_line
        try:
            decrypted = crack_one(decode_hex(line), rank_depth=rank_depth)
        except (InvalidHexDigit, InsufficientHistogramData) as e:
            if not skip_errors:
                raise
            log.warning("skipping line", line_number=line_number, error=str(e))
            return LineResult(line_number=line_number, line=line, error=str(e))
        return LineResult(line_number=line_number, line=line, result=decrypted)

    if max_workers:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(crack_line, numbered))
    return [crack_line(numbered_line) for numbered_line in numbered]


def best_line(results: Iterable[LineResult]) -> Optional[LineResult]:
    """The successful line with the strictly highest score, earliest on ties."""
    best = None
    for line_result in results:
        if not line_result.ok:
            continue
        if best is None or line_result.result.score > best.result.score:
            best = line_result
    return best
