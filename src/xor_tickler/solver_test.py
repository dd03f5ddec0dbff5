import random

import pytest
import structlog

from xor_tickler.algorithm.xor import xor_bytes
from xor_tickler.config import INVALID_UTF8
from xor_tickler.errors import InsufficientHistogramData, InvalidHexDigit
from xor_tickler.models.candidates import ScoredDecryption
from xor_tickler.solver import (
    best_line,
    crack_best,
    crack_lines,
    crack_one,
    pick_best,
    score_candidates,
)
from xor_tickler.utils import decode_hex

COOKING_HEX = "1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736"
COOKING = b"Cooking MC's like a pound of bacon"
PARTY = b"Now that the party is jumping\n"


def decoy(offset: int) -> bytes:
    """30 distinct bytes; no single-byte key can turn these into much English."""
    return bytes((i * 7 + offset) % 256 for i in range(30))


class TestCrackOne:
    """Test suite for cracking a single ciphertext"""

    def test_cooking_mcs(self):
        """Test the cryptopals single-byte XOR vector"""
        decrypted = crack_one(decode_hex(COOKING_HEX))
        assert decrypted.text == "Cooking MC's like a pound of bacon"
        assert decrypted.key == 0x58
        assert decrypted.plaintext == COOKING

    def test_unpacks_as_text_and_score(self):
        text, score = crack_one(decode_hex(COOKING_HEX))
        assert text == COOKING.decode()
        assert isinstance(score, int)

    def test_invalid_utf8_sentinel(self):
        """Test undecodable plaintext is rendered with the sentinel instead of failing"""
        decrypted = crack_one(b"eeet\xff")
        assert decrypted.key == 0
        assert decrypted.text == INVALID_UTF8
        assert decrypted.plaintext == b"eeet\xff"
        assert decrypted.score == 35

    def test_insufficient_histogram(self):
        """Test a ciphertext with too few distinct bytes fails"""
        with pytest.raises(InsufficientHistogramData):
            crack_one(b"aaab")

    def test_rank_depth_zero(self):
        """Test only the most frequent byte is needed with rank depth 0"""
        decrypted = crack_one(xor_bytes(b"eeee ta", b"\x42"), rank_depth=0)
        assert decrypted.key == 0x42


class TestScoreCandidates:
    """Test suite for scoring every candidate"""

    def test_generation_order(self):
        decryptions = score_candidates(decode_hex(COOKING_HEX))
        assert len(decryptions) == 12
        # First candidate assumes the most frequent byte (space) is "e".
        assert decryptions[0].key == ord("e") ^ 0x78

    def test_best_is_max(self):
        decryptions = score_candidates(decode_hex(COOKING_HEX))
        assert pick_best(decryptions).score == max(d.score for d in decryptions)


class TestPickBest:
    """Test suite for stable maximum selection"""

    def test_first_wins_ties(self):
        first = ScoredDecryption(text="a", score=5, key=1)
        second = ScoredDecryption(text="b", score=5, key=2)
        assert pick_best([first, second]) is first

    def test_strictly_greater_replaces(self):
        low = ScoredDecryption(text="a", score=-5, key=1)
        high = ScoredDecryption(text="b", score=3, key=2)
        assert pick_best([low, high]) is high

    def test_empty(self):
        assert pick_best([]) is None


class TestCrackBest:
    """Test suite for cracking a batch of ciphertexts"""

    def ciphertexts(self):
        decoys = [decoy(offset) for offset in range(0, 200, 20)]
        return decoys[:5] + [xor_bytes(PARTY, b"\x35")] + decoys[5:]

    def test_detect_single_char_xor(self):
        """Test the English line is found among noise"""
        best = crack_best(self.ciphertexts())
        assert best.text == "Now that the party is jumping\n"
        assert best.key == 0x35

    def test_thread_pool(self):
        """Test parallel cracking picks the same winner"""
        assert crack_best(self.ciphertexts(), max_workers=4) == crack_best(self.ciphertexts())

    def test_earliest_wins_ties(self):
        """Test equal scores keep the earliest ciphertext"""
        a = xor_bytes(COOKING, b"\x58")
        b = xor_bytes(COOKING, b"\x21")
        assert crack_best([a, b]).key == 0x58
        assert crack_best([b, a]).key == 0x21
        assert crack_best([a, b], max_workers=2).key == 0x58

    def test_empty(self):
        with pytest.raises(ValueError):
            crack_best([])

    def test_errors_propagate(self):
        with pytest.raises(InsufficientHistogramData):
            crack_best([decode_hex(COOKING_HEX), b"\x00\x00"])

    def test_detect_among_random_hex_lines(self):
        """Test the English line is found among hundreds of random hex-encoded lines"""
        rng = random.Random(1337)
        hex_lines = [rng.randbytes(30).hex() for _ in range(300)]
        hex_lines.insert(171, xor_bytes(PARTY, b"\x35").hex())

        best = crack_best([decode_hex(line) for line in hex_lines])

        assert best.text == "Now that the party is jumping\n"
        assert best.key == 0x35

    def test_silent_without_logging_config(self, capsys):
        """Test library calls write nothing to stdout when logging is not configured"""
        structlog.reset_defaults()

        crack_one(decode_hex(COOKING_HEX))
        crack_best(self.ciphertexts())

        assert capsys.readouterr().out == ""


class TestCrackLines:
    """Test suite for the resilient line batch"""

    def lines(self):
        return [
            decoy(0).hex(),
            "",
            "not hex",
            xor_bytes(PARTY, b"\x35").hex() + "\n",
            "0000",
            decoy(40).hex(),
        ]

    def test_records_errors(self):
        """Test malformed lines are reported and the batch continues"""
        results = crack_lines(self.lines())
        assert [r.line_number for r in results] == [1, 3, 4, 5, 6]
        assert [r.ok for r in results] == [True, False, True, False, True]
        assert "Invalid hex character" in results[1].error
        assert "distinct bytes" in results[3].error

    def test_best_line(self):
        best = best_line(crack_lines(self.lines()))
        assert best.line_number == 4
        assert best.result.text == PARTY.decode()

    def test_thread_pool(self):
        assert crack_lines(self.lines(), max_workers=3) == crack_lines(self.lines())

    def test_strict(self):
        """Test the first error is raised when errors are not skipped"""
        with pytest.raises(InvalidHexDigit):
            crack_lines(self.lines(), skip_errors=False)

    def test_best_line_all_failed(self):
        assert best_line(crack_lines(["zz", "0000"])) is None
