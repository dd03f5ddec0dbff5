"""Fixed lookup tables and defaults shared by the cracking pipeline."""
from types import MappingProxyType

# Plaintext letters assumed to be the most common in English text.
ENG_FREQ_LETTERS = b"etaion"

# Reward per byte for the common letters; anything else costs UNSCORED_PENALTY.
ENG_LETTER_SCORES = MappingProxyType({
    ord("e"): 12,
    ord("t"): 9,
    ord("a"): 8,
    ord("i"): 7,
    ord("o"): 6,
    ord("n"): 6,
})
UNSCORED_PENALTY = 10

# Top two histogram entries.
DEFAULT_RANK_DEPTH = 1

INVALID_UTF8 = "invalid utf-8"

DEFAULT_HTTP_TIMEOUT = 10

ENV_PREFIX = "XOR_TICKLER"
