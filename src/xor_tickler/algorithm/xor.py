from itertools import cycle

from xor_tickler.errors import InvalidKey


def xor_bytes(plaintext: bytes, key: bytes) -> bytes:
    """
    Cycle the key over the input and XOR them together.
    Applying it twice with the same key returns the original bytes.
    """
    if not key:
        raise InvalidKey()
    return bytes(p ^ k for p, k in zip(plaintext, cycle(key)))


def fixed_xor(a: bytes, b: bytes) -> bytes:
    """XOR two buffers of equal length."""
    if len(a) != len(b):
        raise ValueError(f"Buffers are of different length ({len(a)} != {len(b)})")
    return bytes(x ^ y for x, y in zip(a, b))
