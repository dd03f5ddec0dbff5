from collections import Counter
from typing import Dict

Histogram = Dict[int, int]


def build_histogram(data: bytes) -> Histogram:
    """Count the occurrences of every byte value present in the data."""
    return dict(Counter(data))
