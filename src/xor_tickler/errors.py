class XorTicklerError(Exception):
    pass


class InvalidKey(XorTicklerError, ValueError):
    """Raised when a XOR key is empty."""

    def __init__(self, message: str = "XOR key must not be empty"):
        super().__init__(message)


class InsufficientHistogramData(XorTicklerError, ValueError):
    """Raised when a histogram has too few distinct bytes for the requested rank depth."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Can't rank {requested} entries from a histogram with {available} distinct bytes"
        )


class InvalidHexDigit(XorTicklerError, ValueError):
    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Invalid hex character {char!r} at position {position}")


class LineSourceError(XorTicklerError, RuntimeError):
    pass
