import base64
import string
from typing import List, Literal, Union

import requests

from xor_tickler.config import DEFAULT_HTTP_TIMEOUT, INVALID_UTF8
from xor_tickler.errors import InvalidHexDigit, LineSourceError
from xor_tickler.logs import get_logger

log = get_logger(__name__)

CiphertextFormat = Union[Literal[
    "b64",
    "hex",
    "raw"
], str]

HEX_DIGITS = frozenset(string.hexdigits)


def _as_bytes(
    data: Union[str, bytes, bytearray, memoryview],
    *,
    encoding: str = "utf-8",
) -> bytes:
    """Normalize values to type bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode(encoding)
    raise TypeError(f"Expected str or bytes-like, got {type(data).__name__}")


def str_to_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def bytes_to_str(data: bytes) -> str:
    """Decode UTF-8 text, substituting a sentinel string for undecodable bytes."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return INVALID_UTF8


def decode_hex(hex_text: Union[str, bytes]) -> bytes:
    """
    Decode a string of hex digit pairs.
    An odd trailing digit becomes the high nibble of a final byte.
    """
    if isinstance(hex_text, (bytes, bytearray)):
        hex_text = hex_text.decode("ascii", errors="replace")
    hex_text = hex_text.strip()

    for position, char in enumerate(hex_text):
        if char not in HEX_DIGITS:
            raise InvalidHexDigit(char, position)

    if len(hex_text) % 2:
        hex_text += "0"
    return bytes.fromhex(hex_text)


def b64_encode(
    data: Union[str, bytes, bytearray, memoryview],
    *,
    urlsafe: bool = False,
    zero_pad: bool = False,
    text_encoding: str = "utf-8",
) -> str:
    """Accepts str/bytes/etc and return a base64 string (standard or URL-safe).

    With zero_pad, a final partial group is filled with zero bits ("A")
    instead of "=" padding.
    """
    raw = _as_bytes(data, encoding=text_encoding)
    fn = base64.urlsafe_b64encode if urlsafe else base64.b64encode
    encoded = fn(raw).decode("ascii")
    if zero_pad:
        encoded = encoded.replace("=", "A")
    return encoded


def b64_decode(b64_text: Union[str, bytes]) -> bytes:
    """Decodes either standard or URL-safe b64. Tolerates missing '=' padding."""
    if isinstance(b64_text, (bytes, bytearray)):
        b64_text = b64_text.decode("ascii")
    b64_text = "".join(b64_text.split())

    # normalize padding
    missing = len(b64_text) % 4
    if missing:
        b64_text += "=" * (4 - missing)

    try:
        return base64.b64decode(b64_text, validate=True)
    except ValueError:
        return base64.urlsafe_b64decode(b64_text)  # URL-safe fallback


def hex_to_base64(hex_text: Union[str, bytes], *, zero_pad: bool = False) -> str:
    return b64_encode(decode_hex(hex_text), zero_pad=zero_pad)


def read_lines(file_path: str) -> List[str]:
    """Read the lines of a text file, without line terminators."""
    with open(file_path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def fetch_lines(url: str, *, timeout: float = DEFAULT_HTTP_TIMEOUT) -> List[str]:
    """Fetch a text resource over HTTP and split it into lines."""
    log.debug("fetching lines", url=url)
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise LineSourceError(f"Failed to get {url}: {e}") from e
    if response.status_code != 200:
        raise LineSourceError(
            f"Failed to get {url}: {response.status_code} {response.text}"
        )
    lines = response.text.splitlines()
    log.debug("fetched lines", url=url, line_count=len(lines))
    return lines


def load_ciphertext(file_path: str, format: CiphertextFormat) -> bytes:
    """Load the ciphertext from a file."""
    with open(file_path, "rb") as f:
        data = f.read()
    if format == "b64":
        return b64_decode(data)
    elif format == "hex":
        return decode_hex(data)
    elif format == "raw":
        return data
    else:
        raise ValueError(f"Invalid ciphertext format: {format}")
