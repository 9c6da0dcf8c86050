import base64
import re
from typing import Optional

ENCODING_TYPES = ("base64", "binary", "hex")

_BASE64_NOISE = re.compile(r"[^A-Za-z0-9+/]")
_HEX_PAIR = re.compile(r"[0-9A-Fa-f]{2}")


def decode_base64(content: str) -> bytes:
    """Forgiving base64: url-safe alphabet accepted, stray characters skipped,
    decoding stops at the first ``=`` and missing padding is tolerated."""
    cleaned = content.split("=", 1)[0].translate(str.maketrans("-_", "+/"))
    cleaned = _BASE64_NOISE.sub("", cleaned)
    if len(cleaned) % 4 == 1:
        # a lone trailing sextet carries no complete byte
        cleaned = cleaned[:-1]
    return base64.b64decode(cleaned + "=" * (-len(cleaned) % 4))


def decode_hex(content: str) -> bytes:
    """Hex pairs up to the first malformed pair; an odd trailing digit is dropped."""
    pairs = []
    for start in range(0, len(content) - 1, 2):
        pair = content[start:start + 2]
        if not _HEX_PAIR.fullmatch(pair):
            break
        pairs.append(pair)
    return bytes.fromhex("".join(pairs))


def decode_binary(content: str) -> bytes:
    """One byte per character, keeping the low eight bits of each code point."""
    return bytes(ord(char) & 0xFF for char in content)


def decode_content(content: str, encoding: Optional[str]) -> bytes:
    """Decode transport-encoded template content into raw bytes.

    Malformed content never fails: whatever decodes is kept. No encoding means
    UTF-8 text. Raises ValueError only for an unknown encoding name.
    """
    if not encoding:
        return content.encode("utf-8")

    encoding = encoding.lower()
    if encoding == "base64":
        return decode_base64(content)
    if encoding == "hex":
        return decode_hex(content)
    if encoding == "binary":
        return decode_binary(content)
    raise ValueError(f"Unsupported encoding: {encoding}")
