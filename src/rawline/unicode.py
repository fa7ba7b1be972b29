"""UTF-8 encoding and decoding of single codepoints.

The dispatcher reads input one byte at a time, so it needs to know how many
continuation bytes to expect from the leading byte alone before it reads
any more of the stream.
"""

from __future__ import annotations

from rawline.errors import InvalidSequence

MAX_SEQUENCE_LENGTH = 4


def sequence_length(lead: int) -> int:
    """Return the total byte length of the UTF-8 sequence starting with *lead*.

    Raises:
        InvalidSequence: *lead* is a continuation byte or can never start a
            sequence (0xF8 and above).
    """
    if lead < 0x80:
        return 1
    if 0xC0 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF7:
        return 4
    raise InvalidSequence(f"invalid UTF-8 leading byte 0x{lead:02x}")


def is_continuation(byte: int) -> bool:
    return 0x80 <= byte <= 0xBF


def encode(codepoint: int) -> bytes:
    """Encode one Unicode scalar value as UTF-8."""
    if not 0 <= codepoint <= 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        raise InvalidSequence(f"U+{codepoint:04X} is not a Unicode scalar value")
    return chr(codepoint).encode("utf-8")


def decode(data: bytes) -> int:
    """Decode exactly one codepoint from a complete UTF-8 sequence.

    Raises:
        InvalidSequence: the leading byte is invalid, the sequence is
            truncated or too long, a continuation byte is malformed, or the
            encoding is overlong / a surrogate / beyond U+10FFFF.
    """
    if not data:
        raise InvalidSequence("empty byte sequence")

    expected = sequence_length(data[0])
    if len(data) != expected:
        raise InvalidSequence(
            f"expected {expected} bytes for leading byte 0x{data[0]:02x}, got {len(data)}"
        )
    if not all(is_continuation(b) for b in data[1:]):
        raise InvalidSequence(f"malformed continuation in {data!r}")

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        # overlong forms, surrogates and values past U+10FFFF
        raise InvalidSequence(str(exc)) from exc
    return ord(text)
