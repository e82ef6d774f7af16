"""Base64 helpers.

The transcoder packs bytes into sextets itself instead of delegating to the
:mod:`base64` module, so the standard and URL-safe alphabets behave the same
way on every interpreter.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Final, TextIO

__all__ = [
    "ALPHABET",
    "URLSAFE_ALPHABET",
    "PAD",
    "Base64Error",
    "EncodeError",
    "DecodeError",
    "encode_bytes",
    "decode_bytes",
    "encode_text",
    "decode_text",
    "to_url_safe",
    "from_url_safe",
    "encode_stream",
    "decode_stream",
]

ALPHABET: Final = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
URLSAFE_ALPHABET: Final = ALPHABET[:-2] + "-_"
PAD: Final = "="

_DECODE_MAP: Final[dict[str, int]] = {char: index for index, char in enumerate(ALPHABET)}
_TO_URLSAFE: Final = str.maketrans(ALPHABET, URLSAFE_ALPHABET)
_FROM_URLSAFE: Final = str.maketrans(URLSAFE_ALPHABET, ALPHABET)

_WHITESPACE = frozenset({
    " ",
    "\n",
    "\r",
    "\t",
    "\f",
})


class Base64Error(ValueError):
    """Raised when a Base64 encoding or decoding operation fails."""


class EncodeError(Base64Error):
    """Raised when text cannot be represented in the selected byte mode."""


class DecodeError(Base64Error):
    """Raised when input is not valid Base64 or not valid UTF-8."""


def _strip_whitespace(value: str | bytes) -> str:
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError as exc:
            raise DecodeError("Base64 input must be ASCII") from exc
    return "".join(ch for ch in value if ch not in _WHITESPACE)


def to_url_safe(value: str) -> str:
    """Swap ``+``/``/`` for ``-``/``_`` and drop trailing padding."""

    return value.translate(_TO_URLSAFE).rstrip(PAD)


def from_url_safe(value: str, *, restore_padding: bool = False) -> str:
    """Swap ``-``/``_`` back to ``+``/``/``.

    Padding is only re-appended when ``restore_padding`` is set; the decoder
    accepts unpadded input either way.
    """

    converted = value.translate(_FROM_URLSAFE)
    if restore_padding:
        converted += PAD * (-len(converted) % 4)
    return converted


def encode_bytes(value: bytes, *, urlsafe: bool = False) -> str:
    """Encode raw bytes to Base64."""

    data = bytes(value)
    out: list[str] = []
    full = len(data) - len(data) % 3
    for index in range(0, full, 3):
        bits = (data[index] << 16) | (data[index + 1] << 8) | data[index + 2]
        out.append(ALPHABET[(bits >> 18) & 0x3F])
        out.append(ALPHABET[(bits >> 12) & 0x3F])
        out.append(ALPHABET[(bits >> 6) & 0x3F])
        out.append(ALPHABET[bits & 0x3F])

    remainder = len(data) - full
    if remainder == 1:
        bits = data[full] << 16
        out.append(ALPHABET[(bits >> 18) & 0x3F])
        out.append(ALPHABET[(bits >> 12) & 0x3F])
        out.append(PAD * 2)
    elif remainder == 2:
        bits = (data[full] << 16) | (data[full + 1] << 8)
        out.append(ALPHABET[(bits >> 18) & 0x3F])
        out.append(ALPHABET[(bits >> 12) & 0x3F])
        out.append(ALPHABET[(bits >> 6) & 0x3F])
        out.append(PAD)

    encoded = "".join(out)
    return to_url_safe(encoded) if urlsafe else encoded


def _split_padding(value: str) -> str:
    """Return ``value`` without its trailing padding, validating placement."""

    body = value.rstrip(PAD)
    padding = len(value) - len(body)
    if padding > 2:
        raise DecodeError("Invalid Base64 input: too much padding")
    if padding and len(value) % 4:
        raise DecodeError("Invalid Base64 input: padding does not complete a 4-character group")
    return body


def decode_bytes(value: str | bytes, *, urlsafe: bool = False) -> bytes:
    """Decode Base64 encoded text.

    Whitespace is ignored and missing padding is tolerated. Raises
    :class:`DecodeError` for characters outside the alphabet and for lengths
    that no byte sequence can produce.
    """

    cleaned = _strip_whitespace(value)
    if urlsafe:
        cleaned = from_url_safe(cleaned)
    body = _split_padding(cleaned)
    sextets: list[int] = []
    for position, char in enumerate(body):
        sextet = _DECODE_MAP.get(char)
        if sextet is None:
            raise DecodeError(f"Invalid Base64 input: unexpected character {char!r} at position {position}")
        sextets.append(sextet)
    if len(sextets) % 4 == 1:
        raise DecodeError(f"Invalid Base64 input: length {len(sextets)} is not a valid Base64 length")

    decoded = bytearray()
    bits = 0
    bit_count = 0
    for sextet in sextets:
        bits = (bits << 6) | sextet
        bit_count += 6
        if bit_count >= 8:
            bit_count -= 8
            decoded.append((bits >> bit_count) & 0xFF)
            bits &= (1 << bit_count) - 1
    # Whatever is left in ``bits`` (2 or 4 bits) only fills out the last sextet.
    return bytes(decoded)


def _text_to_bytes(value: str, *, utf8: bool) -> bytes:
    if utf8:
        return value.encode("utf-8")
    for position, char in enumerate(value):
        if ord(char) > 0x7F:
            raise EncodeError(
                f"Character {char!r} at position {position} cannot be encoded "
                "as a single byte; enable UTF-8 mode"
            )
    return value.encode("ascii")


def encode_text(value: str, *, utf8: bool = True, urlsafe: bool = False) -> str:
    """Encode text to Base64.

    With ``utf8`` the text is converted to its UTF-8 bytes first. Otherwise
    every character must fit in a single ASCII byte, else :class:`EncodeError`.
    """

    return encode_bytes(_text_to_bytes(value, utf8=utf8), urlsafe=urlsafe)


def decode_text(value: str, *, utf8: bool = True, urlsafe: bool = False) -> str:
    """Decode Base64 text and return a unicode string.

    Without ``utf8`` each decoded byte becomes the character with that code
    point.
    """

    data = decode_bytes(value, urlsafe=urlsafe)
    if not utf8:
        return data.decode("latin-1")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Decoded bytes are not valid UTF-8: {exc.reason} at byte {exc.start}") from exc


def _write_chunk(destination: BinaryIO | TextIO, chunk: str) -> int:
    """Write encoded text to the destination preserving its type."""

    if isinstance(destination, io.TextIOBase):
        destination.write(chunk)
    else:
        destination.write(chunk.encode("ascii"))
    return len(chunk)


def encode_stream(
    source: BinaryIO,
    destination: BinaryIO | TextIO,
    *,
    urlsafe: bool = False,
    chunk_size: int = 1024 * 64,
) -> int:
    """Stream Base64 encoding from ``source`` into ``destination``.

    Blocks are emitted in multiples of three bytes so the output matches
    :func:`encode_bytes` on the whole payload. Returns the number of encoded
    characters written.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size must be a positive integer")

    leftover = b""
    total_written = 0
    while True:
        chunk = source.read(chunk_size)
        if chunk is None:
            raise ValueError("source.read() returned None")
        if not chunk:
            break
        buffer = leftover + chunk
        consume = len(buffer) - (len(buffer) % 3)
        leftover = buffer[consume:]
        if consume:
            total_written += _write_chunk(destination, encode_bytes(buffer[:consume], urlsafe=urlsafe))
    if leftover:
        total_written += _write_chunk(destination, encode_bytes(leftover, urlsafe=urlsafe))
    return total_written


def decode_stream(
    source: BinaryIO | TextIO,
    destination: BinaryIO,
    *,
    urlsafe: bool = False,
    chunk_size: int = 1024 * 64,
) -> int:
    """Stream Base64 decoding from ``source`` into ``destination``.

    Whitespace in the input is ignored. Returns the number of decoded bytes written.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size must be a positive integer")

    leftover = ""
    total_written = 0
    while True:
        chunk = source.read(chunk_size)
        if chunk is None:
            raise ValueError("source.read() returned None")
        if not chunk:
            break
        buffer = leftover + _strip_whitespace(chunk)
        # Keep the last group back: it may be the padded (or short) final one.
        consume = max(len(buffer) - (len(buffer) % 4) - 4, 0)
        to_decode = buffer[:consume]
        leftover = buffer[consume:]
        if to_decode:
            if PAD in to_decode:
                raise DecodeError("Invalid Base64 input: padding before the end of the data")
            decoded = decode_bytes(to_decode, urlsafe=urlsafe)
            written = destination.write(decoded)
            total_written += written if written is not None else len(decoded)
    if leftover:
        decoded = decode_bytes(leftover, urlsafe=urlsafe)
        written = destination.write(decoded)
        total_written += written if written is not None else len(decoded)
    return total_written
