import base64
import io
import os

import pytest

from core.utils import base64_


@pytest.mark.parametrize(
    "payload, expected",
    [
        (b"", ""),
        (b"M", "TQ=="),
        (b"Ma", "TWE="),
        (b"Man", "TWFu"),
        (b"hello world", "aGVsbG8gd29ybGQ="),
    ],
)
def test_encode_bytes_known_vectors(payload, expected):
    assert base64_.encode_bytes(payload) == expected


def test_encode_bytes_urlsafe_strips_padding_and_swaps_alphabet():
    assert base64_.encode_bytes(b"M", urlsafe=True) == "TQ"
    assert base64_.encode_bytes(b"\xfb\xff\xbf") == "+/+/"
    assert base64_.encode_bytes(b"\xfb\xff\xbf", urlsafe=True) == "-_-_"


def test_encode_bytes_matches_stdlib_for_every_byte_value():
    payload = bytes(range(256))
    assert base64_.encode_bytes(payload) == base64.b64encode(payload).decode("ascii")
    assert base64_.encode_bytes(payload, urlsafe=True) == (
        base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    )


def test_decode_bytes_empty_input():
    assert base64_.decode_bytes("") == b""
    assert base64_.decode_bytes("", urlsafe=True) == b""


def test_decode_bytes_tolerates_missing_padding_and_whitespace():
    assert base64_.decode_bytes("TQ") == b"M"
    assert base64_.decode_bytes("TWE") == b"Ma"
    assert base64_.decode_bytes("TW\nFu\r\n TQ==") == b"ManM"


@pytest.mark.parametrize("urlsafe", [True, False])
@pytest.mark.parametrize("size", [0, 1, 2, 3, 4, 5, 31, 32, 33, 1000])
def test_bytes_roundtrip(urlsafe, size):
    payload = os.urandom(size)
    encoded = base64_.encode_bytes(payload, urlsafe=urlsafe)
    assert base64_.decode_bytes(encoded, urlsafe=urlsafe) == payload


@pytest.mark.parametrize(
    "value, message",
    [
        ("A", "length"),
        ("TWFuA", "length"),
        ("TWFu!", "'!'"),
        ("TW-u", "'-'"),
        ("TQ=", "padding"),
        ("TQ===", "padding"),
        ("T=Q=", "'='"),
    ],
)
def test_decode_bytes_rejects_invalid_input(value, message):
    with pytest.raises(base64_.DecodeError) as excinfo:
        base64_.decode_bytes(value)
    assert message in str(excinfo.value)


def test_decode_bytes_urlsafe_rejects_standard_only_errors():
    assert base64_.decode_bytes("-_-_", urlsafe=True) == b"\xfb\xff\xbf"
    with pytest.raises(base64_.DecodeError):
        base64_.decode_bytes("A", urlsafe=True)


def test_decode_error_is_a_value_error():
    with pytest.raises(ValueError):
        base64_.decode_bytes("@@ not valid @@")


def test_encode_decode_text_roundtrip():
    encoded = base64_.encode_text("hello world")
    assert encoded == "aGVsbG8gd29ybGQ="
    assert base64_.decode_text(encoded) == "hello world"


@pytest.mark.parametrize("urlsafe", [True, False])
@pytest.mark.parametrize("text", ["", "ascii only", "héllo wörld", "€ and 漢字", "emoji 🎉🐍", "\x00\n\t"])
def test_unicode_text_roundtrip(text, urlsafe):
    encoded = base64_.encode_text(text, utf8=True, urlsafe=urlsafe)
    assert base64_.decode_text(encoded, utf8=True, urlsafe=urlsafe) == text


def test_encode_text_utf8_expands_multibyte_characters():
    assert base64_.encode_text("é", utf8=True) == "w6k="
    assert base64_.encode_text("€", utf8=True) == "4oKs"


@pytest.mark.parametrize("text", ["é", "€", "abcĀ"])
def test_encode_text_single_byte_mode_rejects_non_ascii(text):
    with pytest.raises(base64_.EncodeError):
        base64_.encode_text(text, utf8=False)


def test_encode_text_single_byte_mode_ascii():
    assert base64_.encode_text("Man", utf8=False) == "TWFu"
    assert base64_.encode_text("M", utf8=False, urlsafe=True) == "TQ"


def test_decode_text_single_byte_mode_maps_bytes_to_code_points():
    assert base64_.decode_text("6Q==", utf8=False) == "é"
    assert base64_.decode_text("/w", utf8=False) == "\xff"


def test_decode_text_rejects_malformed_utf8():
    encoded = base64_.encode_bytes(b"\xc3\x28")
    with pytest.raises(base64_.DecodeError, match="UTF-8"):
        base64_.decode_text(encoded, utf8=True)
    assert base64_.decode_text(encoded, utf8=False) == "\xc3("


def test_url_safe_conversion_helpers():
    assert base64_.to_url_safe("+/8=") == "-_8"
    assert base64_.from_url_safe("-_8") == "+/8"
    assert base64_.from_url_safe("-_8", restore_padding=True) == "+/8="
    assert base64_.from_url_safe("TQ", restore_padding=True) == "TQ=="
    for value in ("", "TQ", "-_-_", "aGVsbG8gd29ybGQ", "AB-_cd"):
        assert base64_.to_url_safe(base64_.from_url_safe(value)) == value


def test_stream_encoding_and_decoding_roundtrip():
    payload = b"abc" * 20000 + b"tail"
    source = io.BytesIO(payload)
    encoded_stream = io.StringIO()

    written = base64_.encode_stream(source, encoded_stream, chunk_size=4096)
    encoded_value = encoded_stream.getvalue()
    assert written == len(encoded_value)
    assert encoded_value == base64_.encode_bytes(payload)

    # Introduce whitespace to ensure decoder tolerates it.
    formatted = "\n".join(encoded_value[i : i + 60] for i in range(0, len(encoded_value), 60))
    decoded_stream = io.BytesIO()
    base64_.decode_stream(io.StringIO(formatted), decoded_stream, chunk_size=500)
    assert decoded_stream.getvalue() == payload


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 64])
def test_stream_urlsafe_matches_one_shot_encoding(chunk_size):
    payload = bytes(range(256)) + b"\xfb\xff"
    destination = io.BytesIO()
    base64_.encode_stream(io.BytesIO(payload), destination, urlsafe=True, chunk_size=chunk_size)
    assert destination.getvalue().decode("ascii") == base64_.encode_bytes(payload, urlsafe=True)

    decoded = io.BytesIO()
    written = base64_.decode_stream(io.BytesIO(destination.getvalue()), decoded, urlsafe=True, chunk_size=chunk_size)
    assert decoded.getvalue() == payload
    assert written == len(payload)


def test_decode_stream_rejects_padding_in_the_middle():
    with pytest.raises(base64_.DecodeError):
        base64_.decode_stream(io.StringIO("TQ==TWFuTWFu"), io.BytesIO(), chunk_size=4)


def test_stream_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        base64_.encode_stream(io.BytesIO(b"x"), io.StringIO(), chunk_size=0)
    with pytest.raises(ValueError):
        base64_.decode_stream(io.StringIO("eA=="), io.BytesIO(), chunk_size=-1)


def test_urlsafe_alphabet_differs_only_in_last_two_symbols():
    assert len(base64_.URLSAFE_ALPHABET) == 64
    assert base64_.URLSAFE_ALPHABET[:62] == base64_.ALPHABET[:62]
    assert base64_.URLSAFE_ALPHABET[62:] == "-_"
    assert base64_.to_url_safe(base64_.ALPHABET) == base64_.URLSAFE_ALPHABET
    assert base64_.from_url_safe(base64_.URLSAFE_ALPHABET) == base64_.ALPHABET
