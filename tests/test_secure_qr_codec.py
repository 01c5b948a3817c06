import zlib

import pytest

from core.codec import bytesToHex, bytesToLatin1, decimalToBytes, decompress, isCompressed
from core.exceptions import DecoderError, PayloadFormatError
from payload_builders import gzipPayload, toDecimal


def test_decimal_to_bytes_known_values():
    assert decimalToBytes("255") == b"\xff"
    assert decimalToBytes("256") == b"\x01\x00"
    assert decimalToBytes("0") == b"\x00"
    assert decimalToBytes("65535") == b"\xff\xff"


def test_decimal_to_bytes_ignores_surrounding_whitespace():
    assert decimalToBytes("  256\n") == b"\x01\x00"


@pytest.mark.parametrize("text", ["", "   ", "-1", "+5", "12a4", "1.5", "1 2", "０１"])
def test_decimal_to_bytes_rejects_non_decimal(text):
    with pytest.raises(PayloadFormatError):
        decimalToBytes(text)


def test_payload_format_error_is_decoder_error():
    with pytest.raises(DecoderError):
        decimalToBytes("abc")


def test_decimal_to_bytes_handles_inputs_past_int_str_limit():
    data = bytes(range(1, 256)) * 20
    decimal = toDecimal(data)

    assert len(decimal) > 4300
    assert decimalToBytes(decimal) == data


def test_decimal_to_bytes_drops_leading_zero_bytes():
    assert decimalToBytes(toDecimal(b"\x00\x00\x07")) == b"\x07"


def test_decompress_gzip_and_zlib():
    original = b"secure qr payload " * 50

    assert decompress(gzipPayload(original)) == original
    assert decompress(zlib.compress(original)) == original


def test_decompress_falls_back_to_input(caplog):
    raw = b"\x01\x02not compressed"

    with caplog.at_level("WARNING"):
        result = decompress(raw)

    assert result is raw
    assert "Decompression failed" in caplog.text


def test_is_compressed_detects_headers():
    assert isCompressed(gzipPayload(b"x"))
    assert isCompressed(zlib.compress(b"x"))
    assert not isCompressed(b"\x00\x01\x02")
    assert not isCompressed(b"")


def test_text_helpers():
    assert bytesToLatin1(b"Jos\xe9") == "José"
    assert bytesToHex(b"\x00\xab") == "00ab"
