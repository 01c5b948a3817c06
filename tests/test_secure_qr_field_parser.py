import pytest

from core.exceptions import FieldCountError, SignatureBoundsError
from core.interfaces.identity_record_interface import TEXT_FIELD_NAMES
from core.parser import (
    SecureQrFieldParser,
    computeBinaryLayout,
    correctFieldShift,
    parseLeadingInteger,
    tokenize,
)
from payload_builders import DEFAULT_FIELDS, EMAIL_HASH, MOBILE_HASH, SIGNATURE, buildPayload


PHOTO = b"\xff\xd8JPEG\xff\x00photo-bytes\xff\xd9"


def test_tokenize_stops_after_sixteen_fields():
    payload = buildPayload(photo=PHOTO)

    tokens, textEnd = tokenize(payload)

    assert len(tokens) == 16
    assert tokens[0] == "0"
    assert tokens[1:] == [DEFAULT_FIELDS[name] for name in TEXT_FIELD_NAMES]
    assert payload[textEnd:] == PHOTO + SIGNATURE


def test_tokenize_short_payload_consumes_everything():
    tokens, textEnd = tokenize(b"2\xffabc")

    assert tokens == ["2", "abc"]
    assert textEnd == 5


def test_parse_leading_integer():
    assert parseLeadingInteger("3") == 3
    assert parseLeadingInteger(" 2") == 2
    assert parseLeadingInteger("1abc") == 1
    assert parseLeadingInteger("abc") is None
    assert parseLeadingInteger("") is None


def test_parse_fields_recovers_text_and_signature_exactly():
    payload = buildPayload(photo=PHOTO)

    record = SecureQrFieldParser().parseFields(payload)

    assert record.emailMobileIndicator == 0
    for name in TEXT_FIELD_NAMES:
        assert getattr(record, name) == DEFAULT_FIELDS[name]
    assert record.photo == PHOTO
    assert record.emailHash is None
    assert record.mobileHash is None
    assert record.signature == SIGNATURE
    assert record.anomalyCorrected is False
    assert record.age is None
    assert record.isAdult is None


def test_parse_fields_with_both_hashes():
    payload = buildPayload(
        indicator="3", photo=PHOTO, emailHash=EMAIL_HASH, mobileHash=MOBILE_HASH
    )

    record = SecureQrFieldParser().parseFields(payload)

    assert record.emailMobileIndicator == 3
    assert record.photo == PHOTO
    assert record.emailHash == EMAIL_HASH
    assert record.mobileHash == MOBILE_HASH
    assert record.signature == SIGNATURE


def test_parse_fields_mobile_only():
    payload = buildPayload(indicator="2", photo=PHOTO, mobileHash=MOBILE_HASH)

    record = SecureQrFieldParser().parseFields(payload)

    assert record.mobileHash == MOBILE_HASH
    assert record.emailHash is None
    assert record.photo == PHOTO


def test_parse_fields_email_only():
    payload = buildPayload(indicator="1", photo=PHOTO, emailHash=EMAIL_HASH)

    record = SecureQrFieldParser().parseFields(payload)

    assert record.emailHash == EMAIL_HASH
    assert record.mobileHash is None
    assert record.photo == PHOTO


def test_unknown_indicator_defaults_to_no_hashes():
    payload = buildPayload(indicator="7", photo=PHOTO)

    record = SecureQrFieldParser().parseFields(payload)

    assert record.emailMobileIndicator == 0
    assert record.photo == PHOTO


def test_field_shift_correction_applies_only_to_known_defect():
    shifted, corrected = correctFieldShift(["V", "3", "ref", "name", "tail"])
    assert corrected is True
    assert shifted == ["V", "ref", "name", "tail", "tail"]

    for tokens in (["0", "3", "a"], ["V", "2", "a"], ["V", "33", "a"], ["1x", "3", "a"]):
        unchanged, corrected = correctFieldShift(tokens)
        assert corrected is False
        assert unchanged == tokens


def test_anomalous_payload_is_parsed_as_both_hashes():
    fields = dict(DEFAULT_FIELDS)
    # Encoder defect: a stray non-numeric token, then the real indicator
    tokens = ["V", "3"] + [fields[name] for name in TEXT_FIELD_NAMES[:-1]]
    text = b"".join(token.encode("latin-1") + b"\xff" for token in tokens)
    payload = text + PHOTO + EMAIL_HASH + MOBILE_HASH + SIGNATURE

    parser = SecureQrFieldParser()
    record = parser.parseFields(payload)

    assert record.anomalyCorrected is True
    assert record.emailMobileIndicator == 3
    assert record.referenceId == fields["referenceId"]
    assert record.name == fields["name"]
    assert record.emailHash == EMAIL_HASH
    assert record.mobileHash == MOBILE_HASH
    assert record.signature == SIGNATURE

    again = parser.parseFields(payload)
    assert again.toSummary() == record.toSummary()


def test_fewer_than_two_tokens_is_rejected():
    with pytest.raises(FieldCountError):
        SecureQrFieldParser().parseFields(b"")
    with pytest.raises(FieldCountError):
        SecureQrFieldParser().parseFields(b"only-one-token")


def test_payload_shorter_than_signature_is_rejected():
    with pytest.raises(SignatureBoundsError):
        SecureQrFieldParser().parseFields(b"0\xffname\xff" + b"\x00" * 100)


def test_layout_signature_only_payload_has_empty_photo():
    layout = computeBinaryLayout(256, 0, 0)

    assert layout.photo.length == 0
    assert (layout.signature.start, layout.signature.end) == (0, 256)
    assert layout.emailHash is None
    assert layout.mobileHash is None


def test_layout_both_hashes_order():
    layout = computeBinaryLayout(1000, 3, 100)

    assert (layout.signature.start, layout.signature.end) == (744, 1000)
    assert (layout.mobileHash.start, layout.mobileHash.end) == (712, 744)
    assert (layout.emailHash.start, layout.emailHash.end) == (680, 712)
    assert (layout.photo.start, layout.photo.end) == (100, 680)


def test_layout_anomaly_forces_both_hashes():
    layout = computeBinaryLayout(1000, 0, 100, anomalyCorrected=True)

    assert layout.emailHash is not None
    assert layout.mobileHash is not None


def test_layout_requires_room_for_hashes():
    with pytest.raises(SignatureBoundsError):
        computeBinaryLayout(300, 3, 0)
    computeBinaryLayout(320, 3, 0)


def test_layout_text_overrunning_tail_gives_empty_photo():
    layout = computeBinaryLayout(300, 0, 280)

    assert layout.photo.length == 0
    assert layout.signature.length == 256


def test_missing_vtc_takes_sixteenth_token_from_binary_tail():
    # Scanning always reads 16 tokens, so a photo starting with the
    # delimiter byte yields an empty vtc and loses that byte.
    photo = b"\xff\xd8JPEGDATA"
    payload = buildPayload(fields={"vtc": None}, photo=photo)

    record = SecureQrFieldParser().parseFields(payload)

    assert record.subDistrict == DEFAULT_FIELDS["subDistrict"]
    assert record.vtc == ""
    assert record.photo == photo[1:]
    assert record.signature == SIGNATURE
