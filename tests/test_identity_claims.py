import json
from datetime import date

import pytest

from core.exceptions import ClaimError, VerificationPayloadError
from core.interfaces.identity_record_interface import IdentityRecord
from core.processor import (
    DateOfBirthProcessor,
    buildIdentityClaim,
    buildVerificationPayload,
    parseVerificationPayload,
    referencePrefixMatches,
)


def _record(dateOfBirth="15/06/2000", referenceId="269720190612163909327"):
    record = IdentityRecord(referenceId=referenceId, dateOfBirth=dateOfBirth)
    return DateOfBirthProcessor().enrich(record, date(2024, 6, 14))


def test_reference_prefix_matches_first_four_digits():
    record = _record()

    assert referencePrefixMatches(record, "2697")
    assert referencePrefixMatches(record, " 2697 ")
    assert not referencePrefixMatches(record, "1234")
    assert not referencePrefixMatches(record, "269")
    assert not referencePrefixMatches(record, "26972")
    assert not referencePrefixMatches(IdentityRecord(referenceId="12"), "12")


def test_claim_exposes_only_commitment_and_flags():
    claim = buildIdentityClaim(_record(), livenessVerified=True, timestampMs=1700000000000)

    data = claim.toDict()
    assert set(data) == {"proofId", "commitment", "publicSignals"}
    assert data["publicSignals"] == {"isAdult": True, "livenessVerified": True}
    assert len(claim.commitment) == 64
    assert claim.proofId.startswith("proof_")
    assert claim.proofId.endswith("_1700000000000")
    assert "269720190612163909327" not in json.dumps(data)


def test_claim_is_deterministic_for_same_inputs():
    first = buildIdentityClaim(_record(), True, timestampMs=1)
    second = buildIdentityClaim(_record(), True, timestampMs=1)
    other = buildIdentityClaim(_record(), False, timestampMs=1)

    assert first == second
    assert first.commitment != other.commitment


def test_claim_requires_known_age():
    with pytest.raises(ClaimError):
        buildIdentityClaim(_record(dateOfBirth="unknown"), True)


def test_claim_requires_reference_id():
    with pytest.raises(ClaimError):
        buildIdentityClaim(_record(referenceId=""), True)


def test_verification_payload_json_is_compact():
    payload = buildVerificationPayload("age", "proof_abc_1", "0x1234")

    assert payload.toJson() == '{"type":"age","proofId":"proof_abc_1","address":"0x1234"}'
    assert parseVerificationPayload(payload.toJson()) == payload


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        '{"type": "age", "address": "0x1"}',
        '{"type": "age", "proofId": "p"}',
        '{"proofId": "p", "address": "0x1"}',
        '{"type": "passport", "proofId": "p", "address": "0x1"}',
    ],
)
def test_invalid_verification_payloads(text):
    with pytest.raises(VerificationPayloadError):
        parseVerificationPayload(text)


def test_build_verification_payload_rejects_unknown_type():
    with pytest.raises(VerificationPayloadError):
        buildVerificationPayload("passport", "p", "0x1")
