from datetime import date

import pytest

from core.exceptions import DateParseError
from core.interfaces.identity_record_interface import IdentityRecord
from core.processor import DateOfBirthProcessor, calculateAge, parseDate, parseDateStrict


TODAY = date(2024, 6, 14)


def test_calculate_age_before_and_on_birthday():
    dob = date(2000, 6, 15)

    assert calculateAge(dob, date(2024, 6, 14)) == 23
    assert calculateAge(dob, date(2024, 6, 15)) == 24
    assert calculateAge(dob, date(2024, 12, 31)) == 24


@pytest.mark.parametrize(
    "text, expected",
    [
        ("15/06/2000", date(2000, 6, 15)),
        ("15-06-2000", date(2000, 6, 15)),
        ("2000-06-15", date(2000, 6, 15)),
        (" 01/01/1990 ", date(1990, 1, 1)),
        ("15.06.2000", date(2000, 6, 15)),
        ("20000615", date(2000, 6, 15)),
        ("15 Jun 2000", date(2000, 6, 15)),
        ("June 15, 2000", date(2000, 6, 15)),
        ("1985", date(1985, 1, 1)),
    ],
)
def test_parse_date_accepted_formats(text, expected):
    assert parseDate(text, TODAY) == expected


@pytest.mark.parametrize("text", ["", "   ", "not a date", "31/02/2000", "15/13/2000", "ab/cd/efgh", "1/2"])
def test_parse_date_rejects_unusable_text(text):
    assert parseDate(text, TODAY) is None


def test_parse_date_rejects_future_dates():
    assert parseDate("15/06/2024", TODAY) is None
    assert parseDate("14/06/2024", TODAY) == TODAY


def test_parse_date_rejects_more_than_120_years_ago():
    assert parseDate("13/06/1904", TODAY) is None
    assert parseDate("14/06/1904", TODAY) == date(1904, 6, 14)


def test_parse_date_strict_reports_reason():
    with pytest.raises(DateParseError) as excInfo:
        parseDateStrict("01/01/2999", TODAY)

    assert "future" in str(excInfo.value)


def test_enrich_sets_age_and_adult_flag():
    record = IdentityRecord(dateOfBirth="15/06/2000")

    DateOfBirthProcessor().enrich(record, TODAY)

    assert record.age == 23
    assert record.isAdult is True


def test_enrich_minor():
    record = IdentityRecord(dateOfBirth="2010-01-01")

    DateOfBirthProcessor().enrich(record, TODAY)

    assert record.age == 14
    assert record.isAdult is False


def test_enrich_respects_configured_adult_age():
    record = IdentityRecord(dateOfBirth="15/06/2003")

    DateOfBirthProcessor(adultAge=21).enrich(record, TODAY)

    assert record.age == 20
    assert record.isAdult is False


def test_enrich_leaves_age_unknown_for_bad_date(caplog):
    record = IdentityRecord(dateOfBirth="garbage")

    with caplog.at_level("WARNING"):
        DateOfBirthProcessor().enrich(record, TODAY)

    assert record.age is None
    assert record.isAdult is None
    assert "age" not in record.toSummary()
    assert "Age not derived" in caplog.text


@pytest.mark.parametrize(
    "text",
    ["01/01/99999999999999999999", "2000-01-99999999999999999999", "99999999999999999999-01-01"],
)
def test_parse_date_rejects_out_of_range_numbers(text):
    assert parseDate(text, TODAY) is None

    with pytest.raises(DateParseError):
        parseDateStrict(text, TODAY)


def test_enrich_leaves_age_unknown_for_out_of_range_year():
    record = IdentityRecord(dateOfBirth="01/01/99999999999999999999")

    DateOfBirthProcessor().enrich(record, TODAY)

    assert record.age is None
    assert record.isAdult is None


def test_age_can_only_be_set_through_derivation():
    record = IdentityRecord(dateOfBirth="15/06/2000")

    with pytest.raises(AttributeError):
        record.age = 40

    DateOfBirthProcessor().enrich(record, TODAY)
    assert record.age == 23

    record.dateOfBirth = "bad"
    DateOfBirthProcessor().enrich(record, TODAY)
    assert record.age is None
