"""
Date Of Birth Processor Implementation.

Parses the loosely formatted date-of-birth field of a secure QR record
and derives the holder's age and adult flag.

Accepted formats:
- DD/MM/YYYY
- DD-MM-YYYY
- YYYY-MM-DD (first hyphen-separated part has 4 characters)
- Last resort: ISO, dotted, compact, month-name and bare-year forms
"""

import re
import logging
from datetime import date, datetime
from typing import List, Optional

from core.exceptions import DateParseError
from core.interfaces.identity_record_interface import IdentityRecord


logger = logging.getLogger(__name__)

DEFAULT_ADULT_AGE = 18
DEFAULT_MAX_AGE_YEARS = 120

LEADING_INTEGER_PATTERN = re.compile(r'^\s*([+-]?\d+)')

# Tried in order when the date has neither '/' nor '-'
GENERIC_FORMATS: List[str] = [
    "%d.%m.%Y",
    "%Y.%m.%d",
    "%Y%m%d",
    "%d %m %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%Y",
]


def _componentToInt(text: str) -> Optional[int]:
    match = LEADING_INTEGER_PATTERN.match(text)
    return int(match.group(1)) if match else None


def _buildDate(text: str, year: Optional[int], month: Optional[int], day: Optional[int]) -> date:
    if year is None or month is None or day is None:
        raise DateParseError(text, f"non-numeric component (day={day}, month={month}, year={year})")
    try:
        return date(year, month, day)
    except (ValueError, OverflowError) as e:
        raise DateParseError(text, f"not a calendar date ({e})") from e


def _parseGeneric(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except (ValueError, OverflowError):
        pass

    for fmt in GENERIC_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except (ValueError, OverflowError):
            continue

    raise DateParseError(text, "unrecognized date format")


def _subtractYears(day: date, years: int) -> date:
    if years >= day.year:
        return date.min
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def parseDateStrict(
    text: str,
    today: Optional[date] = None,
    maxAgeYears: int = DEFAULT_MAX_AGE_YEARS
) -> date:
    """
    Parse a date of birth and check that it is plausible.

    Args:
        text: Raw date text from the record.
        today: Reference date (defaults to date.today()).
        maxAgeYears: Oldest accepted age in years.

    Returns:
        date: Parsed date of birth.

    Raises:
        DateParseError: If the text is unparsable, in the future, or more
                        than `maxAgeYears` years in the past.
    """
    if text is None:
        raise DateParseError("", "date of birth is missing")

    cleaned = text.strip()
    if not cleaned:
        raise DateParseError(text, "date of birth is empty")

    today = today or date.today()

    if "/" in cleaned:
        parts = cleaned.split("/")
        if len(parts) != 3:
            raise DateParseError(text, "expected DD/MM/YYYY")
        day, month, year = (_componentToInt(p) for p in parts)
        dob = _buildDate(text, year, month, day)
    elif "-" in cleaned:
        parts = cleaned.split("-")
        if len(parts) != 3:
            raise DateParseError(text, "expected DD-MM-YYYY or YYYY-MM-DD")
        if len(parts[0]) == 4:
            year, month, day = (_componentToInt(p) for p in parts)
        else:
            day, month, year = (_componentToInt(p) for p in parts)
        dob = _buildDate(text, year, month, day)
    else:
        dob = _parseGeneric(cleaned)

    if dob > today:
        raise DateParseError(text, "date is in the future")

    if dob < _subtractYears(today, maxAgeYears):
        raise DateParseError(text, f"date is more than {maxAgeYears} years in the past")

    return dob


def parseDate(
    text: str,
    today: Optional[date] = None,
    maxAgeYears: int = DEFAULT_MAX_AGE_YEARS
) -> Optional[date]:
    """
    Parse a date of birth, returning None instead of raising.

    See parseDateStrict() for the accepted formats and range checks.
    """
    try:
        return parseDateStrict(text, today, maxAgeYears)
    except DateParseError as e:
        logger.debug(str(e))
        return None


def calculateAge(dob: date, today: Optional[date] = None) -> int:
    """
    Age in completed years on `today`.

    Args:
        dob: Date of birth.
        today: Reference date (defaults to date.today()).

    Returns:
        int: Year difference, minus one if the birthday is still ahead.
    """
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


class DateOfBirthProcessor:
    """
    Derives age and adult status for an IdentityRecord.

    An unusable date of birth is not fatal: the record keeps age/isAdult
    unset so callers can treat them as unknown.
    """

    def __init__(
        self,
        adultAge: int = DEFAULT_ADULT_AGE,
        maxAgeYears: int = DEFAULT_MAX_AGE_YEARS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize DateOfBirthProcessor.

        Args:
            adultAge: Minimum age considered adult.
            maxAgeYears: Oldest plausible age; older dates are rejected.
            logger: Logger instance for debug output.
        """
        self._adultAge = adultAge
        self._maxAgeYears = maxAgeYears
        self._logger = logger or logging.getLogger(__name__)

    def enrich(self, record: IdentityRecord, today: Optional[date] = None) -> IdentityRecord:
        """
        Fill in the derived age of a record.

        Args:
            record: Parsed record.
            today: Reference date (defaults to date.today()).

        Returns:
            The same record, with `age` set if the date of birth is usable.
        """
        record.setDerivedAge(None, self._adultAge)

        try:
            dob = parseDateStrict(record.dateOfBirth, today, self._maxAgeYears)
        except DateParseError as e:
            self._logger.warning(f"Age not derived: {e}")
            return record

        record.setDerivedAge(calculateAge(dob, today), self._adultAge)
        self._logger.debug(f"Calculated age: {record.age}, isAdult: {record.isAdult}")
        return record
