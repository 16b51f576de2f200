"""Unit tests for DateStub, TimeStub and reference types."""

from datetime import date, datetime, timedelta, timezone

import pytest

from fqlclient.errors import DateTimeFormatError, DocumentFormatError
from fqlclient.values import DateStub, DocumentReference, Module, TimeStub


class TestDateStub:
    """Tests for DateStub."""

    def test_from_string_valid(self):
        assert DateStub.from_string("2023-03-09").date_string == "2023-03-09"

    @pytest.mark.parametrize(
        "text",
        ["2023-13-01", "2023-00-10", "2023-01-32", "23-01-01", "2023-01-01T00:00:00Z", ""],
    )
    def test_from_string_rejects_malformed(self, text):
        with pytest.raises(DateTimeFormatError):
            DateStub.from_string(text)

    def test_from_string_accepts_extended_years(self):
        assert DateStub.from_string("+12345-01-01").date_string == "+12345-01-01"
        assert DateStub.from_string("-0001-01-01").date_string == "-0001-01-01"

    def test_from_string_rejects_non_string(self):
        with pytest.raises(TypeError, match="Expected string"):
            DateStub.from_string(20230309)

    def test_from_date(self):
        assert DateStub.from_date(date(2023, 3, 9)) == DateStub("2023-03-09")

    def test_from_datetime_uses_utc_date(self):
        local = datetime(2023, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert DateStub.from_date(local) == DateStub("2023-03-10")

    def test_to_date(self):
        assert DateStub("2023-03-09").to_date() == date(2023, 3, 9)

    def test_to_date_out_of_range(self):
        with pytest.raises(DateTimeFormatError):
            DateStub.from_string("+12345-01-01").to_date()

    @pytest.mark.parametrize("text", ["not-a-date", "2023-02-30T00:00:00Z", "2023/03/09"])
    def test_constructor_validates(self, text):
        with pytest.raises(DateTimeFormatError, match="Expected a plain date string"):
            DateStub(text)

    def test_constructor_rejects_non_string(self):
        with pytest.raises(TypeError):
            DateStub(None)

    def test_str_and_repr(self):
        stub = DateStub("2023-03-09")
        assert str(stub) == "2023-03-09"
        assert repr(stub) == 'DateStub("2023-03-09")'


class TestTimeStub:
    """Tests for TimeStub."""

    @pytest.mark.parametrize(
        "text",
        [
            "2023-03-09T10:00:00Z",
            "2023-03-09T10:00:00.123Z",
            "2023-03-09T10:00:00.123456789z",
            "2023-03-09T10:00:00+05:30",
            "2023-03-09T10:00:00-0800",
        ],
    )
    def test_from_string_valid(self, text):
        assert TimeStub.from_string(text).iso_string == text

    @pytest.mark.parametrize(
        "text",
        ["2023-03-09", "2023-03-09T10:00:00", "2023-03-09 10:00:00Z", "2023-03-09T24:00:00Z"],
    )
    def test_from_string_rejects_malformed(self, text):
        with pytest.raises(DateTimeFormatError, match="Expected an ISO date string"):
            TimeStub.from_string(text)

    def test_from_string_rejects_non_string(self):
        with pytest.raises(TypeError):
            TimeStub.from_string(None)

    def test_from_datetime_aware(self):
        dt = datetime(2023, 3, 9, 15, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert TimeStub.from_datetime(dt).iso_string == "2023-03-09T10:00:00Z"

    def test_from_datetime_naive_is_utc(self):
        dt = datetime(2023, 3, 9, 10, 0, 0, 500000)
        assert TimeStub.from_datetime(dt).iso_string == "2023-03-09T10:00:00.500000Z"

    def test_to_datetime(self):
        dt = TimeStub("2023-03-09T10:00:00Z").to_datetime()
        assert dt == datetime(2023, 3, 9, 10, 0, tzinfo=timezone.utc)

    def test_to_datetime_truncates_nanoseconds(self):
        dt = TimeStub("2023-03-09T10:00:00.123456789Z").to_datetime()
        assert dt.microsecond == 123456

    @pytest.mark.parametrize("text", ["yesterday", "2023-03-09", "10:00:00Z"])
    def test_constructor_validates(self, text):
        with pytest.raises(DateTimeFormatError, match="Expected an ISO date string"):
            TimeStub(text)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2023-03-09T10:00:00.5Z", datetime(2023, 3, 9, 10, 0, 0, 500000, tzinfo=timezone.utc)),
            ("2023-03-09T10:00:00.1234567z", datetime(2023, 3, 9, 10, 0, 0, 123456, tzinfo=timezone.utc)),
            (
                "2023-03-09T10:00:00-0800",
                datetime(2023, 3, 9, 10, 0, tzinfo=timezone(timedelta(hours=-8))),
            ),
            (
                "2023-03-09T10:00:00−05:30",
                datetime(2023, 3, 9, 10, 0, tzinfo=timezone(-timedelta(hours=5, minutes=30))),
            ),
        ],
    )
    def test_to_datetime_normalizes_fraction_and_zone(self, text, expected):
        assert TimeStub(text).to_datetime() == expected

    def test_to_datetime_out_of_range(self):
        with pytest.raises(DateTimeFormatError, match="could not be converted"):
            TimeStub("+12345-01-01T00:00:00Z").to_datetime()

    def test_repr(self):
        assert repr(TimeStub("2023-03-09T10:00:00Z")) == 'TimeStub("2023-03-09T10:00:00Z")'


class TestReferences:
    """Tests for DocumentReference and Module."""

    def test_document_reference_from_string(self):
        ref = DocumentReference.from_string("Authors:123")
        assert ref.coll == "Authors"
        assert isinstance(ref.coll, Module)
        assert ref.id == "123"

    def test_document_reference_requires_colon(self):
        with pytest.raises(DocumentFormatError):
            DocumentReference.from_string("Authors")

    def test_module_is_a_string(self):
        mod = Module("Date")
        assert mod == "Date"
        assert repr(mod) == "Module('Date')"
