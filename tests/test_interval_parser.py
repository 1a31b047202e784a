"""
Tests for interval parsing.
"""

import pendulum
import pytest

from timeframe.config import AppConfig
from timeframe.domain.exceptions import InvalidArgument, InvalidRange, ParseError
from timeframe.domain.models import Timeframe
from timeframe.parsing.interval_parser import IntervalParser, parse
from timeframe.parsing.iso8601 import IntervalSide, SideKind, complete_shorthand


def tf(start: str, end: str) -> Timeframe:
    return Timeframe.of(start, end)


class TestTopLevelDispatch:
    """Tests for the accepted input shapes."""

    def test_canonical_interval(self):
        """Test the canonical ISO 8601 form."""
        assert parse("2009-01-01/2010-01-01") == Timeframe.of_year(2009)

    def test_plain_year(self):
        """Test a year given as an integer or a string."""
        assert parse(2009) == Timeframe.of_year(2009)
        assert parse("2009") == Timeframe.of_year(2009)
        assert parse(" 2009 ") == Timeframe.of_year(2009)

    def test_json_object(self):
        """Test a JSON object with camel-cased keys."""
        json_text = '  {"startDate":"2009-05-01", "endDate":"2009-06-01"}\n'

        assert parse(json_text) == Timeframe.of_month(2009, 5)

    def test_json_object_with_snake_case_keys(self):
        """Test a JSON object with snake-cased keys."""
        json_text = '{"start_date": "2009-05-01", "end_date": "2009-06-01"}'

        assert parse(json_text) == Timeframe.of_month(2009, 5)

    def test_json_string(self):
        """Test a canonical interval wrapped in a JSON string."""
        assert parse('"2009-05-01/2009-06-01"') == Timeframe.of_month(2009, 5)

    def test_mapping(self):
        """Test both mapping key spellings resolve identically."""
        camel = {"startDate": "2009-05-01", "endDate": "2009-06-01"}
        snake = {"start_date": pendulum.date(2009, 5, 1), "end_date": "2009-06-01"}

        assert parse(camel) == Timeframe.of_month(2009, 5)
        assert parse(snake) == parse(camel)

    def test_timeframe_passes_through(self):
        """Test an existing timeframe is returned as is."""
        year = Timeframe.of_year(2009)

        assert parse(year) is year

    @pytest.mark.parametrize(
        "timeframe",
        [
            Timeframe.of_year(2009),
            Timeframe.of_month(2008, 2),
            Timeframe.of("2007-03-01", "2008-05-11"),
            Timeframe.of("2009-05-05", "2009-05-05"),
        ],
    )
    def test_round_trip(self, timeframe):
        """Test parsing the canonical string and JSON value reproduce the timeframe."""
        assert parse(timeframe.to_canonical_string()) == timeframe
        assert parse(timeframe.to_json_value()) == timeframe

    @pytest.mark.parametrize("value", [None, 3.5, True, ["2009"], "[2009]"])
    def test_unsupported_shapes(self, value):
        """Test inputs of the wrong shape."""
        with pytest.raises(InvalidArgument):
            parse(value)

    def test_mapping_without_known_keys(self):
        """Test a mapping with neither key spelling."""
        with pytest.raises(InvalidArgument, match="startDate"):
            parse({"from": "2009-01-01", "to": "2009-02-01"})

    def test_invalid_json(self):
        """Test a string that looks like JSON but is not."""
        with pytest.raises(ParseError):
            parse('{"startDate": ')

    @pytest.mark.parametrize(
        "value, error",
        [
            (0, InvalidArgument),
            (99999, InvalidArgument),
            (9999, InvalidArgument),
            ("0000", ParseError),
            ("9999", ParseError),
        ],
    )
    def test_years_outside_the_calendar(self, value, error):
        """Test years pendulum cannot represent raise library errors."""
        with pytest.raises(error, match="out of range"):
            parse(value)


class TestIso8601Intervals:
    """Tests for the ISO 8601 interval grammar."""

    def test_alternative_separator(self):
        """Test the legacy double-hyphen separator."""
        assert parse("2007-03-01--2008-05-11") == parse("2007-03-01/2008-05-11")
        assert parse("2007-03-01--2008-05-11") == tf("2007-03-01", "2008-05-11")

    def test_shorthand_end(self):
        """Test an end that omits the year and month."""
        assert parse("2007-11-13/15") == tf("2007-11-13", "2007-11-16")

    def test_shorthand_end_with_month(self):
        """Test an end that omits only the year."""
        assert parse("2007-11-13/12-01") == tf("2007-11-13", "2007-12-02")

    def test_timed_sides_include_the_end_day(self):
        """Test datetimes collapse to days, including the end day."""
        interval = "2007-03-01T13:00:00Z/2008-05-11T15:30:00Z"

        assert parse(interval) == tf("2007-03-01", "2008-05-12")

    def test_time_of_day_shorthand(self):
        """Test a bare end time borrowing the start date."""
        assert parse("2007-12-14T13:30/15:30") == tf("2007-12-14", "2007-12-15")

    def test_start_and_duration(self):
        """Test a start date followed by a duration."""
        assert parse("2007-03-01/P1Y2M10DT2H30M") == tf("2007-03-01", "2008-05-11")
        assert parse("2009-01-01/P1M") == Timeframe.of_month(2009, 1)

    def test_duration_landing_on_leap_day(self):
        """Test a one-year duration from February 28th."""
        assert parse("2007-02-28--P1Y") == tf("2007-02-28", "2008-02-29")
        assert parse("2007-02-28/p1y") == tf("2007-02-28", "2008-02-29")

    def test_duration_and_end(self):
        """Test a duration followed by an end date."""
        assert parse("P1Y--2008-02-29") == tf("2007-03-01", "2008-03-01")
        assert parse("P1D/2009-01-10") == tf("2009-01-10", "2009-01-11")

    @pytest.mark.parametrize(
        "text",
        [
            "nonsense",
            "2009-01-01",
            "2009-01-01/2009-02-01/2009-03-01",
            "2009-01-01/",
            "P1Y/P2Y",
            "15:30/2009-01-01",
            "P1Y/15:30",
            "2009-13-45/2010-01-01",
        ],
    )
    def test_malformed_intervals(self, text):
        """Test strings that are not intervals."""
        with pytest.raises(ParseError):
            parse(text)

    def test_time_of_day_shorthand_after_zoned_start(self):
        """Test a bare end time after a start carrying a zone designator or offset."""
        assert parse("2007-11-13T10:00Z/15:00") == tf("2007-11-13", "2007-11-14")
        assert parse("2007-11-13T10:00+01:00/15:00") == tf("2007-11-13", "2007-11-14")

    @pytest.mark.parametrize(
        "text",
        [
            "2007-01-01/P99999Y",
            "P99999Y/2007-01-01",
            "9999-12-30/31",
        ],
    )
    def test_intervals_beyond_the_calendar(self, text):
        """Test intervals whose arithmetic leaves the representable dates."""
        with pytest.raises(ParseError, match="out of range|representable"):
            parse(text)

    def test_reversed_interval(self):
        """Test an interval ending before it starts."""
        with pytest.raises(InvalidRange):
            parse("2009-05-01/2009-01-01")


class TestIntervalSide:
    """Tests for side classification and shorthand completion."""

    def test_classify(self):
        """Test each kind of side."""
        assert IntervalSide.classify("P1Y").kind is SideKind.DURATION
        assert IntervalSide.classify("15:30").kind is SideKind.TIME

        side = IntervalSide.classify("2007-03-01T13:00")
        assert side.kind is SideKind.DATE
        assert side.date_part == "2007-03-01"
        assert side.time_part == "13:00"

    def test_empty_side(self):
        """Test an empty side."""
        with pytest.raises(ParseError):
            IntervalSide.classify("  ")

    def test_complete_shorthand(self):
        """Test borrowing leading components."""
        assert complete_shorthand("15", "2007-11-13", "-") == "2007-11-15"
        assert complete_shorthand("12-01", "2007-11-13", "-") == "2007-12-01"
        assert complete_shorthand("2008-05-11", "2007-11-13", "-") == "2008-05-11"


class TestParserConfiguration:
    """Tests for parser settings."""

    def test_reject_year_boundary_crossing(self):
        """Test the strict year boundary policy."""
        parser = IntervalParser(allow_year_crossing=False)

        with pytest.raises(InvalidRange):
            parser.parse("2008-12-01/2009-02-01")

        assert parser.parse("2009") == Timeframe.of_year(2009)
        assert parser.parse("2009-02-01/2009-04-01") == tf("2009-02-01", "2009-04-01")

    def test_custom_separators(self):
        """Test restricting the accepted separators."""
        parser = IntervalParser(separators=["/"])

        with pytest.raises(ParseError):
            parser.parse("2007-03-01--2008-05-11")

    def test_from_config(self):
        """Test building a parser from application config."""
        config = AppConfig(parser={"year_boundary_policy": "reject", "separators": ["--"]})

        parser = IntervalParser.from_config(config)

        assert parser.allow_year_crossing is False
        assert parser.separators == ("--",)
