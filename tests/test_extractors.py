"""Tests for address_dedup.algorithms.extractors."""

from datetime import date, datetime

import pytest

from address_dedup.algorithms.extractors import (
    BLANK_FILTER,
    coordinate_pair,
    date_value,
    first_match,
    is_blank,
    is_pobox,
    parse_date,
    pobox_filter,
    raw_value,
    trimmed_equal,
    values_equal,
)
from address_dedup.algorithms.rules import DEFAULT_RULES
from address_dedup.errors import TypeMismatch


def _extract(rule: str, address):
    return first_match("address", DEFAULT_RULES.regex(rule))({"address": address})


# ---- regex extractors -------------------------------------------------------


class TestSimilarAddress:
    def test_street_abbreviation_variants_agree(self):
        assert _extract("similar_address", "123 Main St") == "123 Main "
        assert _extract("similar_address", "123 Main Street") == "123 Main "

    def test_requires_leading_number(self):
        assert _extract("similar_address", "Main St 123") is None

    def test_different_house_numbers(self):
        assert _extract("similar_address", "12 Main St") != _extract("similar_address", "123 Main St")


class TestSimilarText:
    def test_first_letter_run_capped_at_four(self):
        assert _extract("similar_text", "123 Main St") == "Main"
        assert _extract("similar_text", "123 Mainland Rd") == "Main"

    def test_short_words(self):
        assert _extract("similar_text", "9 Oak Ave") == "Oak"

    def test_no_letters(self):
        assert _extract("similar_text", "12345") is None


class TestNumericId:
    def test_first_digit_run(self):
        assert _extract("numeric_id", "Apt 4B, 200 Elm") == "4"
        assert _extract("numeric_id", "200 Elm Apt 4B") == "200"

    def test_no_digits(self):
        assert _extract("numeric_id", "Rural Route") is None


class TestStreetName:
    def test_skips_short_words(self):
        assert _extract("street_name", "123 Main Street") == "Street"

    def test_first_long_word(self):
        assert _extract("street_name", "7 Lakeshore Drive") == "Lakeshore"

    def test_none_long_enough(self):
        assert _extract("street_name", "1 Elm St") is None


class TestFacilityName:
    def test_leading_name_followed_by_word(self):
        assert _extract("facility_name", "Mercy Hospital, 10 Oak Ave") == "Mercy"

    def test_lookahead_not_consumed(self):
        assert _extract("facility_name", "Mercy Clinic") == "Mercy"

    def test_needs_following_word(self):
        assert _extract("facility_name", "Mercy, 10 Oak Ave") is None

    def test_numbered_address(self):
        assert _extract("facility_name", "123 Main St") is None


class TestFirstMatch:
    def test_none_value_is_absent(self):
        assert _extract("similar_text", None) is None

    def test_empty_value_is_absent(self):
        assert _extract("similar_text", "") is None

    def test_non_string_value_is_stringified(self):
        assert _extract("numeric_id", 4021) == "4021"


# ---- other extractors -------------------------------------------------------


class TestRawValue:
    def test_keeps_blank_string(self):
        assert raw_value("address")({"address": ""}) == ""


class TestCoordinatePair:
    def test_joins_lon_lat(self):
        extract = coordinate_pair("lon", "lat")
        assert extract({"lon": -71.06, "lat": 42.36}) == "-71.06, 42.36"

    def test_missing_coordinate_is_absent(self):
        extract = coordinate_pair("lon", "lat")
        assert extract({"lon": -71.06, "lat": None}) is None
        assert extract({"lon": "", "lat": "42.36"}) is None


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2020-01-01") == date(2020, 1, 1)

    def test_iso_datetime_string(self):
        assert parse_date("2020-01-01T08:30:00") == datetime(2020, 1, 1, 8, 30)

    def test_date_object_passthrough(self):
        d = date(2021, 5, 4)
        assert parse_date(d) is d

    def test_blank_is_absent(self):
        assert parse_date("") is None
        assert parse_date(None) is None

    def test_unparseable_string(self):
        with pytest.raises(TypeMismatch):
            parse_date("next tuesday")

    def test_wrong_type(self):
        with pytest.raises(TypeMismatch):
            parse_date(20200101)

    def test_date_value_extractor(self):
        assert date_value("seen")({"seen": "2022-12-31"}) == date(2022, 12, 31)


# ---- comparators ------------------------------------------------------------


class TestComparators:
    def test_absent_never_equal(self):
        assert values_equal(None, None) is False
        assert values_equal("x", None) is False

    def test_blank_strings_equal(self):
        assert values_equal("", "") is True

    def test_trimmed_equal(self):
        assert trimmed_equal(" 12", "12 ") is True
        assert trimmed_equal("12", "13") is False
        assert trimmed_equal(None, "12") is False


# ---- exclusion filters ------------------------------------------------------


class TestPoBox:
    @pytest.mark.parametrize(
        "address",
        [
            "PO BOX 12",
            "P.O. BOX 5",
            "P O BOX 5",
            "POBOX 99",
            "P.O. 7",
            "P.O 7",
            "Unit 4 PO BOX 77",
        ],
    )
    def test_matches(self, address):
        assert is_pobox(address)

    @pytest.mark.parametrize(
        "address",
        ["123 Main St", "po box 12", "", None, "12 POBOXES Ln"],
    )
    def test_does_not_match(self, address):
        assert not is_pobox(address)

    def test_filter_object(self):
        f = pobox_filter()
        assert f.name == "pobox"
        assert f.excludes("PO BOX 1")
        assert not f.excludes("1 Elm St")


class TestBlank:
    def test_only_empty_string(self):
        assert is_blank("")
        assert not is_blank(" 1 Elm St")
        assert not is_blank(None)

    def test_filter_object(self):
        assert BLANK_FILTER.name == "blank"
        assert BLANK_FILTER.excludes("")
