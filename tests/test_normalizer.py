"""Tests for the field normalizer."""

import pytest

from wohnung_finder.services.normalizer import (
    collapse_whitespace,
    normalize_fields,
    parse_price,
    parse_rooms,
    parse_size,
)


class TestNormalizeFields:
    """Tests for normalize_fields()."""

    def test_typical_card_text(self):
        fields = normalize_fields("3,5 Zimmer, 680 € Kaltmiete, 75 m²")

        assert fields.rooms == 3.5
        assert fields.price == 680
        assert fields.size == 75

    def test_no_numbers(self):
        fields = normalize_fields("keine Angaben")

        assert fields.price is None
        assert fields.rooms is None
        assert fields.size is None

    def test_empty_and_none(self):
        assert normalize_fields("") == (None, None, None)
        assert normalize_fields(None) == (None, None, None)

    def test_whitespace_is_collapsed_first(self):
        fields = normalize_fields("2\n   Zimmer\t\t 540\n€")

        assert fields.rooms == 2
        assert fields.price == 540


class TestParsePrice:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("680 €", 680),
            ("Warmmiete 1.250 €", 1250),
            ("1.250,50 € warm", 1250.5),
            ("12.345,67€", 12345.67),
            ("nur 99€", 99),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_price(text) == expected

    def test_requires_currency_mark(self):
        assert parse_price("680 Euro") is None

    def test_single_digit_is_ignored(self):
        assert parse_price("5 €") is None

    def test_first_match_wins(self):
        assert parse_price("Kalt 540 €, warm 690 €") == 540


class TestParseRooms:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2 Zimmer", 2),
            ("3,5 Zimmer", 3.5),
            ("1 Zi.", 1),
            ("4 ZIMMER", 4),
            ("2.5 Zi", 2.5),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_rooms(text) == expected

    def test_hyphenated_room_count_is_not_matched(self):
        # "2-Zimmer-Wohnung" in titles carries no separate count
        assert parse_rooms("2-Zimmer-Wohnung") is None

    def test_no_room_token(self):
        assert parse_rooms("Wohnung mit Balkon") is None


class TestParseSize:
    @pytest.mark.parametrize("text", ["75 m²", "75m²", "75 qm", "75 QM", "75 m2"])
    def test_units(self, text):
        assert parse_size(text) == 75

    def test_needs_two_digits(self):
        assert parse_size("9 m²") is None

    def test_unit_must_end_token(self):
        assert parse_size("75 m2x") is None


def test_collapse_whitespace():
    assert collapse_whitespace("  a \n\n b\t c  ") == "a b c"
    assert collapse_whitespace(None) == ""
