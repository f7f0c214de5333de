"""Tests for header and row normalization."""

from decimal import Decimal

import pytest

from stockload.ingestion.normalize import (
    SimpleProduct,
    SkuProduct,
    filter_eligible,
    normalize_header,
    normalize_simple,
    normalize_sku,
    parse_decimal,
    parse_integer,
)


class TestHeaders:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("name", "name"),
            ("  Price ", "price"),
            ("Reorder Level", "reorder_level"),
            ("REORDER \t  level", "reorder_level"),
        ],
    )
    def test_normalize_header(self, raw, expected):
        assert normalize_header(raw) == expected


class TestNumbers:
    def test_parse_decimal(self):
        assert parse_decimal("9.99") == Decimal("9.99")
        assert parse_decimal(" 0.50 ") == Decimal("0.50")
        assert parse_decimal("-3") == Decimal("-3")

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1.2.3", "NaN", "Infinity", "-inf"])
    def test_parse_decimal_degrades_to_none(self, raw):
        assert parse_decimal(raw) is None

    def test_parse_integer(self):
        assert parse_integer("5") == 5
        assert parse_integer("5.0") == 5
        assert parse_integer("1e3") == 1000

    def test_parse_integer_truncates_toward_zero(self):
        assert parse_integer("5.5") == 5
        assert parse_integer("5.99") == 5
        assert parse_integer("-2.7") == -2
        assert parse_integer("0.4") == 0

    def test_parse_integer_64_bit_bounds(self):
        assert parse_integer("9223372036854775807") == 2**63 - 1
        assert parse_integer("-9223372036854775808") == -(2**63)

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "five",
            "nan",
            "9223372036854775808",
            "99999999999999999999",
            "1e999999999",
            "-1e999999999",
        ],
    )
    def test_parse_integer_degrades_to_none(self, raw):
        assert parse_integer(raw) is None


class TestSimpleRows:
    def test_normalize(self):
        row = normalize_simple({"name": " Widget ", "price": "9.99", "quantity": "5"})
        assert row == SimpleProduct(name="Widget", price=Decimal("9.99"), quantity=5)
        assert row.is_eligible()
        assert row.as_params() == ("Widget", Decimal("9.99"), 5)

    def test_missing_fields(self):
        row = normalize_simple({"price": "oops"})
        assert row == SimpleProduct(name="", price=None, quantity=None)
        assert not row.is_eligible()


class TestSkuRows:
    def test_status_defaults_to_active(self):
        row = normalize_sku(
            {
                "sku": "A1",
                "name": "Bolt",
                "quantity": "100",
                "price": "0.50",
                "reorder_level": "10",
                "status": "",
            }
        )
        assert row == SkuProduct(
            sku="A1",
            name="Bolt",
            quantity=100,
            price=Decimal("0.50"),
            reorder_level=10,
            status="active",
        )
        assert row.as_params() == ("A1", "Bolt", 100, Decimal("0.50"), 10, "active")

    def test_status_kept_verbatim(self):
        row = normalize_sku({"sku": "A1", "name": "Bolt", "status": "  Discontinued "})
        assert row.status == "Discontinued"

    def test_absent_status_key(self):
        assert normalize_sku({"sku": "A1", "name": "Bolt"}).status == "active"

    @pytest.mark.parametrize(
        "record",
        [
            {"sku": "", "name": "Bolt"},
            {"sku": "A1", "name": "   "},
            {"name": "Bolt"},
            {},
        ],
    )
    def test_missing_required_fields_ineligible(self, record):
        assert not normalize_sku(record).is_eligible()


class TestFilter:
    def test_keeps_order_and_drops_ineligible(self):
        rows = [
            SimpleProduct("b", None, None),
            SimpleProduct("", Decimal("1"), 2),
            SimpleProduct("a", None, None),
        ]
        assert filter_eligible(rows) == [rows[0], rows[2]]

    def test_accepts_generator(self):
        records = [{"name": "x"}, {"name": ""}]
        assert len(filter_eligible(normalize_simple(r) for r in records)) == 1
