"""
Unit tests for the item catalog and currency handling.

Tests lookup, overwrite semantics and input validation.
"""

from decimal import Decimal

import pytest

from recycle_tracker.core.catalog import Catalog
from recycle_tracker.core.money import format_currency, to_amount
from recycle_tracker.errors import InvalidInputError


class TestToAmount:
    """Test conversion of raw input to currency amounts."""

    def test_float_keeps_short_repr(self):
        """Verify 0.05 becomes exactly Decimal('0.05')."""
        assert to_amount(0.05) == Decimal("0.05")

    def test_string_and_int_inputs(self):
        """Verify numeric strings and ints are accepted."""
        assert to_amount("0.10") == Decimal("0.10")
        assert to_amount(" 2 ") == Decimal("2.00")
        assert to_amount(3) == Decimal("3.00")

    def test_rounds_half_up_to_cents(self):
        """Verify sub-cent input is rounded half-up."""
        assert to_amount("0.125") == Decimal("0.13")
        assert to_amount("0.124") == Decimal("0.12")

    def test_zero_is_allowed(self):
        """Verify zero-value items are valid."""
        assert to_amount(0) == Decimal("0.00")

    def test_negative_rejected(self):
        """Verify negative amounts raise InvalidInputError."""
        with pytest.raises(InvalidInputError, match="cannot be negative"):
            to_amount(-0.01)

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", True])
    def test_malformed_rejected(self, value):
        """Verify malformed and non-finite input is rejected."""
        with pytest.raises(InvalidInputError):
            to_amount(value)

    def test_invalid_input_is_value_error(self):
        """Verify InvalidInputError can be caught as ValueError."""
        with pytest.raises(ValueError):
            to_amount("-1")

    def test_format_currency(self):
        """Verify two-decimal display formatting."""
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(Decimal("0.05")) == "$0.05"


class TestCatalog:
    """Test barcode lookup and registration."""

    def setup_method(self):
        """Set up a catalog with one entry."""
        self.catalog = Catalog()
        self.catalog.register("1234567890", "Plastic Bottle", 0.05)

    def test_lookup_known_barcode(self):
        """Verify a registered barcode resolves to its entry."""
        entry = self.catalog.lookup("1234567890")
        assert entry is not None
        assert entry.item_type == "Plastic Bottle"
        assert entry.unit_value == Decimal("0.05")

    def test_lookup_unknown_barcode(self):
        """Verify an unknown barcode returns None."""
        assert self.catalog.lookup("0000000000") is None

    def test_unknown_then_register(self):
        """Verify an unknown barcode becomes resolvable after registration."""
        assert self.catalog.lookup("0000000000") is None

        self.catalog.register("0000000000", "Mystery Item", 0.07)

        entry = self.catalog.lookup("0000000000")
        assert (entry.item_type, entry.unit_value) == ("Mystery Item", Decimal("0.07"))

    def test_overwrite_keeps_latest(self):
        """Verify registering the same barcode twice keeps only the latest mapping."""
        self.catalog.register("1234567890", "Glass Jar", "0.20")

        entry = self.catalog.lookup("1234567890")
        assert entry.item_type == "Glass Jar"
        assert entry.unit_value == Decimal("0.20")
        assert len(self.catalog) == 1

    def test_lookup_has_no_side_effects(self):
        """Verify lookups never add entries."""
        self.catalog.lookup("missing")
        self.catalog.lookup("missing")
        assert len(self.catalog) == 1

    def test_negative_value_rejected(self):
        """Verify negative values are rejected and nothing is stored."""
        with pytest.raises(InvalidInputError):
            self.catalog.register("555", "Broken", -1)
        assert self.catalog.lookup("555") is None

    def test_empty_fields_rejected(self):
        """Verify empty barcode or item type is rejected."""
        with pytest.raises(InvalidInputError, match="barcode is required"):
            self.catalog.register("", "Plastic Bottle", 0.05)
        with pytest.raises(InvalidInputError, match="item_type is required"):
            self.catalog.register("777", "   ", 0.05)

    def test_entries_snapshot(self):
        """Verify entries() returns a copy unaffected by later registrations."""
        entries = self.catalog.entries()
        self.catalog.register("2", "Aluminum Can", 0.10)
        assert len(entries) == 1
        assert len(self.catalog.entries()) == 2
