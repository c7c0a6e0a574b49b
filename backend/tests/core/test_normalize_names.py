"""Name Normalization — verifies storage/display conversion of site and location names."""

import pytest

from rfid_ledger.core.normalize_names import denormalize, display_location, normalize


def test_normalize_trims_uppercases_and_replaces_spaces():
    assert normalize("  Main Site ") == "MAIN..SITE"


def test_denormalize_turns_separator_into_space():
    assert denormalize(" DOCK..A ") == "DOCK A"


@pytest.mark.parametrize("raw", ["Main Site", "dock a", "  North  Gate  ", "X", ""])
def test_round_trip_is_trimmed_uppercase(raw):
    assert denormalize(normalize(raw)) == raw.strip().upper()


def test_separator_in_input_does_not_round_trip():
    """No escaping: '..' already in a name is displayed as a space."""
    assert normalize("A..B") == "A..B"
    assert denormalize(normalize("A..B")) == "A B"


def test_none_passes_through():
    assert normalize(None) is None
    assert denormalize(None) is None


def test_display_location_joins_site_then_location():
    assert display_location("MAIN..SITE", "DOCK..A") == "MAIN SITE DOCK A"
