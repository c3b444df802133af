import random
import re
from datetime import date

import pytest

from semences.domain.codes import (
    fresh_id,
    lot_prefix,
    next_lot_id,
    program_id,
    provenance_code,
    sanitize_for_code,
    species_abbreviation,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Pinus halepensis", "PH"),
        ("Argania spinosa", "AS"),
        ("Astragalus armatus ssp. numidicus", "AA"),
        ("Quercus", "QU"),
        ("", "XX"),
        (None, "XX"),
    ],
)
def test_species_abbreviation(name, expected):
    assert species_abbreviation(name) == expected


def test_sanitize_for_code_keeps_only_ascii_alnum():
    assert sanitize_for_code("Sidi M'guild") == "SidiMguild"
    assert sanitize_for_code("Baraj mdaz") == "Barajmdaz"
    assert sanitize_for_code("Forêt-2") == "Fort2"
    assert sanitize_for_code(None) == ""


def test_provenance_code():
    assert provenance_code("I3", "Pinus halepensis", "Aknoul") == "I3-PH-Aknoul"
    assert provenance_code("IV1", "Cedrus atlantica", "Sidi M'guild") == "IV1-CA-SidiMguild"


def test_lot_prefix_uses_two_digit_year():
    assert lot_prefix(2024, "Pinus halepensis", "I3") == "24-PH-I3"
    assert lot_prefix(2003, "Argania spinosa", "IV1") == "03-AS-IV1"


def test_next_lot_id_first_and_following():
    assert next_lot_id("24-PH-I3", []) == "24-PH-I3-001"
    existing = ["24-PH-I3-001", "24-PH-I3-007", "23-PH-I3-009"]
    assert next_lot_id("24-PH-I3", existing) == "24-PH-I3-008"


def test_next_lot_id_prefix_match_is_exact():
    # le préfixe 24-PH-I3 ne compte pas les lots de la région I31
    existing = ["24-PH-I31-004", "24-PH-I3-002"]
    assert next_lot_id("24-PH-I3", existing) == "24-PH-I3-003"
    assert next_lot_id("24-PH-I31", existing) == "24-PH-I31-005"


def test_next_lot_id_ignores_non_numeric_suffix():
    assert next_lot_id("24-PH-I3", ["24-PH-I3-abc"]) == "24-PH-I3-001"


def test_fresh_id_skips_taken_identifiers():
    now = 1700000000.0
    first = fresh_id("BS", [], now=now)
    assert first == "BS-1700000000000"
    assert fresh_id("BS", [first], now=now) == "BS-1700000000001"


def test_program_id_format_and_uniqueness():
    rng = random.Random(42)
    pid = program_id([], today=date(2024, 6, 1), rng=rng)
    assert re.fullmatch(r"PE-2024-[0-9A-Z]{4}", pid)

    taken = {pid}
    rng = random.Random(42)
    other = program_id(taken, today=date(2024, 6, 1), rng=rng)
    assert other != pid
    assert other.startswith("PE-2024-")
