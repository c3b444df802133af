from datetime import date, datetime

import pytest

from semences.adapters.parsers import parse_date, parse_entier, parse_enum, parse_quantite_kg
from semences.domain.models import CheckResult, LotStatus


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("12,5 kg", 12.5),
        ("150", 150.0),
        ("800 g", 0.8),
        ("0.5 kilogrammes", 0.5),
        ("1 200 kg", 1200.0),
        ("1 200,5", 1200.5),
        ("1'500g", 1.5),
        ("2 500 000", 2500000.0),
        (7, 7.0),
        (2.25, 2.25),
        ("", None),
        ("abc", None),
        (None, None),
    ],
)
def test_parse_quantite_kg(txt, expected):
    assert parse_quantite_kg(txt) == expected


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("50 000", 50000),
        ("50.000", 50000),
        ("50000.0", 50000),
        ("1.000.000", 1000000),
        ("1'200", 1200),
        ("120000", 120000),
        (75000.0, 75000),
        (42, 42),
        ("", None),
        ("beaucoup", None),
        (None, None),
    ],
)
def test_parse_entier(txt, expected):
    assert parse_entier(txt) == expected


@pytest.mark.parametrize(
    "val,expected",
    [
        ("2024-05-20", date(2024, 5, 20)),
        ("2024-05-20T10:00:00", date(2024, 5, 20)),
        ("20/05/2024", date(2024, 5, 20)),
        ("20-05-2024", date(2024, 5, 20)),
        ("20/05/24", date(2024, 5, 20)),
        (datetime(2024, 5, 20, 8, 30), date(2024, 5, 20)),
        (date(2024, 5, 20), date(2024, 5, 20)),
        ("pas une date", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date(val, expected):
    assert parse_date(val) == expected


def test_parse_enum_by_label_or_name():
    assert parse_enum(LotStatus, "Distribué") is LotStatus.DISTRIBUTED
    assert parse_enum(LotStatus, "en stock") is LotStatus.IN_STOCK
    assert parse_enum(LotStatus, "IN_STOCK") is LotStatus.IN_STOCK
    assert parse_enum(CheckResult, "fail") is CheckResult.FAIL
    assert parse_enum(CheckResult, CheckResult.PASS) is CheckResult.PASS


def test_parse_enum_unknown_value():
    assert parse_enum(LotStatus, "Perdu") is None
    assert parse_enum(LotStatus, "") is None
    assert parse_enum(LotStatus, None) is None
