from math import inf, isclose

from semences.domain.formulas import balance, coverage, covered_quantity, seed_quantity_kg


def test_seed_quantity_kg_typical():
    # 120 000 plants de Pin d'Alep à 0,5 kg / 1000 plants
    assert isclose(seed_quantity_kg(120000, 0.5), 60.0)
    assert isclose(seed_quantity_kg(75000, 15.0), 1125.0)
    assert isclose(seed_quantity_kg(1500, 1.2), 1.8)


def test_seed_quantity_kg_without_coefficient_is_zero():
    assert seed_quantity_kg(50000, None) == 0.0
    assert seed_quantity_kg(50000, 0) == 0.0
    assert seed_quantity_kg(0, 2.0) == 0.0
    assert seed_quantity_kg(None, 2.0) == 0.0


def test_balance_sign():
    assert balance(60, 150) == 90.0
    assert balance(1125, 0) == -1125.0
    assert balance(10, 10) == 0.0


def test_coverage_ratio():
    assert isclose(coverage(60, 150), 250.0)
    assert isclose(coverage(200, 50), 25.0)
    assert coverage(0, 0) == 100.0
    assert coverage(0, 12) == inf


def test_covered_quantity_never_above_need():
    assert covered_quantity(60, 150) == 60.0
    assert covered_quantity(60, 20) == 20.0
    assert covered_quantity(0, 20) == 0.0
