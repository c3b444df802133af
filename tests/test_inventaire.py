from datetime import date

import pytest

from semences.domain.errors import NotFoundError, ValidationError
from semences.infra.store import new_store
from semences.usecases.inventaire import (
    rechercher_distributions,
    rechercher_stock,
    run_enregistrer_article,
    run_enregistrer_distribution,
    run_supprimer_article,
    run_supprimer_distribution,
)


@pytest.fixture
def store():
    return new_store()


def test_stock_entry_inherits_species_and_station_from_lot(store):
    item = run_enregistrer_article(store, {"lot_id": "24-AS-IV1-001", "quantity_kg": "80"}, today=date(2024, 3, 1))
    assert item.species_id == "esp-085"
    assert item.srs_id == "srs-04"
    assert item.quantity_kg == 80.0
    assert item.entry_date == date(2024, 3, 1)
    assert store.stock_items[0] is item


@pytest.mark.parametrize("data", [
    {"lot_id": "nope", "quantity_kg": "10"},
    {"lot_id": "24-AS-IV1-001", "quantity_kg": "0"},
    {"lot_id": "24-AS-IV1-001", "quantity_kg": ""},
])
def test_stock_entry_validation(store, data):
    with pytest.raises(ValidationError):
        run_enregistrer_article(store, data)
    assert len(store.stock_items) == 3


def test_stock_entry_refused_for_distributed_lot(store):
    with pytest.raises(ValidationError, match="déjà distribué"):
        run_enregistrer_article(store, {"lot_id": "22-TA-IV2-001", "quantity_kg": "10"})
    assert not any(s.lot_id == "22-TA-IV2-001" for s in store.stock_items)


def test_stock_update_and_delete(store):
    item = run_enregistrer_article(store, {"id": "STK-001", "lot_id": "23-PH-I3-001", "quantity_kg": "140"})
    assert item.quantity_kg == 140.0
    assert len(store.stock_items) == 3

    run_supprimer_article(store, "STK-001")
    assert [s.id for s in store.stock_items] == ["STK-002", "STK-003"]
    with pytest.raises(NotFoundError):
        run_supprimer_article(store, "STK-001")


def test_search_stock(store):
    assert [s.id for s in rechercher_stock(store, terme="frêne")] == ["STK-002"]
    assert [s.id for s in rechercher_stock(store, terme="azrou")] == ["STK-001", "STK-003"]
    assert [s.id for s in rechercher_stock(store, debut=date(2024, 1, 1))] == ["STK-003"]


def test_distribution_does_not_change_stock_quantity(store):
    dist = run_enregistrer_distribution(store, {
        "stock_item_id": "STK-003", "quantity_kg": "15", "destination": "Pépinière Ifrane",
    }, today=date(2024, 6, 1))
    assert dist.distribution_date == date(2024, 6, 1)
    assert store.distributions[0] is dist
    assert next(s for s in store.stock_items if s.id == "STK-003").quantity_kg == 120


@pytest.mark.parametrize("data", [
    {"stock_item_id": "nope", "quantity_kg": "5", "destination": "X"},
    {"stock_item_id": "STK-001", "quantity_kg": "-5", "destination": "X"},
    {"stock_item_id": "STK-001", "quantity_kg": "5", "destination": "  "},
])
def test_distribution_validation(store, data):
    with pytest.raises(ValidationError):
        run_enregistrer_distribution(store, data)
    assert len(store.distributions) == 3


def test_distribution_delete(store):
    run_supprimer_distribution(store, "DIST-002")
    assert [d.id for d in store.distributions] == ["DIST-001", "DIST-003"]


def test_search_distributions(store):
    assert [d.id for d in rechercher_distributions(store, terme="alep")] == ["DIST-001", "DIST-003"]
    assert [d.id for d in rechercher_distributions(store, terme="23-FA")] == ["DIST-002"]
    assert [d.id for d in rechercher_distributions(store, terme="rabat")] == ["DIST-001"]
    in_q1 = rechercher_distributions(store, debut=date(2024, 1, 1), fin=date(2024, 3, 31))
    assert [d.id for d in in_q1] == ["DIST-001", "DIST-002"]
