"""
Tests for the in-memory store, its repositories and JSON persistence.
"""

import json
from dataclasses import replace
from datetime import date

import pytest

from semences.domain.errors import NotFoundError
from semences.domain.formulas import seed_quantity_kg
from semences.domain.models import Lot, LotCategory, LotStatus, Provider, SeedNeed, StockItem
from semences.infra import store as store_mod
from semences.infra.store import (
    LotRepo,
    ProgramRepo,
    ProviderRepo,
    RECORD_TYPES,
    SeedStore,
    StockRepo,
    clear_cache,
    load_store,
    new_store,
    record_from_dict,
    record_to_dict,
    refresh_derived,
    save_store_json,
    store_from_dict,
    store_to_dict,
)


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def store():
    return new_store()


def test_fixture_dataset_is_complete(store):
    assert len(store.species) == 159
    assert len(store.regions) == 19
    assert len(store.srs) == 4
    assert len(store.lots) == 5
    assert len(store.stock_items) == 3
    assert len(store.seed_needs) == 4
    assert len(store.evaluation_programs) == 3
    for name in RECORD_TYPES:
        assert isinstance(getattr(store, name), list)


def test_fixture_need_quantities_are_recomputed(store):
    coeffs = {s.id: s.seeding_coefficient_kg_per_1000_plants for s in store.species}
    for need in store.seed_needs:
        assert need.calculated_seed_quantity_kg == seed_quantity_kg(need.number_of_plants, coeffs[need.species_id])
    by_id = {n.id: n.calculated_seed_quantity_kg for n in store.seed_needs}
    assert by_id == {"BS-001": 60.0, "BS-002": 60.0, "BS-003": 1125.0, "BS-004": 40.0}


def test_fixture_provenance_codes(store):
    codes = {p.id: p.code for p in store.provenances}
    assert codes["prov-03"] == "I3-PH-Aknoul"
    assert codes["prov-04"] == "IV1-CA-SidiMguild"


def test_new_store_is_independent():
    a, b = new_store(), new_store()
    a.lots.clear()
    assert len(b.lots) == 5


def test_display_lookups_never_raise(store):
    assert store.species_name("esp-034") == "Pin d'Alep"
    assert store.species_name("nope") == "Inconnu"
    assert store.species_name(None) == "Inconnu"
    assert store.srs_name("srs-01") == "Azrou"
    assert store.srs_name("nope") == "Inconnu"
    assert store.provider_name(None) == "N/A"
    assert store.region_name("reg-I3") == "Rif Oriental"


def test_repo_get_find_and_missing(store):
    repo = LotRepo(store)
    assert repo.get("23-PH-I3-001").species_id == "esp-034"
    assert repo.find("nope") is None
    with pytest.raises(NotFoundError) as exc:
        repo.get("nope")
    assert "nope" in str(exc.value)


def test_repo_insert_puts_record_first_and_update_replaces(store):
    repo = ProviderRepo(store)
    rec = repo.insert(Provider(id=repo.new_id(), name="Nouveau", address="", phone=""))
    assert store.providers[0] is rec
    assert rec.id.startswith("prest-")

    renamed = Provider(id=rec.id, name="Renommé", address="", phone="")
    repo.update(renamed)
    assert repo.get(rec.id).name == "Renommé"
    assert len(store.providers) == 4


def test_repo_update_and_delete_unknown_id(store):
    repo = ProviderRepo(store)
    with pytest.raises(NotFoundError):
        repo.update(Provider(id="prest-99", name="x", address="", phone=""))
    with pytest.raises(NotFoundError):
        repo.delete("prest-99")


def test_stock_delete_by_lot_only_touches_that_lot(store):
    repo = StockRepo(store)
    removed = repo.delete_by_lot("23-PH-I3-001")
    assert [s.id for s in removed] == ["STK-001"]
    assert [s.id for s in store.stock_items] == ["STK-002", "STK-003"]


def test_new_ids_are_unique(store):
    repo = StockRepo(store)
    first = repo.insert(StockItem(id=repo.new_id(now=1.0), lot_id="L", species_id="S", quantity_kg=1,
                                  entry_date=None, srs_id="srs-01"))
    second_id = repo.new_id(now=1.0)
    assert first.id == "STK-1000"
    assert second_id == "STK-1001"


def test_program_repo_new_id_uses_year(store):
    pid = ProgramRepo(store).new_id(today=date(2025, 3, 1))
    assert pid.startswith("PE-2025-")
    assert pid not in ProgramRepo(store).ids()


def test_record_dict_round_trip_keeps_types():
    lot = Lot(id="24-PH-I3-001", quantity_kg=12.5, harvest_year=2024, harvest_date=date(2024, 3, 1),
              category=LotCategory.HARVEST, species_id="esp-034", provenance_id="prov-03", seed_stand="",
              srs_id="srs-01", status=LotStatus.IN_STOCK)
    data = record_to_dict(lot)
    assert data["status"] == "En stock"
    assert data["harvest_date"] == "2024-03-01"
    assert data["provider_id"] is None

    back = record_from_dict(Lot, data)
    assert back.status is LotStatus.IN_STOCK
    assert back.harvest_date == date(2024, 3, 1)


def test_record_from_dict_coerces_numbers():
    need = record_from_dict(SeedNeed, {
        "id": "BS-1", "dranef": "D", "province": "P", "project": "X", "perimeter_name": "Y",
        "species_id": "esp-034", "number_of_plants": "1000", "calculated_seed_quantity_kg": "0.5",
        "request_date": None, "status": "Nouveau",
    })
    assert need.number_of_plants == 1000
    assert need.calculated_seed_quantity_kg == 0.5
    assert need.request_date is None


def test_store_json_round_trip(store, tmp_path):
    path = tmp_path / "data" / "semences.json"
    save_store_json(store, str(path))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == set(RECORD_TYPES)
    assert raw["species"][33]["common_name"] == "Pin d'Alep"

    restored = store_from_dict(raw)
    assert store_to_dict(restored) == store_to_dict(store)


def test_store_from_dict_recomputes_derived_values(store):
    raw = store_to_dict(store)
    raw["provenances"][0]["code"] = "HAND-EDITED"
    raw["seed_needs"][0]["calculated_seed_quantity_kg"] = 999.0

    restored = store_from_dict(raw)
    assert restored.provenances[0].code == "IV2-TA-Barajmdaz"
    assert restored.seed_needs[0].calculated_seed_quantity_kg == 60.0


def test_refresh_derived_only_touches_referencing_records(store):
    store.provenances[0] = replace(store.provenances[0], code="STALE")
    store.seed_needs[1] = replace(store.seed_needs[1], calculated_seed_quantity_kg=0.0)

    assert refresh_derived(store, species_ids=["esp-034"]) == 1
    assert store.provenances[0].code == "STALE"
    assert refresh_derived(store) == 1
    assert store.provenances[0].code == "IV2-TA-Barajmdaz"


def test_load_store_is_memoized_per_path(store, tmp_path):
    path = str(tmp_path / "semences.json")
    save_store_json(store, path)
    clear_cache()

    first = load_store(path)
    assert load_store(path) is first
    assert load_store(None) is load_store(None)
    assert load_store(None) is not first


def test_load_store_missing_file_propagates(tmp_path):
    with pytest.raises(OSError):
        load_store(str(tmp_path / "absent.json"))


def test_load_store_honours_delay(monkeypatch):
    waits = []
    monkeypatch.setattr(store_mod.time, "sleep", lambda s: waits.append(s))
    load_store(None, delay=0.25)
    assert waits == [0.25]


def test_empty_store_defaults():
    empty = SeedStore()
    assert empty.lots == []
    assert empty.species_names() == {}
