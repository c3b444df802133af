"""
Tests for seed needs: quantity recomputation, validation and XLSX import.
"""

from datetime import date

import pandas as pd
import pytest

from semences.domain.errors import NotFoundError, ValidationError
from semences.domain.models import NeedStatus
from semences.infra.store import new_store
from semences.usecases.besoins import (
    MSG_CHAMPS_REQUIS,
    rechercher_besoins,
    run_enregistrer_besoin,
    run_importer_besoins,
    run_supprimer_besoin,
)


@pytest.fixture
def store():
    return new_store()


def test_quantity_is_computed_from_species_coefficient(store):
    need = run_enregistrer_besoin(store, {
        "species_id": "esp-034", "number_of_plants": "120 000", "dranef": "ORIENTAL", "province": "Oujda",
        "project": "P", "perimeter_name": "Per",
    }, today=date(2024, 7, 1))
    assert need.calculated_seed_quantity_kg == 60.0
    assert need.status is NeedStatus.NEW
    assert need.request_date == date(2024, 7, 1)
    assert need.id.startswith("BS-")
    assert store.seed_needs[0] is need


def test_stale_quantity_is_never_trusted(store):
    need = run_enregistrer_besoin(store, {
        "species_id": "esp-085", "number_of_plants": 1000, "calculated_seed_quantity_kg": 999,
    })
    assert need.calculated_seed_quantity_kg == 15.0


def test_dotted_thousands_plant_count(store):
    need = run_enregistrer_besoin(store, {"species_id": "esp-034", "number_of_plants": "50.000"})
    assert need.number_of_plants == 50000
    assert need.calculated_seed_quantity_kg == 25.0


def test_species_without_coefficient_gives_zero(store):
    need = run_enregistrer_besoin(store, {"species_id": "esp-001", "number_of_plants": 5000})
    assert need.calculated_seed_quantity_kg == 0.0


def test_species_resolved_by_name(store):
    need = run_enregistrer_besoin(store, {"species_id": "Cèdre de l'Atlas", "number_of_plants": "1000"})
    assert need.species_id == "esp-047"
    need = run_enregistrer_besoin(store, {"species_id": "argania spinosa", "number_of_plants": "1000"})
    assert need.species_id == "esp-085"


def test_update_recomputes_quantity(store):
    need = run_enregistrer_besoin(store, {"id": "BS-002", "species_id": "esp-034", "number_of_plants": "10000",
                                          "status": "Validé"})
    assert need.id == "BS-002"
    assert need.calculated_seed_quantity_kg == 5.0
    assert need.status is NeedStatus.VALIDATED
    assert len(store.seed_needs) == 4


@pytest.mark.parametrize("data", [
    {"species_id": "", "number_of_plants": "1000"},
    {"species_id": "esp-999", "number_of_plants": "1000"},
    {"species_id": "esp-034", "number_of_plants": ""},
    {"species_id": "esp-034", "number_of_plants": "0"},
])
def test_required_fields(store, data):
    with pytest.raises(ValidationError) as exc:
        run_enregistrer_besoin(store, data)
    assert str(exc.value) == MSG_CHAMPS_REQUIS
    assert len(store.seed_needs) == 4


def test_delete_need(store):
    run_supprimer_besoin(store, "BS-004")
    assert [n.id for n in store.seed_needs] == ["BS-001", "BS-002", "BS-003"]
    with pytest.raises(NotFoundError):
        run_supprimer_besoin(store, "BS-004")


def test_search_needs(store):
    assert [n.id for n in rechercher_besoins(store, terme="arganier")] == ["BS-003"]
    assert [n.id for n in rechercher_besoins(store, terme="nouveau")] == ["BS-003", "BS-004"]
    assert [n.id for n in rechercher_besoins(store, debut=date(2024, 4, 1), fin=date(2024, 4, 30))] == ["BS-003"]


def test_import_needs_from_xlsx(store, tmp_path):
    path = tmp_path / "besoins.xlsx"
    pd.DataFrame({
        "DRANEF": ["ORIENTAL", "FES MEKNES", "SOUS MASSA"],
        "Province": ["Nador", "Ifrane", "Tiznit"],
        "Projet": ["Projet Est", "Projet Atlas", "Projet Souss"],
        "Nom du périmètre": ["Per 1", "Per 2", "Per 3"],
        "Espèce": ["Pin d'Alep", "Espèce inconnue", "esp-078"],
        "Nombre de plants": ["10 000", "5000", "20000"],
        "Date de demande": ["01/02/2024", "2024-02-02", None],
        "Statut": ["Validé", None, None],
    }).to_excel(path, index=False)

    res = run_importer_besoins(store, str(path), today=date(2024, 3, 1))

    assert res["lignes"] == 3
    assert len(res["crees"]) == 2
    assert res["rejets"] == [{"ligne": 3, "motif": MSG_CHAMPS_REQUIS}]
    assert len(store.seed_needs) == 6

    created = {n.id: n for n in store.seed_needs if n.id in res["crees"]}
    by_province = {n.province: n for n in created.values()}
    assert by_province["Nador"].calculated_seed_quantity_kg == 5.0
    assert by_province["Nador"].status is NeedStatus.VALIDATED
    assert by_province["Nador"].request_date == date(2024, 2, 1)
    assert by_province["Tiznit"].calculated_seed_quantity_kg == 4.0
    assert by_province["Tiznit"].request_date == date(2024, 3, 1)


def test_import_missing_file_propagates(store, tmp_path):
    with pytest.raises(FileNotFoundError):
        run_importer_besoins(store, str(tmp_path / "absent.xlsx"))
