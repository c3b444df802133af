from datetime import date

import pytest

from semences.domain.errors import NotFoundError, ValidationError
from semences.domain.models import CheckResult, CheckType, LotStatus
from semences.infra.store import LotRepo, new_store
from semences.usecases.qualite import rechercher_controles, run_enregistrer_controle, run_supprimer_controle


@pytest.fixture
def store():
    return new_store()


def _controle(**kw):
    data = {"lot_id": "23-PH-I3-001", "result": "Pass", "germination_rate": "91", "purity": "99",
            "moisture_content": "8,4", "thousand_seed_weight": "5.1"}
    data.update(kw)
    return data


def test_passing_check_keeps_lot_status(store):
    qc = run_enregistrer_controle(store, _controle(), today=date(2024, 6, 1))
    assert qc.result is CheckResult.PASS
    assert qc.check_date == date(2024, 6, 1)
    assert qc.check_type is CheckType.BEFORE_CONDITIONING
    assert qc.moisture_content == 8.4
    assert store.quality_checks[0] is qc
    assert LotRepo(store).get("23-PH-I3-001").status is LotStatus.IN_STOCK


def test_failing_check_sends_lot_to_processing(store):
    run_enregistrer_controle(store, _controle(result="Fail", check_type="Périodique"))
    assert LotRepo(store).get("23-PH-I3-001").status is LotStatus.PROCESSING


def test_failing_check_on_processing_lot_is_noop(store):
    run_enregistrer_controle(store, _controle(lot_id="24-AS-IV1-001", result="Fail"))
    assert LotRepo(store).get("24-AS-IV1-001").status is LotStatus.PROCESSING


def test_check_requires_existing_lot_and_result(store):
    before = len(store.quality_checks)
    with pytest.raises(ValidationError):
        run_enregistrer_controle(store, _controle(lot_id="nope"))
    with pytest.raises(ValidationError):
        run_enregistrer_controle(store, _controle(result=None))
    assert len(store.quality_checks) == before


def test_update_existing_check(store):
    qc = run_enregistrer_controle(store, _controle(id="QC-001", germination_rate="70", check_date="2023-06-21"))
    assert qc.id == "QC-001"
    assert qc.germination_rate == 70.0
    assert qc.check_date == date(2023, 6, 21)
    assert len(store.quality_checks) == 6


def test_delete_check(store):
    run_supprimer_controle(store, "QC-006")
    assert "QC-006" not in [q.id for q in store.quality_checks]
    with pytest.raises(NotFoundError):
        run_supprimer_controle(store, "QC-006")


def test_search_checks(store):
    assert [q.id for q in rechercher_controles(store, lot_id="24-AS-IV1-001")] == ["QC-003", "QC-004"]
    assert [q.id for q in rechercher_controles(store, check_type=CheckType.PERIODIC)] == ["QC-005", "QC-006"]
    in_2024 = rechercher_controles(store, debut=date(2024, 1, 1))
    assert {q.id for q in in_2024} == {"QC-003", "QC-004", "QC-005", "QC-006"}
