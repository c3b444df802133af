# semences/usecases/qualite.py
"""
UC: CONTRÔLES QUALITÉ des lots.

Obs.: un contrôle non conforme renvoie le lot contrôlé en traitement.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from semences.adapters.parsers import parse_date, parse_enum, parse_quantite_kg
from semences.domain.errors import ValidationError
from semences.domain.filters import within_dates
from semences.domain.models import CheckResult, CheckType, QualityCheck
from semences.domain.policies import status_after_check
from semences.infra.logger import log_lot, log_system_event, log_transaction
from semences.infra.store import LotRepo, QualityCheckRepo, SeedStore


def _mesure(val: Any) -> float:
    return parse_quantite_kg(val) or 0.0


def run_enregistrer_controle(store: SeedStore, data: Dict[str, Any], today: Optional[date] = None) -> QualityCheck:
    """Crée ou met à jour un contrôle; la date par défaut est aujourd'hui."""
    qc_id = (data.get("id") or "").strip() or None
    log_system_event("enregistrer_controle_start", {"id": qc_id, "lot_id": data.get("lot_id")})
    try:
        lots = LotRepo(store)
        lot = lots.find(data.get("lot_id"))
        if lot is None:
            raise ValidationError("Veuillez sélectionner un lot existant.")
        result = parse_enum(CheckResult, data.get("result"))
        if result is None:
            raise ValidationError("Veuillez indiquer le résultat du contrôle (Pass / Fail).")

        repo = QualityCheckRepo(store)
        fields = dict(
            lot_id=lot.id,
            check_type=parse_enum(CheckType, data.get("check_type")) or CheckType.BEFORE_CONDITIONING,
            check_date=parse_date(data.get("check_date")) or today or date.today(),
            germination_rate=_mesure(data.get("germination_rate")),
            purity=_mesure(data.get("purity")),
            moisture_content=_mesure(data.get("moisture_content")),
            thousand_seed_weight=_mesure(data.get("thousand_seed_weight")),
            result=result,
        )
        if qc_id:
            qc = replace(repo.get(qc_id), **fields)
            repo.update(qc)
        else:
            qc = repo.insert(QualityCheck(id=repo.new_id(), **fields))

        new_status = status_after_check(lot.status, qc.result)
        if new_status is not lot.status:
            lots.update(replace(lot, status=new_status))
            log_lot("status", lot.id, avant=lot.status.value, apres=new_status.value, controle=qc.id)

        log_transaction("enregistrer_controle", {"lot_id": lot.id}, result=qc.id)
        log_system_event("enregistrer_controle_success", {"id": qc.id, "result": qc.result.value})
        return qc
    except Exception as e:
        error_msg = str(e)
        log_transaction("enregistrer_controle", {"id": qc_id}, error=error_msg)
        log_system_event("enregistrer_controle_error", {"id": qc_id, "error": error_msg}, level="error")
        raise


def run_supprimer_controle(store: SeedStore, qc_id: str) -> QualityCheck:
    log_system_event("supprimer_controle_start", {"id": qc_id})
    try:
        qc = QualityCheckRepo(store).delete(qc_id)
        log_transaction("supprimer_controle", {"id": qc_id}, result="success")
        return qc
    except Exception as e:
        log_transaction("supprimer_controle", {"id": qc_id}, error=str(e))
        log_system_event("supprimer_controle_error", {"id": qc_id, "error": str(e)}, level="error")
        raise


def rechercher_controles(
    store: SeedStore,
    lot_id: Optional[str] = None,
    check_type: Optional[CheckType] = None,
    debut: Optional[date] = None,
    fin: Optional[date] = None,
) -> List[QualityCheck]:
    """Filtres d'égalité (lot, type de contrôle) et intervalle de dates."""
    return [
        qc for qc in store.quality_checks
        if (not lot_id or qc.lot_id == lot_id)
        and (check_type is None or qc.check_type is check_type)
        and within_dates(qc.check_date, debut, fin)
    ]
