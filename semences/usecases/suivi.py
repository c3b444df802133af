# semences/usecases/suivi.py
"""
UC: SUIVI technique.

- traitements de semences (par lot);
- programmes d'évaluation de la fructification (libellé « En Retard »);
- évaluations de fructification (comptes rendus par programme).
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from semences.adapters.parsers import parse_date, parse_enum
from semences.domain.errors import ValidationError
from semences.domain.filters import matches_text
from semences.domain.models import (
    EvaluationProgram, FructificationEvaluation, ProgramStatus, SeedTreatment, TreatmentStatus, TreatmentType
)
from semences.domain.policies import program_label
from semences.infra.logger import log_lot, log_system_event, log_transaction
from semences.infra.store import FructificationRepo, LotRepo, ProgramRepo, SeedStore, TreatmentRepo


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _fail(operation: str, record_id: Optional[str], e: Exception) -> None:
    log_transaction(operation, {"id": record_id}, error=str(e))
    log_system_event(f"{operation}_error", {"id": record_id, "error": str(e)}, level="error")


# -------------------------
# Traitements
# -------------------------

def run_enregistrer_traitement(store: SeedStore, data: Dict[str, Any], today: Optional[date] = None) -> SeedTreatment:
    """Crée ou met à jour un traitement; la date de début par défaut est aujourd'hui."""
    trt_id = _normalize_str(data.get("id"))
    log_system_event("enregistrer_traitement_start", {"id": trt_id})
    try:
        lot = LotRepo(store).find(_normalize_str(data.get("lot_id")))
        treatment_type = parse_enum(TreatmentType, data.get("treatment_type"))
        if lot is None or treatment_type is None:
            raise ValidationError("Veuillez sélectionner un lot et un type de traitement.")

        fields = dict(
            lot_id=lot.id,
            treatment_type=treatment_type,
            start_date=parse_date(data.get("start_date")) or today or date.today(),
            end_date=parse_date(data.get("end_date")),
            operator=_normalize_str(data.get("operator")) or "",
            status=parse_enum(TreatmentStatus, data.get("status")) or TreatmentStatus.PLANNED,
            observations=_normalize_str(data.get("observations")),
        )
        repo = TreatmentRepo(store)
        if trt_id:
            trt = replace(repo.get(trt_id), **fields)
            repo.update(trt)
        else:
            trt = repo.insert(SeedTreatment(id=repo.new_id(), **fields))

        log_lot("treatment", lot.id, traitement=trt.id, type=trt.treatment_type.value, statut=trt.status.value)
        log_transaction("enregistrer_traitement", {"lot_id": lot.id}, result=trt.id)
        return trt
    except Exception as e:
        _fail("enregistrer_traitement", trt_id, e)
        raise


def run_supprimer_traitement(store: SeedStore, trt_id: str) -> SeedTreatment:
    try:
        trt = TreatmentRepo(store).delete(trt_id)
        log_transaction("supprimer_traitement", {"id": trt_id}, result="success")
        return trt
    except Exception as e:
        _fail("supprimer_traitement", trt_id, e)
        raise


def rechercher_traitements(store: SeedStore, terme: Optional[str] = None) -> List[SeedTreatment]:
    """Texte sur lot, type, opérateur, statut."""
    return [
        t for t in store.seed_treatments
        if matches_text(terme, t.lot_id, t.treatment_type.value, t.operator, t.status.value)
    ]


# -------------------------
# Programmes d'évaluation
# -------------------------

def run_enregistrer_programme(store: SeedStore, data: Dict[str, Any], today: Optional[date] = None) -> EvaluationProgram:
    """Crée (id ``PE-{année}-{XXXX}``) ou met à jour un programme d'évaluation."""
    prog_id = _normalize_str(data.get("id"))
    log_system_event("enregistrer_programme_start", {"id": prog_id})
    try:
        species_id = _normalize_str(data.get("species_id"))
        srs_id = _normalize_str(data.get("srs_id"))
        if not species_id or not srs_id:
            raise ValidationError("Veuillez remplir tous les champs requis.")

        fields = dict(
            species_id=species_id,
            srs_id=srs_id,
            province=_normalize_str(data.get("province")) or "",
            programmed_date=parse_date(data.get("programmed_date")) or today or date.today(),
            status=parse_enum(ProgramStatus, data.get("status")) or ProgramStatus.PLANNED,
            real_date=parse_date(data.get("real_date")),
        )
        repo = ProgramRepo(store)
        if prog_id:
            prog = replace(repo.get(prog_id), **fields)
            repo.update(prog)
        else:
            prog = repo.insert(EvaluationProgram(id=repo.new_id(today=today), **fields))

        log_transaction("enregistrer_programme", {"species_id": species_id, "srs_id": srs_id}, result=prog.id)
        return prog
    except Exception as e:
        _fail("enregistrer_programme", prog_id, e)
        raise


def run_supprimer_programme(store: SeedStore, prog_id: str) -> EvaluationProgram:
    try:
        prog = ProgramRepo(store).delete(prog_id)
        log_transaction("supprimer_programme", {"id": prog_id}, result="success")
        return prog
    except Exception as e:
        _fail("supprimer_programme", prog_id, e)
        raise


def rechercher_programmes(store: SeedStore, terme: Optional[str] = None,
                          today: Optional[date] = None) -> List[EvaluationProgram]:
    """Texte sur id, espèce, SRS, province, libellé de statut (y compris « En Retard »)."""
    species = store.species_names()
    srs = {s.id: s.name for s in store.srs}
    return [
        p for p in store.evaluation_programs
        if matches_text(terme, p.id, species.get(p.species_id), srs.get(p.srs_id), p.province,
                        program_label(p, today))
    ]


# -------------------------
# Évaluations de fructification
# -------------------------

def run_enregistrer_evaluation(store: SeedStore, data: Dict[str, Any],
                               today: Optional[date] = None) -> FructificationEvaluation:
    eval_id = _normalize_str(data.get("id"))
    log_system_event("enregistrer_evaluation_start", {"id": eval_id})
    try:
        program_id = _normalize_str(data.get("program_id"))
        summary = _normalize_str(data.get("report_summary"))
        if not program_id or not summary:
            raise ValidationError("Veuillez remplir tous les champs requis.")

        fields = dict(
            program_id=program_id,
            srs_id=_normalize_str(data.get("srs_id")) or "",
            report_summary=summary,
            evaluation_date=parse_date(data.get("evaluation_date")) or today or date.today(),
        )
        repo = FructificationRepo(store)
        if eval_id:
            ev = replace(repo.get(eval_id), **fields)
            repo.update(ev)
        else:
            ev = repo.insert(FructificationEvaluation(id=repo.new_id(), **fields))

        log_transaction("enregistrer_evaluation", {"program_id": program_id}, result=ev.id)
        return ev
    except Exception as e:
        _fail("enregistrer_evaluation", eval_id, e)
        raise


def run_supprimer_evaluation(store: SeedStore, eval_id: str) -> FructificationEvaluation:
    try:
        ev = FructificationRepo(store).delete(eval_id)
        log_transaction("supprimer_evaluation", {"id": eval_id}, result="success")
        return ev
    except Exception as e:
        _fail("supprimer_evaluation", eval_id, e)
        raise


def rechercher_evaluations(store: SeedStore, terme: Optional[str] = None) -> List[FructificationEvaluation]:
    """Texte sur programme, SRS, compte rendu."""
    srs = {s.id: s.name for s in store.srs}
    return [
        e for e in store.fructification_evaluations
        if matches_text(terme, e.program_id, srs.get(e.srs_id), e.report_summary)
    ]
