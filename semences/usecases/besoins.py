# semences/usecases/besoins.py
"""
UC: BESOINS en semences (saisie unique et import XLSX).

La quantité de semences est toujours recalculée à l'enregistrement:
``nombre de plants / 1000 × coefficient de semis de l'espèce``.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from semences.adapters.loaders import load_besoins_from_xlsx
from semences.adapters.parsers import parse_date, parse_entier, parse_enum
from semences.domain.errors import ValidationError
from semences.domain.filters import matches_text, within_dates
from semences.domain.formulas import seed_quantity_kg
from semences.domain.models import NeedStatus, SeedNeed, Species
from semences.infra.logger import (
    log_file_operation, log_system_event, log_transaction, print_system
)
from semences.infra.store import NeedRepo, SeedStore, SpeciesRepo

MSG_CHAMPS_REQUIS = "Veuillez remplir tous les champs requis."


def _normalize_str(x: Any) -> str:
    return str(x).strip() if x is not None else ""


def _resoudre_espece(store: SeedStore, ref: Any) -> Optional[Species]:
    """Espèce désignée par son identifiant, son nom commun ou son nom scientifique."""
    key = _normalize_str(ref).lower()
    if not key:
        return None
    for s in store.species:
        if key in (s.id.lower(), s.common_name.lower(), s.scientific_name.lower()):
            return s
    return None


def run_enregistrer_besoin(store: SeedStore, data: Dict[str, Any], today: Optional[date] = None) -> SeedNeed:
    """Crée (``id`` vide) ou met à jour un besoin; espèce et nombre de plants requis."""
    need_id = _normalize_str(data.get("id")) or None
    log_system_event("enregistrer_besoin_start", {"id": need_id})
    try:
        species = _resoudre_espece(store, data.get("species_id"))
        plants = parse_entier(data.get("number_of_plants"))
        if species is None or not plants:
            raise ValidationError(MSG_CHAMPS_REQUIS)

        fields = dict(
            dranef=_normalize_str(data.get("dranef")),
            province=_normalize_str(data.get("province")),
            project=_normalize_str(data.get("project")),
            perimeter_name=_normalize_str(data.get("perimeter_name")),
            species_id=species.id,
            number_of_plants=plants,
            calculated_seed_quantity_kg=seed_quantity_kg(plants, species.seeding_coefficient_kg_per_1000_plants),
            request_date=parse_date(data.get("request_date")) or today or date.today(),
            status=parse_enum(NeedStatus, data.get("status")) or NeedStatus.NEW,
        )
        repo = NeedRepo(store)
        if need_id:
            need = replace(repo.get(need_id), **fields)
            repo.update(need)
        else:
            need = repo.insert(SeedNeed(id=repo.new_id(), **fields))

        log_transaction("enregistrer_besoin", {"species_id": species.id, "plants": plants},
                        result=need.calculated_seed_quantity_kg)
        log_system_event("enregistrer_besoin_success", {"id": need.id})
        return need
    except Exception as e:
        error_msg = str(e)
        log_transaction("enregistrer_besoin", {"id": need_id}, error=error_msg)
        log_system_event("enregistrer_besoin_error", {"id": need_id, "error": error_msg}, level="error")
        raise


def run_supprimer_besoin(store: SeedStore, need_id: str) -> SeedNeed:
    log_system_event("supprimer_besoin_start", {"id": need_id})
    try:
        need = NeedRepo(store).delete(need_id)
        log_transaction("supprimer_besoin", {"id": need_id}, result="success")
        return need
    except Exception as e:
        log_transaction("supprimer_besoin", {"id": need_id}, error=str(e))
        log_system_event("supprimer_besoin_error", {"id": need_id, "error": str(e)}, level="error")
        raise


def run_importer_besoins(store: SeedStore, path: str, today: Optional[date] = None) -> Dict[str, Any]:
    """Lit un XLSX de besoins et enregistre chaque ligne valide.

    Les lignes refusées (espèce inconnue, nombre de plants absent) sont
    comptées et renvoyées avec leur numéro et le motif.
    """
    log_system_event("importer_besoins_start", {"file_path": path})
    log_file_operation("import", path)
    try:
        rows = load_besoins_from_xlsx(path)
        created: List[str] = []
        rejected: List[Dict[str, Any]] = []
        for i, row in enumerate(rows, start=2):
            try:
                created.append(run_enregistrer_besoin(store, {**row, "id": None}, today=today).id)
            except ValidationError as e:
                print_system(f"Ligne {i} ignorée: {e}")
                rejected.append({"ligne": i, "motif": str(e)})

        log_file_operation("import", path, rows_processed=len(rows), created=len(created))
        result = {"fichier": path, "lignes": len(rows), "crees": created, "rejets": rejected}
        log_transaction("importer_besoins", {"file": path, "rows_count": len(rows)}, result=len(created))
        log_system_event("importer_besoins_success", {"file_path": path, "crees": len(created)})
        return result
    except Exception as e:
        error_msg = str(e)
        log_transaction("importer_besoins", {"file": path}, error=error_msg)
        log_system_event("importer_besoins_error", {"file_path": path, "error": error_msg}, level="error")
        raise


def rechercher_besoins(
    store: SeedStore,
    terme: Optional[str] = None,
    debut: Optional[date] = None,
    fin: Optional[date] = None,
) -> List[SeedNeed]:
    """Texte sur id, espèce, DRANEF, province, projet, statut; date de demande."""
    species = store.species_names()
    return [
        n for n in store.seed_needs
        if within_dates(n.request_date, debut, fin)
        and matches_text(terme, n.id, species.get(n.species_id), n.dranef, n.province, n.project, n.status.value)
    ]
