# semences/usecases/referentiel.py
"""
UC: RÉFÉRENTIEL (espèces, régions, provenances, prestataires, SRS).

Enregistrements sans comportement, à une exception près: le code d'une
provenance est toujours recalculé à partir de sa région, de son espèce et
de son nom; une valeur fournie par l'appelant est ignorée. Modifier une
espèce ou une région recalcule les codes de provenance et les quantités de
semences des besoins qui en dépendent.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from semences.adapters.parsers import parse_quantite_kg
from semences.domain.codes import provenance_code
from semences.domain.errors import ValidationError
from semences.domain.filters import matches_text
from semences.domain.models import Provenance, Provider, Region, Species, Srs
from semences.infra.logger import log_system_event, log_transaction
from semences.infra.store import (
    CollectionRepo, ProvenanceRepo, ProviderRepo, RegionRepo, SeedStore, SpeciesRepo, SrsRepo, refresh_derived
)

MSG_CHAMPS_REQUIS = "Veuillez remplir tous les champs requis."


def _normalize_str(x: Any) -> str:
    return str(x).strip() if x is not None else ""


def _enregistrer(operation: str, repo: CollectionRepo, cls: type, data: Dict[str, Any],
                 fields: Dict[str, Any], required: Sequence[str] = ()) -> Any:
    """Création (``id`` vide, nouvel id en tête) ou remplacement de l'enregistrement ``data['id']``."""
    record_id = _normalize_str(data.get("id")) or None
    log_system_event(f"{operation}_start", {"id": record_id})
    try:
        if any(not fields.get(k) for k in required):
            raise ValidationError(MSG_CHAMPS_REQUIS)
        if record_id:
            record = replace(repo.get(record_id), **fields)
            repo.update(record)
        else:
            record = repo.insert(cls(id=repo.new_id(), **fields))
        log_transaction(operation, {k: str(v) for k, v in fields.items()}, result=record.id)
        return record
    except Exception as e:
        log_transaction(operation, {"id": record_id}, error=str(e))
        log_system_event(f"{operation}_error", {"id": record_id, "error": str(e)}, level="error")
        raise


def _supprimer(operation: str, repo: CollectionRepo, record_id: str) -> Any:
    try:
        record = repo.delete(record_id)
        log_transaction(operation, {"id": record_id}, result="success")
        return record
    except Exception as e:
        log_transaction(operation, {"id": record_id}, error=str(e))
        raise


# -------------------------
# Espèces
# -------------------------

def run_enregistrer_espece(store: SeedStore, data: Dict[str, Any]) -> Species:
    scientific = _normalize_str(data.get("scientific_name"))
    fields = dict(
        scientific_name=scientific,
        common_name=_normalize_str(data.get("common_name")),
        genus=_normalize_str(data.get("genus")) or scientific.split(" ")[0],
        group=_normalize_str(data.get("group")) or "Groupe par défaut",
        seeding_coefficient_kg_per_1000_plants=parse_quantite_kg(data.get("seeding_coefficient_kg_per_1000_plants")),
    )
    species = _enregistrer("enregistrer_espece", SpeciesRepo(store), Species, data, fields,
                           required=("scientific_name", "common_name"))
    refresh_derived(store, species_ids=[species.id])
    return species


def run_supprimer_espece(store: SeedStore, species_id: str) -> Species:
    return _supprimer("supprimer_espece", SpeciesRepo(store), species_id)


def rechercher_especes(store: SeedStore, terme: Optional[str] = None) -> List[Species]:
    return [s for s in store.species if matches_text(terme, s.common_name, s.scientific_name, s.genus, s.group)]


def especes_par_genre(store: SeedStore) -> Dict[str, List[Species]]:
    """Espèces regroupées par genre (genres triés, espèces triées par nom scientifique)."""
    out: Dict[str, List[Species]] = {}
    for s in sorted(store.species, key=lambda s: (s.genus, s.scientific_name)):
        out.setdefault(s.genus, []).append(s)
    return out


# -------------------------
# Régions
# -------------------------

def run_enregistrer_region(store: SeedStore, data: Dict[str, Any]) -> Region:
    fields = dict(code=_normalize_str(data.get("code")), name=_normalize_str(data.get("name")))
    region = _enregistrer("enregistrer_region", RegionRepo(store), Region, data, fields, required=("code", "name"))
    refresh_derived(store, region_ids=[region.id])
    return region


def run_supprimer_region(store: SeedStore, region_id: str) -> Region:
    return _supprimer("supprimer_region", RegionRepo(store), region_id)


def rechercher_regions(store: SeedStore, terme: Optional[str] = None) -> List[Region]:
    return [r for r in store.regions if matches_text(terme, r.name, r.code)]


# -------------------------
# Provenances
# -------------------------

def code_provenance(store: SeedStore, region_id: Optional[str], species_id: Optional[str], name: Optional[str]) -> str:
    """Code dérivé; vide tant que région, espèce et nom ne sont pas tous résolus."""
    region = RegionRepo(store).find(region_id)
    species = SpeciesRepo(store).find(species_id)
    if region is None or species is None or not _normalize_str(name):
        return ""
    return provenance_code(region.code, species.scientific_name, _normalize_str(name))


def run_enregistrer_provenance(store: SeedStore, data: Dict[str, Any]) -> Provenance:
    """Le champ ``code`` de ``data`` est ignoré: il est recalculé."""
    name = _normalize_str(data.get("name"))
    region_id = _normalize_str(data.get("region_id"))
    species_id = _normalize_str(data.get("species_id"))
    fields = dict(
        code=code_provenance(store, region_id, species_id, name),
        name=name,
        localisation=_normalize_str(data.get("localisation")),
        region_id=region_id,
        species_id=species_id,
    )
    return _enregistrer("enregistrer_provenance", ProvenanceRepo(store), Provenance, data, fields,
                        required=("code", "name", "species_id", "region_id"))


def run_supprimer_provenance(store: SeedStore, provenance_id: str) -> Provenance:
    return _supprimer("supprimer_provenance", ProvenanceRepo(store), provenance_id)


def rechercher_provenances(store: SeedStore, terme: Optional[str] = None) -> List[Provenance]:
    regions = {r.id: r.name for r in store.regions}
    species = store.species_names()
    return [
        p for p in store.provenances
        if matches_text(terme, p.name, p.code, p.localisation, regions.get(p.region_id), species.get(p.species_id))
    ]


# -------------------------
# Prestataires
# -------------------------

def run_enregistrer_prestataire(store: SeedStore, data: Dict[str, Any]) -> Provider:
    fields = dict(
        name=_normalize_str(data.get("name")),
        address=_normalize_str(data.get("address")),
        phone=_normalize_str(data.get("phone")),
    )
    return _enregistrer("enregistrer_prestataire", ProviderRepo(store), Provider, data, fields, required=("name",))


def run_supprimer_prestataire(store: SeedStore, provider_id: str) -> Provider:
    return _supprimer("supprimer_prestataire", ProviderRepo(store), provider_id)


def rechercher_prestataires(store: SeedStore, terme: Optional[str] = None) -> List[Provider]:
    return [p for p in store.providers if matches_text(terme, p.name, p.address, p.phone)]


# -------------------------
# SRS
# -------------------------

def run_enregistrer_srs(store: SeedStore, data: Dict[str, Any]) -> Srs:
    fields = dict(
        name=_normalize_str(data.get("name")),
        dranef=_normalize_str(data.get("dranef")),
        province=_normalize_str(data.get("province")),
    )
    return _enregistrer("enregistrer_srs", SrsRepo(store), Srs, data, fields, required=("name",))


def run_supprimer_srs(store: SeedStore, srs_id: str) -> Srs:
    return _supprimer("supprimer_srs", SrsRepo(store), srs_id)


def rechercher_srs(store: SeedStore, terme: Optional[str] = None) -> List[Srs]:
    return [s for s in store.srs if matches_text(terme, s.name, s.dranef, s.province)]
