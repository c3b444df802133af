# semences/usecases/lots.py
"""
UC: cycle de vie des LOTS de semences.

- génération de l'identifiant lisible ``{AA}-{abréviation}-{région}-{NNN}``;
- création / mise à jour (l'année de récolte suit la date de récolte);
- passage au statut « Distribué »: retrait des articles en stock du lot;
- suppression: retrait en cascade des articles en stock du lot;
- recherche (texte, intervalle de dates de récolte, statut, catégorie).
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from semences.adapters.parsers import parse_date, parse_entier, parse_enum, parse_quantite_kg
from semences.domain.codes import lot_prefix, next_lot_id
from semences.domain.errors import ValidationError
from semences.domain.filters import matches_text, within_dates
from semences.domain.models import Lot, LotCategory, LotStatus
from semences.infra.logger import log_lot, log_stock, log_system_event, log_transaction
from semences.infra.store import LotRepo, ProviderRepo, RegionRepo, SeedStore, ProvenanceRepo, SpeciesRepo, StockRepo

MSG_CHAMPS_ID = "Veuillez renseigner l'année de récolte, l'espèce et la provenance pour générer un ID."
MSG_ESPECE = "Espèce non trouvée."
MSG_PROVENANCE = "Provenance non trouvée."
MSG_REGION = "Région de provenance non trouvée."


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def generer_id_lot(store: SeedStore, harvest_year: Optional[int], species_id: Optional[str],
                   provenance_id: Optional[str]) -> str:
    """Identifiant du prochain lot pour (année, espèce, provenance).

    Raises:
        ValidationError: champ manquant, ou espèce / provenance / région introuvable.
    """
    if not harvest_year or not species_id or not provenance_id:
        raise ValidationError(MSG_CHAMPS_ID)
    species = SpeciesRepo(store).find(species_id)
    if species is None:
        raise ValidationError(MSG_ESPECE)
    provenance = ProvenanceRepo(store).find(provenance_id)
    if provenance is None:
        raise ValidationError(MSG_PROVENANCE)
    region = RegionRepo(store).find(provenance.region_id)
    if region is None:
        raise ValidationError(MSG_REGION)
    prefix = lot_prefix(harvest_year, species.scientific_name, region.code)
    return next_lot_id(prefix, LotRepo(store).ids())


def _lot_changes(data: Dict[str, Any]) -> Dict[str, Any]:
    """Champs présents dans ``data``, convertis vers les types du modèle."""
    out: Dict[str, Any] = {}
    if "quantity_kg" in data:
        out["quantity_kg"] = parse_quantite_kg(data["quantity_kg"]) or 0.0
    if "harvest_year" in data:
        out["harvest_year"] = parse_entier(data["harvest_year"])
    if "harvest_date" in data:
        out["harvest_date"] = parse_date(data["harvest_date"])
        if out["harvest_date"] is not None:
            out["harvest_year"] = out["harvest_date"].year
    if "category" in data:
        out["category"] = parse_enum(LotCategory, data["category"]) or LotCategory.HARVEST
    if "status" in data:
        status = parse_enum(LotStatus, data["status"])
        if status is None:
            raise ValidationError(f"Statut de lot inconnu: {data['status']}")
        out["status"] = status
    for key in ("species_id", "provenance_id", "seed_stand", "srs_id", "provider_id"):
        if key in data:
            out[key] = _normalize_str(data[key])
    return out


def _retirer_stock_du_lot(store: SeedStore, lot_id: str, motif: str) -> int:
    removed = StockRepo(store).delete_by_lot(lot_id)
    if removed:
        log_stock("cascade", None, quantity_kg=sum(s.quantity_kg for s in removed),
                  lot_id=lot_id, motif=motif, articles=[s.id for s in removed])
    return len(removed)


def run_enregistrer_lot(store: SeedStore, data: Dict[str, Any]) -> Lot:
    """Crée un lot (``id`` vide) ou met à jour le lot ``data['id']``.

    Création: l'identifiant est généré à partir de l'année, de l'espèce et de
    la provenance; le lot est ajouté en tête de collection. Mise à jour: seuls
    les champs fournis changent; un lot passé à « Distribué » perd ses
    articles en stock.
    """
    lot_id = _normalize_str(data.get("id"))
    log_system_event("enregistrer_lot_start", {"id": lot_id})
    try:
        changes = _lot_changes(data)
        repo = LotRepo(store)

        if lot_id:
            lot = replace(repo.get(lot_id), **changes)
            repo.update(lot)
            log_lot("update", lot.id, **{k: str(v) for k, v in changes.items()})
        else:
            new_id = generer_id_lot(
                store, changes.get("harvest_year"), changes.get("species_id"), changes.get("provenance_id")
            )
            lot = Lot(
                id=new_id,
                quantity_kg=changes.get("quantity_kg") or 0.0,
                harvest_year=changes["harvest_year"],
                harvest_date=changes.get("harvest_date"),
                category=changes.get("category") or LotCategory.HARVEST,
                species_id=changes["species_id"],
                provenance_id=changes["provenance_id"],
                seed_stand=changes.get("seed_stand") or "",
                srs_id=changes.get("srs_id") or "",
                status=changes.get("status") or LotStatus.PROCESSING,
                provider_id=changes.get("provider_id"),
            )
            repo.insert(lot)
            log_lot("create", lot.id, quantity_kg=lot.quantity_kg, species_id=lot.species_id)

        if lot.status is LotStatus.DISTRIBUTED:
            _retirer_stock_du_lot(store, lot.id, motif="distribue")

        log_transaction("enregistrer_lot", {"id": lot_id}, result=lot.id)
        log_system_event("enregistrer_lot_success", {"id": lot.id})
        return lot
    except Exception as e:
        error_msg = str(e)
        log_transaction("enregistrer_lot", {"id": lot_id}, error=error_msg)
        log_system_event("enregistrer_lot_error", {"id": lot_id, "error": error_msg}, level="error")
        raise


def run_changer_statut_lot(store: SeedStore, lot_id: str, status: Any) -> Lot:
    """Raccourci de mise à jour du seul statut."""
    return run_enregistrer_lot(store, {"id": lot_id, "status": status})


def run_supprimer_lot(store: SeedStore, lot_id: str) -> Dict[str, Any]:
    """Supprime le lot et tous ses articles en stock (confirmation faite par l'appelant)."""
    log_system_event("supprimer_lot_start", {"id": lot_id})
    try:
        LotRepo(store).delete(lot_id)
        log_lot("delete", lot_id)
        retires = _retirer_stock_du_lot(store, lot_id, motif="suppression")
        result = {"lot": lot_id, "articles_retires": retires}
        log_transaction("supprimer_lot", {"id": lot_id}, result=result)
        log_system_event("supprimer_lot_success", result)
        return result
    except Exception as e:
        error_msg = str(e)
        log_transaction("supprimer_lot", {"id": lot_id}, error=error_msg)
        log_system_event("supprimer_lot_error", {"id": lot_id, "error": error_msg}, level="error")
        raise


def rechercher_lots(
    store: SeedStore,
    terme: Optional[str] = None,
    debut: Optional[date] = None,
    fin: Optional[date] = None,
    statut: Optional[LotStatus] = None,
    categorie: Optional[LotCategory] = None,
) -> List[Lot]:
    """Lots filtrés: texte (id, espèce, SRS, prestataire, peuplement), date de récolte, statut, catégorie."""
    species = store.species_names()
    srs = {s.id: s.name for s in store.srs}
    providers = {p.id: p.name for p in ProviderRepo(store).get_all()}
    out = []
    for lot in store.lots:
        if statut is not None and lot.status is not statut:
            continue
        if categorie is not None and lot.category is not categorie:
            continue
        if not within_dates(lot.harvest_date, debut, fin):
            continue
        if not matches_text(terme, lot.id, species.get(lot.species_id), srs.get(lot.srs_id),
                            providers.get(lot.provider_id), lot.seed_stand):
            continue
        out.append(lot)
    return out
