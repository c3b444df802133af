# semences/usecases/inventaire.py
"""
UC: INVENTAIRE (articles en stock) et DISTRIBUTIONS.

Obs.: une distribution est un enregistrement autonome; elle ne modifie pas
la quantité de l'article en stock auquel elle se rapporte.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from semences.adapters.parsers import parse_date, parse_quantite_kg
from semences.domain.errors import ValidationError
from semences.domain.filters import matches_text, within_dates
from semences.domain.models import Distribution, LotStatus, StockItem
from semences.infra.logger import log_stock, log_system_event, log_transaction
from semences.infra.store import DistributionRepo, LotRepo, SeedStore, StockRepo

MSG_LOT_DISTRIBUE = "Ce lot est déjà distribué: il ne peut plus entrer en stock."


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


# -------------------------
# Articles en stock
# -------------------------

def run_enregistrer_article(store: SeedStore, data: Dict[str, Any], today: Optional[date] = None) -> StockItem:
    """Entrée en stock d'un lot; espèce et SRS reprises du lot quand absentes.

    Un lot déjà distribué est refusé.
    """
    item_id = _normalize_str(data.get("id"))
    log_system_event("enregistrer_article_start", {"id": item_id, "lot_id": data.get("lot_id")})
    try:
        lot = LotRepo(store).find(_normalize_str(data.get("lot_id")))
        quantity = parse_quantite_kg(data.get("quantity_kg"))
        if lot is None or quantity is None or quantity <= 0:
            raise ValidationError("Veuillez sélectionner un lot et saisir une quantité positive.")
        if lot.status is LotStatus.DISTRIBUTED:
            raise ValidationError(MSG_LOT_DISTRIBUE)

        fields = dict(
            lot_id=lot.id,
            species_id=_normalize_str(data.get("species_id")) or lot.species_id,
            quantity_kg=quantity,
            entry_date=parse_date(data.get("entry_date")) or today or date.today(),
            srs_id=_normalize_str(data.get("srs_id")) or lot.srs_id,
        )
        repo = StockRepo(store)
        if item_id:
            item = replace(repo.get(item_id), **fields)
            repo.update(item)
            log_stock("update", item.id, item.quantity_kg, lot_id=lot.id)
        else:
            item = repo.insert(StockItem(id=repo.new_id(), **fields))
            log_stock("insert", item.id, item.quantity_kg, lot_id=lot.id)

        log_transaction("enregistrer_article", {"lot_id": lot.id, "quantity_kg": quantity}, result=item.id)
        return item
    except Exception as e:
        log_transaction("enregistrer_article", {"id": item_id}, error=str(e))
        log_system_event("enregistrer_article_error", {"id": item_id, "error": str(e)}, level="error")
        raise


def run_supprimer_article(store: SeedStore, item_id: str) -> StockItem:
    log_system_event("supprimer_article_start", {"id": item_id})
    try:
        item = StockRepo(store).delete(item_id)
        log_stock("delete", item.id, item.quantity_kg, lot_id=item.lot_id)
        log_transaction("supprimer_article", {"id": item_id}, result="success")
        return item
    except Exception as e:
        log_transaction("supprimer_article", {"id": item_id}, error=str(e))
        log_system_event("supprimer_article_error", {"id": item_id, "error": str(e)}, level="error")
        raise


def rechercher_stock(
    store: SeedStore,
    terme: Optional[str] = None,
    debut: Optional[date] = None,
    fin: Optional[date] = None,
) -> List[StockItem]:
    """Texte sur lot, espèce, SRS; date d'entrée."""
    species = store.species_names()
    srs = {s.id: s.name for s in store.srs}
    return [
        s for s in store.stock_items
        if within_dates(s.entry_date, debut, fin)
        and matches_text(terme, s.lot_id, species.get(s.species_id), srs.get(s.srs_id))
    ]


# -------------------------
# Distributions
# -------------------------

def run_enregistrer_distribution(store: SeedStore, data: Dict[str, Any], today: Optional[date] = None) -> Distribution:
    """Crée ou met à jour une distribution; la date par défaut est aujourd'hui."""
    dist_id = _normalize_str(data.get("id"))
    log_system_event("enregistrer_distribution_start", {"id": dist_id})
    try:
        item = StockRepo(store).find(_normalize_str(data.get("stock_item_id")))
        quantity = parse_quantite_kg(data.get("quantity_kg"))
        destination = _normalize_str(data.get("destination"))
        if item is None or quantity is None or quantity <= 0 or not destination:
            raise ValidationError("Veuillez remplir tous les champs requis.")

        fields = dict(
            stock_item_id=item.id,
            quantity_kg=quantity,
            destination=destination,
            distribution_date=parse_date(data.get("distribution_date")) or today or date.today(),
        )
        repo = DistributionRepo(store)
        if dist_id:
            dist = replace(repo.get(dist_id), **fields)
            repo.update(dist)
        else:
            dist = repo.insert(Distribution(id=repo.new_id(), **fields))

        log_stock("distribution", item.id, quantity, destination=destination, distribution=dist.id)
        log_transaction("enregistrer_distribution", fields, result=dist.id)
        return dist
    except Exception as e:
        log_transaction("enregistrer_distribution", {"id": dist_id}, error=str(e))
        log_system_event("enregistrer_distribution_error", {"id": dist_id, "error": str(e)}, level="error")
        raise


def run_supprimer_distribution(store: SeedStore, dist_id: str) -> Distribution:
    log_system_event("supprimer_distribution_start", {"id": dist_id})
    try:
        dist = DistributionRepo(store).delete(dist_id)
        log_transaction("supprimer_distribution", {"id": dist_id}, result="success")
        return dist
    except Exception as e:
        log_transaction("supprimer_distribution", {"id": dist_id}, error=str(e))
        log_system_event("supprimer_distribution_error", {"id": dist_id, "error": str(e)}, level="error")
        raise


def rechercher_distributions(
    store: SeedStore,
    terme: Optional[str] = None,
    debut: Optional[date] = None,
    fin: Optional[date] = None,
) -> List[Distribution]:
    """Texte sur id, lot de l'article, espèce, destination; date de distribution."""
    items = {s.id: s for s in store.stock_items}
    species = store.species_names()
    out = []
    for d in store.distributions:
        item = items.get(d.stock_item_id)
        if not within_dates(d.distribution_date, debut, fin):
            continue
        if not matches_text(
            terme, d.id, item.lot_id if item else None,
            species.get(item.species_id) if item else None, d.destination,
        ):
            continue
        out.append(d)
    return out
