# semences/infra/store.py
"""
Store en mémoire et repositories.

Le store regroupe toutes les collections (listes de dataclasses, l'élément
le plus récent en tête). Les repositories encapsulent les opérations de
lecture/écriture d'une collection:

- SpeciesRepo, RegionRepo, ProvenanceRepo, ProviderRepo, SrsRepo
- LotRepo, TreatmentRepo, QualityCheckRepo, StockRepo, NeedRepo
- ProgramRepo, FructificationRepo, DistributionRepo

Persistance optionnelle: le store complet se (dé)sérialise en JSON.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from semences.config import DEFAULTS
from semences.domain.codes import fresh_id, program_id, provenance_code
from semences.domain.errors import NotFoundError
from semences.domain.formulas import seed_quantity_kg
from semences.domain.models import (
    Distribution,
    EvaluationProgram,
    FructificationEvaluation,
    Lot,
    Provenance,
    Provider,
    QualityCheck,
    Region,
    SeedNeed,
    SeedTreatment,
    Species,
    Srs,
    StockItem,
)
from semences.infra.fixtures import generate_mock_data
from semences.infra.logger import log_file_operation, log_system_event


# -------------------------
# Store
# -------------------------

@dataclass
class SeedStore:
    srs: List[Srs] = field(default_factory=list)
    species: List[Species] = field(default_factory=list)
    regions: List[Region] = field(default_factory=list)
    provenances: List[Provenance] = field(default_factory=list)
    providers: List[Provider] = field(default_factory=list)
    lots: List[Lot] = field(default_factory=list)
    seed_treatments: List[SeedTreatment] = field(default_factory=list)
    quality_checks: List[QualityCheck] = field(default_factory=list)
    stock_items: List[StockItem] = field(default_factory=list)
    seed_needs: List[SeedNeed] = field(default_factory=list)
    evaluation_programs: List[EvaluationProgram] = field(default_factory=list)
    fructification_evaluations: List[FructificationEvaluation] = field(default_factory=list)
    distributions: List[Distribution] = field(default_factory=list)

    # Résolutions d'affichage (jamais d'exception)

    def species_names(self) -> Dict[str, str]:
        return {s.id: s.common_name for s in self.species}

    def srs_locations(self) -> Dict[str, Tuple[str, str]]:
        return {s.id: (s.dranef, s.province) for s in self.srs}

    def species_name(self, species_id: Optional[str]) -> str:
        return self.species_names().get(species_id, DEFAULTS.libelle_inconnu)

    def srs_name(self, srs_id: Optional[str]) -> str:
        return next((s.name for s in self.srs if s.id == srs_id), DEFAULTS.libelle_inconnu)

    def provider_name(self, provider_id: Optional[str]) -> str:
        return next((p.name for p in self.providers if p.id == provider_id), "N/A")

    def region_name(self, region_id: Optional[str]) -> str:
        return next((r.name for r in self.regions if r.id == region_id), DEFAULTS.libelle_inconnu)


# Type d'enregistrement de chaque collection
RECORD_TYPES: Dict[str, type] = {
    "srs": Srs,
    "species": Species,
    "regions": Region,
    "provenances": Provenance,
    "providers": Provider,
    "lots": Lot,
    "seed_treatments": SeedTreatment,
    "quality_checks": QualityCheck,
    "stock_items": StockItem,
    "seed_needs": SeedNeed,
    "evaluation_programs": EvaluationProgram,
    "fructification_evaluations": FructificationEvaluation,
    "distributions": Distribution,
}


# -------------------------
# Repositories
# -------------------------

class CollectionRepo:
    """Accès générique à une collection du store."""
    collection: str = ""
    prefix: str = ""

    def __init__(self, store: SeedStore):
        self.store = store

    @property
    def _items(self) -> List[Any]:
        return getattr(self.store, self.collection)

    def get_all(self) -> List[Any]:
        return list(self._items)

    def ids(self) -> List[str]:
        return [r.id for r in self._items]

    def find(self, record_id: Optional[str]) -> Optional[Any]:
        return next((r for r in self._items if r.id == record_id), None)

    def get(self, record_id: str) -> Any:
        rec = self.find(record_id)
        if rec is None:
            raise NotFoundError(self.collection, record_id)
        return rec

    def new_id(self, now: Optional[float] = None) -> str:
        return fresh_id(self.prefix, self.ids(), now=now)

    def insert(self, record: Any) -> Any:
        """Ajoute en tête de collection."""
        self._items.insert(0, record)
        return record

    def update(self, record: Any) -> Any:
        """Remplace l'enregistrement de même identifiant."""
        items = self._items
        for i, r in enumerate(items):
            if r.id == record.id:
                items[i] = record
                return record
        raise NotFoundError(self.collection, record.id)

    def delete(self, record_id: str) -> Any:
        rec = self.get(record_id)
        self._items.remove(rec)
        return rec


class SpeciesRepo(CollectionRepo):
    collection = "species"
    prefix = "esp"


class RegionRepo(CollectionRepo):
    collection = "regions"
    prefix = "reg"


class ProvenanceRepo(CollectionRepo):
    collection = "provenances"
    prefix = "prov"


class ProviderRepo(CollectionRepo):
    collection = "providers"
    prefix = "prest"


class SrsRepo(CollectionRepo):
    collection = "srs"
    prefix = "srs"


class LotRepo(CollectionRepo):
    """Les identifiants de lot sont dérivés (voir ``domain.codes``), pas de ``new_id``."""
    collection = "lots"


class TreatmentRepo(CollectionRepo):
    collection = "seed_treatments"
    prefix = "TRT"


class QualityCheckRepo(CollectionRepo):
    collection = "quality_checks"
    prefix = "QC"

    def by_lot(self, lot_id: str) -> List[QualityCheck]:
        return [qc for qc in self._items if qc.lot_id == lot_id]


class StockRepo(CollectionRepo):
    collection = "stock_items"
    prefix = "STK"

    def by_lot(self, lot_id: str) -> List[StockItem]:
        return [s for s in self._items if s.lot_id == lot_id]

    def delete_by_lot(self, lot_id: str) -> List[StockItem]:
        """Retire tous les articles d'un lot; renvoie les articles retirés."""
        removed = self.by_lot(lot_id)
        self.store.stock_items = [s for s in self._items if s.lot_id != lot_id]
        return removed


class NeedRepo(CollectionRepo):
    collection = "seed_needs"
    prefix = "BS"


class ProgramRepo(CollectionRepo):
    collection = "evaluation_programs"

    def new_id(self, now: Optional[float] = None, today: Optional[date] = None) -> str:
        return program_id(self.ids(), today=today)


class FructificationRepo(CollectionRepo):
    collection = "fructification_evaluations"
    prefix = "FE"


class DistributionRepo(CollectionRepo):
    collection = "distributions"
    prefix = "DIST"


# -------------------------
# Valeurs dérivées
# -------------------------

def refresh_derived(store: SeedStore, species_ids=None, region_ids=None) -> int:
    """
    Recalcule les champs dérivés: code des provenances et quantité de semences des besoins.

    Sans filtre, tout le store est recalculé; sinon seuls les enregistrements
    qui référencent une des espèces ou régions indiquées. Une provenance dont
    la région ou l'espèce est introuvable garde son code.

    Returns:
        Nombre d'enregistrements modifiés
    """
    everything = species_ids is None and region_ids is None
    species_ids = set(species_ids or ())
    region_ids = set(region_ids or ())
    species = {s.id: s for s in store.species}
    regions = {r.id: r for r in store.regions}
    changed = 0

    for i, prov in enumerate(store.provenances):
        if not (everything or prov.species_id in species_ids or prov.region_id in region_ids):
            continue
        sp, rg = species.get(prov.species_id), regions.get(prov.region_id)
        if sp is None or rg is None:
            continue
        code = provenance_code(rg.code, sp.scientific_name, prov.name)
        if code != prov.code:
            store.provenances[i] = replace(prov, code=code)
            changed += 1

    for i, need in enumerate(store.seed_needs):
        if not (everything or need.species_id in species_ids):
            continue
        sp = species.get(need.species_id)
        qty = seed_quantity_kg(need.number_of_plants, sp.seeding_coefficient_kg_per_1000_plants if sp else None)
        if qty != need.calculated_seed_quantity_kg:
            store.seed_needs[i] = replace(need, calculated_seed_quantity_kg=qty)
            changed += 1

    return changed


# -------------------------
# Sérialisation JSON
# -------------------------

def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def record_to_dict(record: Any) -> Dict[str, Any]:
    return {k: _to_json_value(v) for k, v in asdict(record).items()}


def _coerce(tp: Any, value: Any) -> Any:
    if value is None:
        return None
    if get_origin(tp) is Union:
        inner = [a for a in get_args(tp) if a is not type(None)]
        return _coerce(inner[0], value) if inner else value
    if isinstance(tp, type) and issubclass(tp, Enum):
        return tp(value)
    if tp is date:
        return value if isinstance(value, date) else date.fromisoformat(str(value)[:10])
    if tp is float:
        return float(value)
    if tp is int:
        return int(value)
    return value


def record_from_dict(cls: type, data: Dict[str, Any]) -> Any:
    hints = get_type_hints(cls)
    kwargs = {f.name: _coerce(hints[f.name], data.get(f.name)) for f in fields(cls) if f.name in data}
    return cls(**kwargs)


def store_to_dict(store: SeedStore) -> Dict[str, List[Dict[str, Any]]]:
    return {name: [record_to_dict(r) for r in getattr(store, name)] for name in RECORD_TYPES}


def store_from_dict(data: Dict[str, Any]) -> SeedStore:
    """Reconstruit le store; codes de provenance et quantités des besoins sont recalculés."""
    store = SeedStore(**{
        name: [record_from_dict(cls, row) for row in (data.get(name) or [])]
        for name, cls in RECORD_TYPES.items()
    })
    refresh_derived(store)
    return store


# -------------------------
# Chargement / sauvegarde
# -------------------------

_CACHE: Dict[Optional[str], SeedStore] = {}


def new_store() -> SeedStore:
    """Store neuf peuplé avec les données de démonstration."""
    return SeedStore(**generate_mock_data())


def load_store(path: Optional[str] = None, delay: Optional[float] = None) -> SeedStore:
    """
    Charge le store (mémoïsé par chemin).

    Args:
        path: Fichier JSON; None => données de démonstration
        delay: Latence simulée en secondes (défaut: ``DEFAULTS.delai_chargement``)

    Returns:
        SeedStore partagé par tous les appels avec le même ``path``
    """
    key = str(path) if path else None
    if key in _CACHE:
        return _CACHE[key]

    log_system_event("load_store_start", {"path": key})
    try:
        wait = DEFAULTS.delai_chargement if delay is None else delay
        if wait and wait > 0:
            time.sleep(wait)

        if key is None:
            store = new_store()
        else:
            with open(key, "r", encoding="utf-8") as f:
                store = store_from_dict(json.load(f))
            log_file_operation("load", key, rows_processed=sum(len(getattr(store, n)) for n in RECORD_TYPES))

        _CACHE[key] = store
        log_system_event("load_store_success", {"path": key, "lots": len(store.lots), "stock_items": len(store.stock_items)})
        return store
    except Exception as e:
        log_system_event("load_store_error", {"path": key, "error": str(e)}, level="error")
        raise


def clear_cache() -> None:
    _CACHE.clear()


def save_store_json(store: SeedStore, path: str) -> str:
    """Écrit le store complet en JSON (UTF-8, indenté)."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = store_to_dict(store)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    log_file_operation("save", str(out), rows_processed=sum(len(v) for v in payload.values()))
    _CACHE[str(path)] = store
    return str(out)
