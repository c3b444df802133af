"""
Rapprochement besoins / stock.

Deux vues sont calculées à partir des besoins en semences (``SeedNeed``) et
des articles en stock (``StockItem``):

1. la table d'analyse, agrégée par espèce, par DRANEF ou détaillée
   (DRANEF x province x espèce); la localisation d'un article en stock est
   celle de la SRS qui le détient;
2. le bilan par espèce du tableau de bord (taux de couverture global,
   espèces en déficit et en surplus, données du graphique).

Toutes les agrégations sont totales: entrées vides acceptées, références
absentes remplacées par le libellé inconnu.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from math import isfinite
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from semences.config import DEFAULTS
from semences.domain.formulas import balance, coverage, covered_quantity
from semences.domain.models import SeedNeed, StockItem


class GroupBy(str, Enum):
    SPECIES = "species"
    DRANEF = "dranef"
    DETAILED = "detailed"


@dataclass
class BalanceRow:
    """Ligne de la table d'analyse (``species`` renseigné en mode détaillé)."""
    key: str
    needed: float
    stocked: float
    species: Optional[str] = None

    @property
    def balance(self) -> float:
        return balance(self.needed, self.stocked)

    @property
    def coverage(self) -> float:
        return coverage(self.needed, self.stocked)


@dataclass
class SpeciesBalance:
    species_id: str
    species_name: str
    needed: float
    stocked: float

    @property
    def balance(self) -> float:
        return balance(self.needed, self.stocked)


Location = Tuple[str, str]  # (dranef, province)


def format_coverage(value: float) -> str:
    """``"NN%"``; une couverture infinie s'affiche ``"N/A"``."""
    if not isfinite(value):
        return "N/A"
    return f"{value:.0f}%"


def _combine(
    needs: Iterable[SeedNeed],
    stock_items: Iterable[StockItem],
    srs_locations: Mapping[str, Location],
    unknown: str,
) -> Dict[Tuple[str, str, str], List[float]]:
    combined: Dict[Tuple[str, str, str], List[float]] = defaultdict(lambda: [0.0, 0.0])
    for need in needs:
        key = (need.dranef, need.province, need.species_id)
        combined[key][0] += float(need.calculated_seed_quantity_kg or 0.0)
    for item in stock_items:
        dranef, province = srs_locations.get(item.srs_id, (unknown, unknown))
        key = (dranef, province, item.species_id)
        combined[key][1] += float(item.quantity_kg or 0.0)
    return combined


def compute_balance_rows(
    needs: Iterable[SeedNeed],
    stock_items: Iterable[StockItem],
    species_names: Mapping[str, str],
    srs_locations: Mapping[str, Location],
    group_by: GroupBy = GroupBy.SPECIES,
    unknown: str = DEFAULTS.libelle_inconnu,
) -> List[BalanceRow]:
    """Table d'analyse besoins/stock pour le mode de regroupement demandé.

    Tri: besoins décroissants (espèce, DRANEF), libellé de localisation
    croissant (détaillé).
    """
    group_by = GroupBy(group_by)
    combined = _combine(needs, stock_items, srs_locations, unknown)
    flat = [
        (dranef, province, species_names.get(species_id, unknown), needed, stocked)
        for (dranef, province, species_id), (needed, stocked) in combined.items()
        if needed > 0 or stocked > 0
    ]

    if group_by is GroupBy.DETAILED:
        rows = [
            BalanceRow(key=f"{province} ({dranef[:4]})", species=name, needed=needed, stocked=stocked)
            for dranef, province, name, needed, stocked in flat
        ]
        rows.sort(key=lambda r: r.key)
        return rows

    grouped: Dict[str, List[float]] = {}
    for dranef, _province, name, needed, stocked in flat:
        key = name if group_by is GroupBy.SPECIES else dranef
        acc = grouped.setdefault(key, [0.0, 0.0])
        acc[0] += needed
        acc[1] += stocked

    rows = [BalanceRow(key=k, needed=v[0], stocked=v[1]) for k, v in grouped.items()]
    rows.sort(key=lambda r: -r.needed)
    return rows


def species_balances(
    needs: Iterable[SeedNeed],
    stock_items: Iterable[StockItem],
    species_names: Mapping[str, str],
    unknown: str = DEFAULTS.libelle_inconnu,
) -> List[SpeciesBalance]:
    """Totaux besoins/stock par identifiant d'espèce (ordre de première apparition)."""
    needed: Dict[str, float] = {}
    stocked: Dict[str, float] = {}
    for need in needs:
        needed[need.species_id] = needed.get(need.species_id, 0.0) + float(need.calculated_seed_quantity_kg or 0.0)
    for item in stock_items:
        stocked[item.species_id] = stocked.get(item.species_id, 0.0) + float(item.quantity_kg or 0.0)

    species_ids = list(dict.fromkeys([*needed.keys(), *stocked.keys()]))
    return [
        SpeciesBalance(
            species_id=sid,
            species_name=species_names.get(sid, unknown),
            needed=needed.get(sid, 0.0),
            stocked=stocked.get(sid, 0.0),
        )
        for sid in species_ids
    ]


def overall_coverage(balances: Iterable[SpeciesBalance]) -> float:
    """Taux de couverture global (%), 100 quand aucun besoin n'est exprimé."""
    total_needed = 0.0
    total_covered = 0.0
    for b in balances:
        total_needed += b.needed
        total_covered += covered_quantity(b.needed, b.stocked)
    if total_needed <= 0:
        return 100.0
    return total_covered / total_needed * 100.0


def deficits(balances: Iterable[SpeciesBalance]) -> List[Tuple[str, float]]:
    """Espèces en déficit ``(nom, déficit)``, plus grand déficit d'abord."""
    out = [(b.species_name, -b.balance) for b in balances if b.balance < 0]
    out.sort(key=lambda t: -t[1])
    return out


def surpluses(balances: Iterable[SpeciesBalance]) -> List[Tuple[str, float]]:
    """Espèces en surplus ``(nom, surplus)``.

    Une espèce sans besoin exprimé n'est jamais comptée en surplus, même
    si elle a du stock.
    """
    out = [(b.species_name, b.balance) for b in balances if b.balance > 0 and b.needed > 0]
    out.sort(key=lambda t: -t[1])
    return out


def chart_rows(balances: Iterable[SpeciesBalance], top_n: int = DEFAULTS.top_n_graphique) -> List[SpeciesBalance]:
    """Données du graphique: espèces avec besoin, triées puis tronquées à ``top_n``."""
    rows = [b for b in balances if b.needed > 0]
    rows.sort(key=lambda b: -b.needed)
    return rows[: max(0, int(top_n))]
