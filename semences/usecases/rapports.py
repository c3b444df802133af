# semences/usecases/rapports.py
"""
Rapports:
- analyse besoins / stock (par espèce, par DRANEF, détaillée)
- synthèse du tableau de bord (couverture globale, déficits, surplus)
- résumé des distributions (par espèce ou par destination)
- traitements en cours
- historique des contrôles qualité d'un lot

Les rapports tabulaires renvoient ``(colonnes, lignes, message)`` pour
affichage direct dans une table (CLI Rich ou DataTable Textual).
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from semences.config import DEFAULTS
from semences.domain.balance import (
    BalanceRow,
    GroupBy,
    chart_rows,
    compute_balance_rows,
    deficits,
    format_coverage,
    overall_coverage,
    species_balances,
    surpluses,
)
from semences.domain.models import CheckResult, LotStatus, TreatmentStatus
from semences.domain.policies import coverage_band
from semences.infra.logger import log_system_event, system_logger
from semences.infra.store import SeedStore
from semences.usecases.inventaire import rechercher_distributions

Report = Tuple[List[str], List[List[Any]], Optional[str]]

VALUE_HEADERS = ["Besoins (kg)", "Stock (kg)", "Bilan (kg)", "Taux de Couverture (%)"]


def colonnes_analyse(group_by: GroupBy) -> List[str]:
    """En-têtes de la table d'analyse (identiques à l'export CSV)."""
    group_by = GroupBy(group_by)
    if group_by is GroupBy.DETAILED:
        return ["Province (DRANEF)", "Espèce", *VALUE_HEADERS]
    return ["Espèce" if group_by is GroupBy.SPECIES else "DRANEF", *VALUE_HEADERS]


def lignes_analyse(store: SeedStore, group_by: GroupBy = GroupBy.SPECIES) -> List[BalanceRow]:
    return compute_balance_rows(
        store.seed_needs,
        store.stock_items,
        store.species_names(),
        store.srs_locations(),
        group_by=group_by,
        unknown=DEFAULTS.libelle_inconnu,
    )


# ----------------------
# 1) Analyse besoins / stock
# ----------------------

def rapport_besoins_stock(store: SeedStore, group_by: GroupBy = GroupBy.SPECIES) -> Report:
    """
    Table d'analyse besoins / stock pour le mode de regroupement demandé.

    Colonnes: libellé (espèce, DRANEF ou « province (DRAN) » + espèce),
    besoins, stock et bilan en kg (2 décimales), taux de couverture
    (« NN% » ou « N/A » quand rien n'est demandé).
    """
    group_by = GroupBy(group_by)
    log_system_event("rapport_besoins_stock_start", {"group_by": group_by.value})
    try:
        system_logger.info(f"REPORT_BESOINS_STOCK: Regroupement {group_by.value}")
        data = lignes_analyse(store, group_by)

        rows: List[List[Any]] = []
        for r in data:
            head = [r.key, r.species] if group_by is GroupBy.DETAILED else [r.key]
            rows.append([*head, round(r.needed, 2), round(r.stocked, 2), round(r.balance, 2),
                         format_coverage(r.coverage)])

        en_deficit = sum(1 for r in data if r.balance < 0)
        system_logger.info(f"REPORT_BESOINS_STOCK: {len(rows)} lignes, {en_deficit} en déficit")
        log_system_event("rapport_besoins_stock_success", {"lignes": len(rows), "deficits": en_deficit})

        msg = None
        if not rows:
            msg = "Aucun besoin ni stock à analyser."
        return colonnes_analyse(group_by), rows, msg
    except Exception as e:
        log_system_event("rapport_besoins_stock_error", {"group_by": group_by.value, "error": str(e)}, level="error")
        system_logger.error(f"REPORT_BESOINS_STOCK: Erreur - {e}")
        raise


# ----------------------
# 2) Tableau de bord
# ----------------------

def resume_tableau_de_bord(store: SeedStore, top_n: int = DEFAULTS.top_n_graphique) -> Dict[str, Any]:
    """
    Synthèse du tableau de bord.

    Returns:
        dict avec:
          - stock_total_kg, nombre_lots, controles_non_conformes, nombre_especes
          - couverture_globale (%) et bande_couverture (CRITIQUE / ALERTE / OK)
          - deficits / surplus: listes ``(espèce, kg)`` triées par valeur décroissante
          - graphique: ``SpeciesBalance`` des ``top_n`` plus gros besoins
          - lots_par_statut: effectif par libellé de statut
    """
    log_system_event("resume_tableau_de_bord_start")
    try:
        balances = species_balances(store.seed_needs, store.stock_items, store.species_names())
        couverture = overall_coverage(balances)
        statuts = Counter(lot.status for lot in store.lots)
        out = {
            "stock_total_kg": sum(float(s.quantity_kg or 0.0) for s in store.stock_items),
            "nombre_lots": len(store.lots),
            "controles_non_conformes": sum(1 for qc in store.quality_checks if qc.result is CheckResult.FAIL),
            "nombre_especes": len(store.species),
            "couverture_globale": couverture,
            "bande_couverture": coverage_band(couverture),
            "deficits": deficits(balances),
            "surplus": surpluses(balances),
            "graphique": chart_rows(balances, top_n=top_n),
            "lots_par_statut": {s.value: statuts.get(s, 0) for s in LotStatus},
        }
        system_logger.info(
            f"REPORT_DASHBOARD: couverture={couverture:.1f}% deficits={len(out['deficits'])} surplus={len(out['surplus'])}"
        )
        log_system_event("resume_tableau_de_bord_success", {"couverture": round(couverture, 2)})
        return out
    except Exception as e:
        log_system_event("resume_tableau_de_bord_error", {"error": str(e)}, level="error")
        raise


# ----------------------
# 3) Distributions
# ----------------------

def rapport_distributions(
    store: SeedStore,
    par: str = "species",
    terme: Optional[str] = None,
    debut: Optional[date] = None,
    fin: Optional[date] = None,
    top_n: int = DEFAULTS.top_n_distribution,
) -> Report:
    """Quantités distribuées regroupées par espèce (via l'article en stock) ou par destination."""
    if par not in ("species", "destination"):
        raise ValueError(f"Regroupement inconnu: {par}")
    log_system_event("rapport_distributions_start", {"par": par})
    try:
        items = {s.id: s for s in store.stock_items}
        species = store.species_names()
        totals: Dict[str, float] = {}
        for d in rechercher_distributions(store, terme, debut, fin):
            if par == "species":
                item = items.get(d.stock_item_id)
                key = species.get(item.species_id, DEFAULTS.libelle_inconnu) if item else DEFAULTS.libelle_inconnu
            else:
                key = d.destination
            if key:
                totals[key] = totals.get(key, 0.0) + float(d.quantity_kg or 0.0)

        rows = [[name, round(q, 2)] for name, q in totals.items()]
        rows.sort(key=lambda r: -r[1])
        rows = rows[: max(0, int(top_n))]
        log_system_event("rapport_distributions_success", {"lignes": len(rows)})

        columns = ["Espèce" if par == "species" else "Destination", "Quantité (kg)"]
        msg = None
        if not rows:
            msg = "Aucune distribution sur la période."
        return columns, rows, msg
    except Exception as e:
        log_system_event("rapport_distributions_error", {"par": par, "error": str(e)}, level="error")
        raise


# ----------------------
# 4) Traitements en cours
# ----------------------

def rapport_traitements_en_cours(store: SeedStore) -> Report:
    """Traitements « En cours » ayant une date de début et de fin, par date de fin croissante."""
    log_system_event("rapport_traitements_en_cours_start")
    try:
        en_cours = [
            t for t in store.seed_treatments
            if t.status is TreatmentStatus.IN_PROGRESS and t.start_date and t.end_date
        ]
        en_cours.sort(key=lambda t: t.end_date)
        species = store.species_names()
        lots = {lot.id: lot for lot in store.lots}
        rows = [
            [
                t.lot_id,
                species.get(lots[t.lot_id].species_id, DEFAULTS.libelle_inconnu) if t.lot_id in lots
                else DEFAULTS.libelle_inconnu,
                t.treatment_type.value,
                t.start_date.isoformat(),
                t.end_date.isoformat(),
                t.operator,
            ]
            for t in en_cours
        ]
        log_system_event("rapport_traitements_en_cours_success", {"lignes": len(rows)})
        msg = None
        if not rows:
            msg = "Aucun traitement en cours."
        return ["Lot", "Espèce", "Type", "Début", "Fin", "Opérateur"], rows, msg
    except Exception as e:
        log_system_event("rapport_traitements_en_cours_error", {"error": str(e)}, level="error")
        raise


# ----------------------
# 5) Historique qualité
# ----------------------

def historique_controles(store: SeedStore, lot_id: str) -> Report:
    """Contrôles qualité d'un lot par date croissante."""
    log_system_event("historique_controles_start", {"lot_id": lot_id})
    checks = [qc for qc in store.quality_checks if qc.lot_id == lot_id]
    checks.sort(key=lambda qc: qc.check_date or date.min)
    rows = [
        [
            qc.check_date.isoformat() if qc.check_date else "",
            qc.check_type.value,
            qc.germination_rate,
            qc.purity,
            qc.moisture_content,
            qc.thousand_seed_weight,
            qc.result.value,
        ]
        for qc in checks
    ]
    columns = ["Date", "Type", "Germination (%)", "Pureté (%)", "Humidité (%)", "PMG (g)", "Résultat"]
    msg = None
    if not rows:
        msg = f"Aucun contrôle qualité pour le lot {lot_id}."
    return columns, rows, msg
