# semences/adapters/export.py
"""
Export CSV de la table d'analyse besoins / stock.

Format: séparateur « ; », ligne d'en-tête propre au mode de regroupement,
quantités à 2 décimales, taux de couverture « NN% » ou « N/A ».
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from semences.config import DEFAULTS
from semences.domain.balance import GroupBy, format_coverage
from semences.infra.logger import log_file_operation
from semences.infra.store import SeedStore
from semences.usecases.rapports import colonnes_analyse, lignes_analyse


def nom_fichier_csv(group_by: GroupBy) -> str:
    return f"analyse_besoins_stock_{GroupBy(group_by).value}.csv"


def dataframe_analyse(store: SeedStore, group_by: GroupBy = GroupBy.SPECIES) -> pd.DataFrame:
    """Table d'analyse prête à l'export (valeurs déjà formatées en texte)."""
    group_by = GroupBy(group_by)
    records = []
    for r in lignes_analyse(store, group_by):
        head = [r.key, r.species] if group_by is GroupBy.DETAILED else [r.key]
        records.append([*head, f"{r.needed:.2f}", f"{r.stocked:.2f}", f"{r.balance:.2f}", format_coverage(r.coverage)])
    return pd.DataFrame(records, columns=colonnes_analyse(group_by))


def exporter_csv(store: SeedStore, group_by: GroupBy = GroupBy.SPECIES, path: Optional[str] = None) -> str:
    """Écrit le CSV et renvoie son chemin (défaut: ``analyse_besoins_stock_{mode}.csv``)."""
    out = Path(path or nom_fichier_csv(group_by))
    df = dataframe_analyse(store, group_by)
    df.to_csv(out, sep=DEFAULTS.separateur_csv, index=False, encoding="utf-8")
    log_file_operation("export", str(out), rows_processed=len(df))
    return str(out)
