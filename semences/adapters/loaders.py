# semences/adapters/loaders.py
"""
Loaders pour les classeurs (XLSX) de BESOINS en semences.

Ces fonctions:
- lisent les classeurs XLSX avec pandas;
- normalisent les en-têtes (accents, variantes, synonymes);
- renvoient des listes de dictionnaires avec les clés attendues par les use cases.

Observations:
- Le nombre de plants et les dates restent bruts; la conversion est faite
  par ``semences.adapters.parsers`` au moment de l'enregistrement.
- L'espèce peut être désignée par son identifiant, son nom commun ou son
  nom scientifique.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import pandas as pd


# ---------------------------
# utilitaires de normalisation
# ---------------------------

def _slug(s: str) -> str:
    """Normalise un en-tête: minuscules, sans accents, sans non-alphanumérique."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    accents = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(accents.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key):
    """Valeur d'une ligne pandas, None pour les valeurs manquantes."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _to_date_iso(val: Any) -> Optional[str]:
    """Convertit en date ISO (AAAA-MM-JJ) si possible."""
    if val is None or pd.isna(val):
        return None
    if isinstance(val, pd.Timestamp):
        return val.date().isoformat()
    s = str(val).strip()
    if not s:
        return None
    iso = re.match(r"^\d{4}-\d{2}-\d{2}", s)
    d = pd.to_datetime(s[:10] if iso else s, dayfirst=not iso, errors="coerce")
    if pd.isna(d):
        return None
    return d.date().isoformat()


ALIASES = {
    "dranef": "dranef",
    "direction regionale": "dranef",
    "region": "dranef",

    "province": "province",
    "dpanef": "province",

    "projet": "project",
    "project": "project",

    "perimetre": "perimeter_name",
    "nom du perimetre": "perimeter_name",
    "nom perimetre": "perimeter_name",
    "perimeter": "perimeter_name",

    "espece": "species_id",
    "especes": "species_id",
    "species": "species_id",
    "id espece": "species_id",

    "nombre de plants": "number_of_plants",
    "nombre plants": "number_of_plants",
    "nb plants": "number_of_plants",
    "plants": "number_of_plants",

    "date": "request_date",
    "date de demande": "request_date",
    "date demande": "request_date",

    "statut": "status",
    "status": "status",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomme les colonnes d'après les synonymes connus."""
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = ALIASES.get(key, key)  # sans alias, on garde le slug
    return df.rename(columns=new_cols)


# ---------------------------
# loaders publics (XLSX)
# ---------------------------

def load_besoins_from_xlsx(path: str) -> List[Dict[str, Any]]:
    """Lit un XLSX de BESOINS.

    Clés de sortie (par ligne):
      - dranef, province, project, perimeter_name: str | None
      - species_id: str | None (identifiant ou nom d'espèce)
      - number_of_plants: str | None (brut)
      - request_date: date ISO | None
      - status: str | None (libellé)
    Les lignes entièrement vides sont ignorées.
    """
    df = pd.read_excel(path, dtype="string")
    df = _normalize_columns(df)
    df = df.dropna(how="all")
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        out.append({
            "dranef": _safe_get(row, "dranef"),
            "province": _safe_get(row, "province"),
            "project": _safe_get(row, "project"),
            "perimeter_name": _safe_get(row, "perimeter_name"),
            "species_id": _safe_get(row, "species_id"),
            "number_of_plants": _safe_get(row, "number_of_plants"),
            "request_date": _to_date_iso(_safe_get(row, "request_date")),
            "status": _safe_get(row, "status"),
        })
    return out
