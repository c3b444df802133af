"""
Utilitaires de parsing pour les saisies (CLI, classeurs XLSX).

Ce module interprète les chaînes saisies par l'utilisateur ou lues dans
un classeur: quantités en kilogrammes (« 12,5 kg »), nombres de plants
(« 50 000 »), dates (ISO ou JJ/MM/AAAA). Toute valeur indéterminable est
renvoyée comme None; la validation est faite par les use cases.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

_NUM_RE = re.compile(r"[-+]?\d+(?:[.,]\d+)?")
# séparateur de milliers (espace, apostrophe) suivi d'un groupe de 3 chiffres
_GROUP_SEP_RE = re.compile(r"(?<=\d)[\s'](?=\d{3}(?!\d))")
_GROUPED_INT_RE = re.compile(r"-?\d{1,3}(?:[\s.']\d{3})+")
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d/%m/%y")
_GRAMMES = {"g", "gr", "gramme", "grammes"}


def parse_quantite_kg(txt: Any) -> Optional[float]:
    """Interprète une quantité de semences en kilogrammes.

    Le nombre peut utiliser la virgule ou le point comme séparateur
    décimal; une unité en grammes (« g ») est convertie en kg.

    Exemples:
        "12,5 kg"  → 12.5
        "150"      → 150.0
        "800 g"    → 0.8
        "1 200 kg" → 1200.0

    Args:
        txt: Texte (ou nombre) à interpréter.

    Returns:
        La quantité en kg, ou None.
    """
    if txt is None or isinstance(txt, bool):
        return None
    if isinstance(txt, (int, float)):
        return float(txt)
    s = _GROUP_SEP_RE.sub("", str(txt).strip())
    if not s:
        return None
    m = _NUM_RE.search(s)
    if not m:
        return None
    num = float(m.group(0).replace(",", "."))
    unit = re.sub(r"[^a-z]", "", s[m.end():].lower())
    if unit in _GRAMMES:
        return num / 1000.0
    return num


def parse_entier(txt: Any) -> Optional[int]:
    """Nombre entier, séparateurs de milliers tolérés (« 50 000 », « 50.000 »)."""
    if txt is None or isinstance(txt, bool):
        return None
    if isinstance(txt, int):
        return txt
    if isinstance(txt, float):
        return int(txt)
    s = str(txt).strip()
    if _GROUPED_INT_RE.fullmatch(s):
        return int(re.sub(r"[^\d-]", "", s))
    if re.fullmatch(r"-?\d+\.0+", s):
        return int(float(s))
    s = re.sub(r"[\s.']", "", s)
    s = s.split(",", 1)[0]
    if not s or not s.lstrip("-").isdigit():
        return None
    return int(s)


def parse_date(val: Any) -> Optional[date]:
    """Convertit ``val`` en ``date`` (ISO ``AAAA-MM-JJ`` ou ``JJ/MM/AAAA``)."""
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    s = str(val).strip()
    if not s:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s[:10] if fmt == "%Y-%m-%d" else s, fmt).date()
        except ValueError:
            continue
    return None


def parse_enum(enum_cls, val: Any):
    """Membre de ``enum_cls`` désigné par son libellé ou son nom (casse ignorée)."""
    if val is None:
        return None
    if isinstance(val, enum_cls):
        return val
    s = str(val).strip().lower()
    if not s:
        return None
    for member in enum_cls:
        if s in (member.value.lower(), member.name.lower()):
            return member
    return None
