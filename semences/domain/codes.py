"""
Génération des identifiants lisibles (lots, provenances) et des identifiants
techniques des autres enregistrements.

Règles:
- abréviation d'espèce: initiales des deux premiers mots du nom
  scientifique ("Pinus halepensis" -> "PH"), ou les deux premières lettres
  si le nom ne compte qu'un mot;
- lot: ``{AA}-{abréviation}-{code région}-{NNN}``, séquence = 1 + max des
  suffixes existants pour le même préfixe;
- provenance: ``{code région}-{abréviation}-{nom assaini}``.

Toutes les fonctions sont pures; la résolution des références (espèce,
provenance, région) est faite par la couche use case.
"""

from __future__ import annotations

import random
import re
import string
import time
from datetime import date
from typing import Iterable, Optional

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_BASE36 = string.digits + string.ascii_uppercase

SEQUENCE_WIDTH = 3


def species_abbreviation(scientific_name: Optional[str]) -> str:
    """Abréviation de deux lettres du nom scientifique (``"XX"`` si vide)."""
    if not scientific_name:
        return "XX"
    words = scientific_name.split(" ")
    if len(words) > 1:
        return (words[0][:1] + words[1][:1]).upper()
    return scientific_name[:2].upper()


def sanitize_for_code(name: Optional[str]) -> str:
    """Retire tout caractère hors ``[A-Za-z0-9]``."""
    return _NON_ALNUM_RE.sub("", name or "")


def provenance_code(region_code: str, scientific_name: str, name: str) -> str:
    return f"{region_code}-{species_abbreviation(scientific_name)}-{sanitize_for_code(name)}"


def lot_prefix(harvest_year: int, scientific_name: str, region_code: str) -> str:
    """Préfixe ``{AA}-{abréviation}-{région}`` d'un identifiant de lot."""
    year = str(int(harvest_year))[-2:]
    return f"{year}-{species_abbreviation(scientific_name)}-{region_code}"


def _sequence_of(lot_id: str) -> Optional[int]:
    tail = lot_id.rsplit("-", 1)[-1]
    return int(tail) if tail.isdigit() else None


def next_lot_id(prefix: str, existing_ids: Iterable[str]) -> str:
    """Prochain identifiant libre pour ``prefix``.

    Seuls les identifiants de la forme exacte ``{prefix}-{n}`` comptent:
    ``24-PH-I3`` ne voit pas ``24-PH-I31-004``.
    """
    head = prefix + "-"
    max_seq = 0
    for lot_id in existing_ids:
        if not lot_id.startswith(head):
            continue
        seq = _sequence_of(lot_id[len(head):])
        if seq is not None and seq > max_seq:
            max_seq = seq
    return f"{prefix}-{str(max_seq + 1).zfill(SEQUENCE_WIDTH)}"


def fresh_id(prefix: str, existing_ids: Iterable[str], now: Optional[float] = None) -> str:
    """Identifiant ``{prefix}-{horodatage ms}``, incrémenté jusqu'à être libre."""
    taken = set(existing_ids)
    stamp = int((time.time() if now is None else now) * 1000)
    candidate = f"{prefix}-{stamp}"
    while candidate in taken:
        stamp += 1
        candidate = f"{prefix}-{stamp}"
    return candidate


def program_id(existing_ids: Iterable[str], today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    """Identifiant de programme d'évaluation ``PE-{année}-{4 caractères base 36}``."""
    taken = set(existing_ids)
    year = (today or date.today()).year
    rng = rng or random.Random()
    while True:
        suffix = "".join(rng.choice(_BASE36) for _ in range(4))
        candidate = f"PE-{year}-{suffix}"
        if candidate not in taken:
            return candidate
