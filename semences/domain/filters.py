"""
Prédicats de recherche partagés par les écrans de liste.

- recherche textuelle: sous-chaîne, insensible à la casse, sur une liste
  fixe de champs (les champs absents sont ignorés);
- intervalle de dates inclusif: début ramené à 00:00:00, fin à 23:59:59.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Union

DateLike = Union[date, datetime, None]


def matches_text(term: Optional[str], *fields: Optional[str]) -> bool:
    """Vrai si ``term`` est vide ou contenu dans l'un des ``fields``."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in str(f).lower() for f in fields if f is not None)


def _moment(value: DateLike) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _bound(value: DateLike, at: time) -> Optional[datetime]:
    if value is None:
        return None
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, at)


def within_dates(value: DateLike, start: DateLike = None, end: DateLike = None) -> bool:
    """Vrai si ``value`` appartient à ``[start 00:00:00, end 23:59:59]``.

    Sans borne, tout passe; une valeur absente ne passe qu'en l'absence
    de bornes.
    """
    if start is None and end is None:
        return True
    moment = _moment(value)
    if moment is None:
        return False
    lo = _bound(start, time.min)
    hi = _bound(end, time(23, 59, 59, 999999))
    if lo is not None and moment < lo:
        return False
    if hi is not None and moment > hi:
        return False
    return True
