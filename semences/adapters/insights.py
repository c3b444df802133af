# semences/adapters/insights.py
"""
Générateur d'aperçus (recommandations) du tableau de bord.

Le générateur renvoie un texte libre en segments séparés par une ligne
vide; chaque segment a la forme ``**Titre** : corps``. Aucun service
externe n'est appelé: le texte est fixe, seule la latence est simulée.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Tuple

from semences.config import DEFAULTS
from semences.infra.logger import log_system_event

SEPARATEUR_SEGMENTS = "\n\n"
DELIMITEUR_TITRE = "** : "

APERCUS = [
    "**Alerte stock bas** : La demande pour le Cèdre de l'Atlas (esp-047) est élevée mais les stocks sont "
    "critiques. Il est urgent de planifier une récolte ou un achat.",
    "**Opportunité d'optimisation** : Vous disposez d'un surplus de semences de Pin d'Alep (esp-034). "
    "Proposez cette espèce en priorité pour les projets de reboisement à venir.",
    "**Contrôle Qualité Requis** : Le lot 23-FA-IV2-001 (Frêne à feuilles étroites) n'a pas subi de contrôle "
    "qualité récent. Un test de germination est recommandé pour garantir sa viabilité.",
]


def gerer_apercus(resume: Dict[str, Any], delay: Optional[float] = None) -> str:
    """Renvoie le texte des aperçus pour la synthèse ``resume`` (contenu fixe)."""
    log_system_event("apercus_start", {"cles": sorted(resume.keys())})
    wait = DEFAULTS.delai_apercus if delay is None else delay
    if wait and wait > 0:
        time.sleep(wait)
    return SEPARATEUR_SEGMENTS.join(APERCUS)


def parse_apercus(text: str) -> List[Tuple[Optional[str], str]]:
    """Découpe le texte en ``(titre, corps)``; titre None sans délimiteur ``** : ``."""
    out: List[Tuple[Optional[str], str]] = []
    for segment in (text or "").split(SEPARATEUR_SEGMENTS):
        segment = segment.strip()
        if not segment:
            continue
        parts = segment.split(DELIMITEUR_TITRE)
        if len(parts) == 2:
            out.append((parts[0].replace("**", "").strip(), parts[1].strip()))
        else:
            out.append((None, segment))
    return out
