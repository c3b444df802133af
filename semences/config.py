# semences/config.py
"""
Configuration globale et valeurs par défaut du système de gestion des semences.
"""

import os
from dataclasses import dataclass
from pathlib import Path


# Fichier JSON du jeu de données (None => données de démonstration)
DATA_PATH = os.environ.get("SEMENCES_DATA") or None

# Répertoire des journaux
LOGS_DIR = Path(os.environ.get("SEMENCES_LOGS_DIR") or Path(__file__).parent / "logs")


@dataclass
class DefaultConfig:
    """Valeurs par défaut des paramètres du système."""
    top_n_graphique: int = 10         # espèces affichées dans le graphique besoins/stock
    top_n_distribution: int = 7       # lignes du résumé des distributions
    seuil_couverture_critique: float = 30.0
    seuil_couverture_alerte: float = 70.0
    separateur_csv: str = ";"
    delai_chargement: float = 0.0     # secondes, simulation de latence du chargement
    delai_apercus: float = 0.0        # secondes, simulation de latence des aperçus
    libelle_inconnu: str = "Inconnu"


# Instance globale des valeurs par défaut
DEFAULTS = DefaultConfig()
