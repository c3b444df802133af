# semences/domain/models.py
"""
Modèles (dataclasses) du domaine.

Observations:
- Les enregistrements sont remplacés en bloc lors d'une mise à jour
  (``dataclasses.replace``), jamais modifiés champ par champ dans le store.
- Les énumérations ont pour valeur le libellé affiché à l'utilisateur.
- Les références entre entités sont des identifiants (``*_id``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


# -------------------------
# Énumérations
# -------------------------

class LotCategory(str, Enum):
    HARVEST = "Récolte"
    PURCHASE = "Achat"


class LotStatus(str, Enum):
    PROCESSING = "En traitement"
    IN_STOCK = "En stock"
    DISTRIBUTED = "Distribué"


class TreatmentType(str, Enum):
    COLD_STRATIFICATION = "Stratification à froid"
    MECHANICAL_SCARIFICATION = "Scarification mécanique"
    SOAKING = "Trempage"
    FUNGICIDE = "Traitement fongicide"


class TreatmentStatus(str, Enum):
    PLANNED = "Planifié"
    IN_PROGRESS = "En cours"
    DONE = "Terminé"


class CheckType(str, Enum):
    BEFORE_CONDITIONING = "Avant Conditionnement"
    AFTER_CONDITIONING = "Après Conditionnement"
    PERIODIC = "Périodique"


class CheckResult(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"


class NeedStatus(str, Enum):
    NEW = "Nouveau"
    VALIDATED = "Validé"
    PROCESSED = "Traité"


class ProgramStatus(str, Enum):
    PLANNED = "Planifié"
    IN_PROGRESS = "En Cours"
    DONE = "Terminé"


# -------------------------
# Référentiel
# -------------------------

@dataclass
class Species:
    """Espèce forestière."""
    id: str
    scientific_name: str
    common_name: str
    genus: str
    group: str
    seeding_coefficient_kg_per_1000_plants: Optional[float] = None  # kg de semences pour 1000 plants


@dataclass
class Region:
    """Région de provenance (code écologique, ex.: I3)."""
    id: str
    code: str
    name: str


@dataclass
class Provenance:
    """Provenance de semences; ``code`` est toujours dérivé de région/espèce/nom."""
    id: str
    code: str
    name: str
    localisation: str
    region_id: str
    species_id: str


@dataclass
class Provider:
    """Prestataire."""
    id: str
    name: str
    address: str
    phone: str


@dataclass
class Srs:
    """Station de recherche semencière (lieu de stockage)."""
    id: str
    name: str
    dranef: str
    province: str


# -------------------------
# Transactions
# -------------------------

@dataclass
class Lot:
    id: str
    quantity_kg: float
    harvest_year: int
    harvest_date: Optional[date]
    category: LotCategory
    species_id: str
    provenance_id: str
    seed_stand: str
    srs_id: str
    status: LotStatus
    provider_id: Optional[str] = None


@dataclass
class SeedTreatment:
    id: str
    lot_id: str
    treatment_type: TreatmentType
    start_date: Optional[date]
    end_date: Optional[date]
    operator: str
    status: TreatmentStatus
    observations: Optional[str] = None


@dataclass
class QualityCheck:
    id: str
    lot_id: str
    check_type: CheckType
    check_date: Optional[date]
    germination_rate: float    # taux de germination (%)
    purity: float              # %
    moisture_content: float    # %
    thousand_seed_weight: float  # g
    result: CheckResult


@dataclass
class StockItem:
    id: str
    lot_id: str
    species_id: str
    quantity_kg: float
    entry_date: Optional[date]
    srs_id: str


@dataclass
class SeedNeed:
    id: str
    dranef: str
    province: str
    project: str
    perimeter_name: str
    species_id: str
    number_of_plants: int
    calculated_seed_quantity_kg: float
    request_date: Optional[date]
    status: NeedStatus


@dataclass
class EvaluationProgram:
    id: str
    species_id: str
    srs_id: str
    province: str
    programmed_date: Optional[date]
    status: ProgramStatus
    real_date: Optional[date] = None


@dataclass
class FructificationEvaluation:
    id: str
    program_id: str
    srs_id: str
    report_summary: str
    evaluation_date: Optional[date]


@dataclass
class Distribution:
    id: str
    stock_item_id: str
    quantity_kg: float
    destination: str
    distribution_date: Optional[date]


# Divisions administratives (DRANEF) et provinces proposées dans les formulaires
DRANEF_PROVINCES: Dict[str, List[str]] = {
    "ORIENTAL": ["Oujda", "Taourirt", "Figuig", "Jerada", "Driouch", "Nador", "Berkane", "Guercif"],
    "TANGER TETOAUEN EL HOUCELIMA": ["Tanger-Assilah", "Tétouan", "Al Hoceima", "Chefchaouen", "Larache", "M'diq-Fnideq", "Ouezzane", "Fahs-Anjra"],
    "MERRAKECH SAFI": ["Marrakech", "Safi", "Essaouira", "Chichaoua", "Al Haouz", "Kelaat Sraghna", "Rehamna", "Youssoufia"],
    "RABAT SALE KENITRA": ["Rabat", "Salé", "Kénitra", "Skhirat-Témara", "Khemisset", "Sidi Kacem", "Sidi Slimane"],
    "FES MEKNES": ["Fès", "Meknès", "Ifrane", "El Hajeb", "Sefrou", "Moulay Yacoub", "Boulemane", "Taza", "Taounate"],
    "SOUS MASSA": ["Agadir-Ida Ou Tanane", "Inezgane-Aït Melloul", "Chtouka-Aït Baha", "Taroudant", "Tiznit", "Tata"],
    "GUELMIM OUED NOUN": ["Guelmim", "Assa-Zag", "Sidi Ifni", "Tan-Tan"],
    "LAAYOUNE SAKIA LHAMRA": ["Laâyoune", "Boujdour", "Tarfaya", "Es-Semara"],
    "DAKHELA OUED DAHAB": ["Oued Ed-Dahab", "Aousserd"],
    "BENI MELAL KHENIFRA": ["Beni Mellal", "Khénifra", "Khouribga", "Azilal", "Fquih Ben Salah"],
}
