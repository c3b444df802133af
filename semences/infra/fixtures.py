# semences/infra/fixtures.py
"""
Jeu de données de démonstration.

Remplace l'appel externe de génération de données: les collections sont
construites en mémoire à chaque appel (aucun état partagé entre deux
stores). Les codes de provenance et les quantités de semences des besoins
sont recalculés à partir des règles métier, jamais recopiés.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Tuple

from semences.domain.codes import provenance_code
from semences.domain.formulas import seed_quantity_kg
from semences.domain.models import (
    CheckResult,
    CheckType,
    Distribution,
    EvaluationProgram,
    FructificationEvaluation,
    Lot,
    LotCategory,
    LotStatus,
    NeedStatus,
    ProgramStatus,
    Provenance,
    Provider,
    QualityCheck,
    Region,
    SeedNeed,
    SeedTreatment,
    Species,
    Srs,
    StockItem,
    TreatmentStatus,
    TreatmentType,
)

# (nom scientifique, nom commun); l'identifiant est la position dans la liste
SPECIES_LIST: List[Tuple[str, str]] = [
    ("Eucalyptus woodwardii", "Eucalyptus de Woodward"),
    ("Pinus brutia", "Pin de Calabre"),
    ("Cassia sp.", "Cassia"),
    ("Opuntia ficus-indica", "Figuier de Barbarie"),
    ("Balanites aegyptiaca", "Dattier du désert"),
    ("Nitraria retusa", "Nitraria à feuilles rétuses"),
    ("Acacia horrida", "Acacia horrida"),
    ("Eucalyptus cladocalyx", "Gommier à fleurs"),
    ("Retama dasycarpa", "Genêt à fruits velus"),
    ("Parkinsonia aculata", "Palo Verde"),
    ("Schinus terebinthifolius", "Faux-poivrier"),
    ("Lagunaria patersonii", "Hibiscus de l'île Norfolk"),
    ("Prosopis juliflora", "Mesquite"),
    ("Tamarix aphylla", "Tamaris articulé"),
    ("Prunus dulcis", "Amandier"),
    ("Capparis spinosa", "Câprier"),
    ("Eucalyptus rudis", "Gommier des plaines inondables"),
    ("Lycium intricatum", "Lyciet embrouillé"),
    ("Euphorbia dendroides", "Euphorbe arborescente"),
    ("Eucalyptus torquata", "Gommier corail"),
    ("Pinus canariensis", "Pin des Canaries"),
    ("Ziziphus lotus", "Jujubier sauvage"),
    ("Tetraclinis orientalis", "Thuya de Barbarie"),
    ("Tetraclinis articulata", "Thuya de Barbarie"),
    ("Taxus baccata", "If commun"),
    ("Pinus roxburghii", "Pin de Roxburgh"),
    ("Pinus radiata", "Pin de Monterey"),
    ("Pinus pinea", "Pin parasol"),
    ("Pinus pinaster maghrebiana", "Pin maritime du Maghreb"),
    ("Pinus pinaster var. atlantica", "Pin maritime de l'Atlantique"),
    ("Pinus pinaster", "Pin maritime"),
    ("Pinus nigra var. clusiana", "Pin noir de Clusius"),
    ("Pinus nigra var. mauretanica", "Pin noir de Maurétanie"),
    ("Pinus halepensis", "Pin d'Alep"),
    ("Juniperus thurifera", "Genévrier thurifère"),
    ("Juniperus phoenicea", "Genévrier de Phénicie"),
    ("Juniperus oxycedrus", "Genévrier cade"),
    ("Cupressus glabra", "Cyprès glabre"),
    ("Cupressus benthamii", "Cyprès de Bentham"),
    ("Cupressus atlantica", "Cyprès de l'Atlas"),
    ("Cupressus arizonica", "Cyprès de l'Arizona"),
    ("Cupressus sempervirens", "Cyprès de Provence"),
    ("Cupressus macrocarpa", "Cyprès de Monterey"),
    ("Cupressus lusitanica", "Cyprès du Portugal"),
    ("Celtis australis", "Micocoulier de Provence"),
    ("Cedrus libani", "Cèdre du Liban"),
    ("Cedrus atlantica", "Cèdre de l'Atlas"),
    ("Biota orientalis", "Thuya d'Orient"),
    ("Abies pinsapo", "Sapin d'Espagne"),
    ("Abies maroccana", "Sapin du Maroc"),
    ("Schinus molle", "Faux-poivrier"),
    ("Salix babylonica", "Saule pleureur"),
    ("Robinia pseudoacacia", "Robinier faux-acacia"),
    ("Quercus suber", "Chêne-liège"),
    ("Quercus pyrenaica", "Chêne des Pyrénées"),
    ("Quercus rotundifolia", "Chêne vert"),
    ("Quercus fruticosa", "Chêne buissonnant"),
    ("Quercus faginea", "Chêne faginé"),
    ("Quercus coccifera", "Chêne kermès"),
    ("Quercus borealis", "Chêne rouge d'Amérique"),
    ("Quercus aegilops", "Chêne du Liban"),
    ("Prunus prostrata", "Prunier prostré"),
    ("Populus nigra", "Peuplier noir"),
    ("Populus euramericana", "Peuplier hybride"),
    ("Populus euphratica", "Peuplier de l'Euphrate"),
    ("Populus alba", "Peuplier blanc"),
    ("Pistacia terebinthus", "Térébinthe"),
    ("Pistacia atlantica", "Pistachier de l'Atlas"),
    ("Olea europaea", "Olivier"),
    ("Juglans regia", "Noyer commun"),
    ("Fraxinus angustifolia", "Frêne à feuilles étroites"),
    ("Eucalyptus tereticornis", "Gommier des forêts"),
    ("Eucalyptus sideroxylon", "Gommier à écorce de fer"),
    ("Eucalyptus robusta", "Eucalyptus robuste"),
    ("Eucalyptus occidentalis", "Gommier de l'ouest"),
    ("Eucalyptus gomphocephala", "Gommier tuart"),
    ("Eucalyptus globulus", "Gommier bleu"),
    ("Eucalyptus camaldulensis", "Gommier rouge"),
    ("Crataegus laciniata", "Aubépine laciniée"),
    ("Ceratonia siliqua", "Caroubier"),
    ("Casuarina stricta", "Filao"),
    ("Casuarina glauca", "Filao glauque"),
    ("Casuarina equisetifolia", "Filao à feuilles de prêle"),
    ("Casuarina cunninghamiana", "Filao de Cunningham"),
    ("Argania spinosa", "Arganier"),
    ("Araucaria excelsa", "Pin de Norfolk"),
    ("Acer opalus", "Érable à feuilles d'obier"),
    ("Acer monspessulanum", "Érable de Montpellier"),
    ("Acacia raddiana", "Acacia raddiana"),
    ("Acacia podalyriaefolia", "Mimosa à feuilles de Podalyria"),
    ("Acacia mollissima", "Mimosa noir"),
    ("Acacia melanoxylon", "Mimosa à bois noir"),
    ("Acacia longifolia", "Mimosa à longues feuilles"),
    ("Acacia gummifera", "Gommier marocain"),
    ("Acacia farnesiana", "Cassier"),
    ("Acacia dealbata", "Mimosa d'hiver"),
    ("Acacia cyclops", "Acacia cyclops"),
    ("Acacia cyanophylla", "Mimosa bleuâtre"),
    ("Acacia cultriformis", "Mimosa couteau"),
    ("Acacia baileyana", "Mimosa de Bailey"),
    ("Withania frutescens", "Withania frutescens"),
    ("Viburnum tinus", "Laurier-tin"),
    ("Ulmus campestris", "Orme champêtre"),
    ("Ulex parviflorus", "Ajonc de Provence"),
    ("Tipuana speciosa", "Tipa"),
    ("Thymelaea tartonraira", "Thymelaea tartonraira"),
    ("Thymelaea lythroides", "Thymelaea lythroides"),
    ("Teline linifolia", "Teline à feuilles de lin"),
    ("Sorbus torminalis", "Alisier torminal"),
    ("Sorbus aria", "Alisier blanc"),
    ("Smilax aspera", "Salsepareille"),
    ("Salvia mellifera", "Sauge noire"),
    ("Salvia ocheri", "Sauge ocre"),
    ("Salvia apiana", "Sauge blanche"),
    ("Rubus ulmifolius", "Ronce à feuilles d'orme"),
    ("Rosmarinus officinalis", "Romarin officinal"),
    ("Rhus pentaphylla", "Sumac à cinq feuilles"),
    ("Retama sphaerocarpa", "Genêt à fruits sphériques"),
    ("Retama monosperma", "Genêt blanc"),
    ("Pteridium aquilinum", "Fougère aigle"),
    ("Pistacia lentiscus", "Pistachier lentisque"),
    ("Phillyrea media", "Filaire à feuilles moyennes"),
    ("Phillyrea angustifolia", "Filaire à feuilles étroites"),
    ("Phillyrea angustifolia latifolia", "Filaire à larges feuilles"),
    ("Myrtus communis", "Myrte commun"),
    ("Morus alba", "Mûrier blanc"),
    ("Mentha pulegium", "Menthe pouliot"),
    ("Lavandula stoechas", "Lavande stoechas"),
    ("Lavandula pedunculata var. atlantica", "Lavande d'atlantique"),
    ("Lavandula multifida", "Lavande multifide"),
    ("Inula viscosa", "Inule visqueuse"),
    ("Ilex aquifolium", "Houx commun"),
    ("Globularia nainii", "Globulaire de Nain"),
    ("Globularia alypum", "Globulaire turbith"),
    ("Gleditsia triacanthos", "Févier d'Amérique"),
    ("Erica multiflora", "Bruyère à nombreuses fleurs"),
    ("Erica arborea", "Bruyère arborescente"),
    ("Cytisus arboreus", "Cytise arborescent"),
    ("Colutea arborescens", "Baguenaudier"),
    ("Cistus salviifolius", "Ciste à feuilles de sauge"),
    ("Cistus populifolius", "Ciste à feuilles de peuplier"),
    ("Cistus monspeliensis", "Ciste de Montpellier"),
    ("Cistus libanotis", "Ciste du Liban"),
    ("Cistus laurifolius", "Ciste à feuilles de laurier"),
    ("Cistus ladanifer", "Ciste ladanifère"),
    ("Cistus crispus", "Ciste crépu"),
    ("Cistus albidus", "Ciste cotonneux"),
    ("Chamaerops humilis", "Palmier nain"),
    ("Chamaecyparis lawsoniana", "Cyprès de Lawson"),
    ("Callistemon citrinum", "Rince-bouteille"),
    ("Calycotome intermedia", "Calycotome intermedia"),
    ("Calycotome villosa", "Genêt velu"),
    ("Buxus balearica", "Buis des Baléares"),
    ("Bupleurum spinosum", "Buplèvre épineux"),
    ("Brachychiton populneus", "Arbre bouteille"),
    ("Atriplex nummularia", "Arroche nummulaire"),
    ("Astragalus armatus ssp. numidicus", "Astragale de numidie"),
    ("Artemisia herba-alba", "Armoise blanche"),
    ("Arbutus unedo", "Arbousier"),
]

# Coefficients de semis connus (kg pour 1000 plants)
SEEDING_COEFFICIENTS = {
    "Pinus halepensis": 0.5,
    "Cedrus atlantica": 1.2,
    "Eucalyptus camaldulensis": 0.2,
    "Quercus suber": 8.5,
    "Argania spinosa": 15.0,
}

SPECIES_GROUPS = {
    "Pinus halepensis": "Pinus halepensis",
    "Pinus canariensis": "Pinus canariensis",
    "Pinus pinaster maghrebiana": "Pinus pinaster maghrebiana",
}

REGIONS: List[Tuple[str, str]] = [
    ("I1", "Rif Atlantique"),
    ("I2", "Rif Occidental"),
    ("I3", "Rif Oriental"),
    ("II1", "Plaine Moulouya"),
    ("II2", "Hauts Plateaux"),
    ("III1", "Maâmora"),
    ("III2", "Plateau Central"),
    ("IV1", "Moyen Atlas Occidental"),
    ("IV2", "Moyen Atlas Oriental"),
    ("IV3", "Moyen Atlas Steppique"),
    ("IX", "Le Sahara"),
    ("V1", "Messeta Atlantique"),
    ("V2", "Messeta Continentale"),
    ("VI1", "Haut Atlas Occidental"),
    ("VI2", "Haut Atlas Central"),
    ("VI3", "Haut Atlas Oriental"),
    ("VII1", "Souss Nord"),
    ("VII2", "Souss Sud"),
    ("VIII", "Le Présahara"),
]


def build_species() -> List[Species]:
    out: List[Species] = []
    for index, (scientific_name, common_name) in enumerate(SPECIES_LIST, start=1):
        genus = scientific_name.split(" ")[0]
        group = "Groupe par défaut"
        if genus == "Pinus":
            group = "Pinus"
        elif genus == "Cedrus":
            group = "Cedrus atlantica"
        elif genus == "Tetraclinis":
            group = "Tetraclinis articulata"
        group = SPECIES_GROUPS.get(scientific_name, group)
        out.append(
            Species(
                id=f"esp-{index:03d}",
                scientific_name=scientific_name,
                common_name=common_name,
                genus=genus,
                group=group,
                seeding_coefficient_kg_per_1000_plants=SEEDING_COEFFICIENTS.get(scientific_name),
            )
        )
    return out


def build_regions() -> List[Region]:
    return [Region(id=f"reg-{code}", code=code, name=name) for code, name in REGIONS]


def build_provenances(species: List[Species], regions: List[Region]) -> List[Provenance]:
    sp = {s.id: s for s in species}
    rg = {r.id: r for r in regions}
    raw = [
        ("prov-01", "Baraj mdaz", "Adrei", "reg-IV2", "esp-024"),
        ("prov-02", "Bouyaguer", "Agouray", "reg-IV1", "esp-024"),
        ("prov-03", "Aknoul", "Aknoul", "reg-I3", "esp-034"),
        ("prov-04", "Sidi M'guild", "Azrou", "reg-IV1", "esp-047"),
    ]
    return [
        Provenance(
            id=pid,
            code=provenance_code(rg[region_id].code, sp[species_id].scientific_name, name),
            name=name,
            localisation=localisation,
            region_id=region_id,
            species_id=species_id,
        )
        for pid, name, localisation, region_id, species_id in raw
    ]


def _need(species: List[Species], **kw) -> SeedNeed:
    coefficient = next(
        (s.seeding_coefficient_kg_per_1000_plants for s in species if s.id == kw["species_id"]),
        None,
    )
    return SeedNeed(calculated_seed_quantity_kg=seed_quantity_kg(kw["number_of_plants"], coefficient), **kw)


def generate_mock_data() -> Dict[str, list]:
    """Construit toutes les collections du jeu de démonstration."""
    species = build_species()
    regions = build_regions()
    return {
        "srs": [
            Srs(id="srs-01", name="Azrou", dranef="Fès-Meknès", province="Ifrane"),
            Srs(id="srs-02", name="Sidi Amira", dranef="Marrakech Safi", province="Essaouira"),
            Srs(id="srs-03", name="Chefchaouen", dranef="Tanger Tétouan Al Houceima", province="Chefchaouen"),
            Srs(id="srs-04", name="Marrakech", dranef="Marrakech Safi", province="Marrakech"),
        ],
        "species": species,
        "regions": regions,
        "provenances": build_provenances(species, regions),
        "providers": [
            Provider(id="prest-01", name="Forêt Pro", address="12 Rue de la Forêt, Rabat", phone="0537000001"),
            Provider(id="prest-02", name="Semences Atlas", address="Avenue Atlas, Ifrane", phone="0535000002"),
            Provider(id="prest-03", name="Vert-Service", address="Quartier Industriel, Marrakech", phone="0524000003"),
        ],
        "lots": [
            Lot(id="23-PH-I3-001", quantity_kg=150, harvest_year=2023, harvest_date=date(2023, 6, 15),
                category=LotCategory.HARVEST, species_id="esp-034", provenance_id="prov-03", srs_id="srs-01",
                provider_id="prest-02", status=LotStatus.IN_STOCK, seed_stand="Aknoul"),
            Lot(id="23-FA-IV2-001", quantity_kg=200, harvest_year=2023, harvest_date=date(2023, 7, 20),
                category=LotCategory.HARVEST, species_id="esp-071", provenance_id="prov-01", srs_id="srs-02",
                provider_id="prest-01", status=LotStatus.IN_STOCK, seed_stand="Adrei"),
            Lot(id="24-AS-IV1-001", quantity_kg=80, harvest_year=2024, harvest_date=date(2024, 2, 10),
                category=LotCategory.PURCHASE, species_id="esp-085", provenance_id="prov-02", srs_id="srs-04",
                status=LotStatus.PROCESSING, seed_stand="Agouray"),
            Lot(id="24-PC-IV1-001", quantity_kg=120, harvest_year=2024, harvest_date=date(2024, 3, 5),
                category=LotCategory.HARVEST, species_id="esp-021", provenance_id="prov-04", srs_id="srs-01",
                provider_id="prest-02", status=LotStatus.IN_STOCK, seed_stand="Azrou"),
            Lot(id="22-TA-IV2-001", quantity_kg=50, harvest_year=2022, harvest_date=date(2022, 8, 1),
                category=LotCategory.PURCHASE, species_id="esp-014", provenance_id="prov-01", srs_id="srs-03",
                status=LotStatus.DISTRIBUTED, seed_stand="Adrei"),
        ],
        "seed_treatments": [
            SeedTreatment(id="TRT-001", lot_id="24-AS-IV1-001", treatment_type=TreatmentType.SOAKING,
                          start_date=date(2024, 2, 11), end_date=date(2024, 2, 12), operator="Ahmed Ali",
                          status=TreatmentStatus.DONE, observations="Trempage 24h dans l'eau."),
            SeedTreatment(id="TRT-002", lot_id="24-PC-IV1-001", treatment_type=TreatmentType.COLD_STRATIFICATION,
                          start_date=date(2024, 3, 6), end_date=date(2024, 4, 6), operator="Fatima Zohra",
                          status=TreatmentStatus.IN_PROGRESS),
            SeedTreatment(id="TRT-003", lot_id="23-PH-I3-001", treatment_type=TreatmentType.FUNGICIDE,
                          start_date=date(2023, 6, 16), end_date=date(2023, 6, 16), operator="Ahmed Ali",
                          status=TreatmentStatus.DONE, observations="Application de Thiram."),
        ],
        "quality_checks": [
            QualityCheck(id="QC-001", lot_id="23-PH-I3-001", check_type=CheckType.BEFORE_CONDITIONING,
                         check_date=date(2023, 6, 20), germination_rate=92, purity=99, moisture_content=8.5,
                         thousand_seed_weight=5.2, result=CheckResult.PASS),
            QualityCheck(id="QC-002", lot_id="23-FA-IV2-001", check_type=CheckType.BEFORE_CONDITIONING,
                         check_date=date(2023, 7, 25), germination_rate=88, purity=98, moisture_content=9.1,
                         thousand_seed_weight=15.5, result=CheckResult.PASS),
            QualityCheck(id="QC-003", lot_id="24-AS-IV1-001", check_type=CheckType.BEFORE_CONDITIONING,
                         check_date=date(2024, 2, 15), germination_rate=74, purity=95, moisture_content=10.2,
                         thousand_seed_weight=3.1, result=CheckResult.FAIL),
            QualityCheck(id="QC-004", lot_id="24-AS-IV1-001", check_type=CheckType.AFTER_CONDITIONING,
                         check_date=date(2024, 2, 28), germination_rate=85, purity=97, moisture_content=8.0,
                         thousand_seed_weight=3.1, result=CheckResult.PASS),
            QualityCheck(id="QC-005", lot_id="24-PC-IV1-001", check_type=CheckType.PERIODIC,
                         check_date=date(2024, 5, 10), germination_rate=90, purity=99, moisture_content=8.6,
                         thousand_seed_weight=5.3, result=CheckResult.PASS),
            QualityCheck(id="QC-006", lot_id="23-PH-I3-001", check_type=CheckType.PERIODIC,
                         check_date=date(2024, 1, 15), germination_rate=89, purity=99, moisture_content=8.7,
                         thousand_seed_weight=5.2, result=CheckResult.PASS),
        ],
        "stock_items": [
            StockItem(id="STK-001", lot_id="23-PH-I3-001", species_id="esp-034", quantity_kg=150,
                      entry_date=date(2023, 7, 1), srs_id="srs-01"),
            StockItem(id="STK-002", lot_id="23-FA-IV2-001", species_id="esp-071", quantity_kg=200,
                      entry_date=date(2023, 8, 1), srs_id="srs-02"),
            StockItem(id="STK-003", lot_id="24-PC-IV1-001", species_id="esp-021", quantity_kg=120,
                      entry_date=date(2024, 3, 20), srs_id="srs-01"),
        ],
        "fructification_evaluations": [
            FructificationEvaluation(id="FE-001", program_id="PE-2024-A", srs_id="srs-01",
                                     report_summary="Pin d'Alep - Fructification Bonne", evaluation_date=date(2024, 4, 15)),
            FructificationEvaluation(id="FE-002", program_id="PE-2024-B", srs_id="srs-03",
                                     report_summary="Acacia - Fructification Moyenne", evaluation_date=date(2024, 4, 20)),
            FructificationEvaluation(id="FE-003", program_id="PE-2024-A", srs_id="srs-04",
                                     report_summary="Eucalyptus - Fructification Faible", evaluation_date=date(2024, 5, 1)),
        ],
        "seed_needs": [
            _need(species, id="BS-001", dranef="FES MEKNES", province="Ifrane", project="Projet de reboisement Atlas",
                  perimeter_name="Périmètre Ifrane-A", species_id="esp-047", number_of_plants=50000,
                  request_date=date(2024, 2, 10), status=NeedStatus.PROCESSED),
            _need(species, id="BS-002", dranef="TANGER TETOAUEN EL HOUCELIMA", province="Chefchaouen",
                  project="Projet Rif Vert", perimeter_name="Périmètre Talassemtane", species_id="esp-034",
                  number_of_plants=120000, request_date=date(2024, 3, 5), status=NeedStatus.VALIDATED),
            _need(species, id="BS-003", dranef="MERRAKECH SAFI", province="Essaouira", project="Projet Arganier",
                  perimeter_name="Périmètre Sidi Kaouki", species_id="esp-085", number_of_plants=75000,
                  request_date=date(2024, 4, 12), status=NeedStatus.NEW),
            _need(species, id="BS-004", dranef="SOUS MASSA", province="Agadir",
                  project="Projet Souss Conservation", perimeter_name="Périmètre Aoulouz", species_id="esp-078",
                  number_of_plants=200000, request_date=date(2024, 5, 20), status=NeedStatus.NEW),
        ],
        "evaluation_programs": [
            EvaluationProgram(id="PE-2024-A", species_id="esp-034", srs_id="srs-01", province="Ifrane",
                              programmed_date=date(2024, 9, 15), status=ProgramStatus.PLANNED),
            EvaluationProgram(id="PE-2024-B", species_id="esp-098", srs_id="srs-03", province="Chefchaouen",
                              programmed_date=date(2024, 10, 1), status=ProgramStatus.PLANNED),
            EvaluationProgram(id="PE-2023-C", species_id="esp-076", srs_id="srs-02", province="Essaouira",
                              programmed_date=date(2023, 11, 20), real_date=date(2023, 11, 18),
                              status=ProgramStatus.DONE),
        ],
        "distributions": [
            Distribution(id="DIST-001", stock_item_id="STK-001", quantity_kg=20, destination="CIRF-Rabat",
                         distribution_date=date(2024, 1, 15)),
            Distribution(id="DIST-002", stock_item_id="STK-002", quantity_kg=50, destination="MFP-Béni Mellal",
                         distribution_date=date(2024, 2, 20)),
            Distribution(id="DIST-003", stock_item_id="STK-001", quantity_kg=10, destination="Autre - Projet X",
                         distribution_date=date(2024, 4, 5)),
        ],
    }
