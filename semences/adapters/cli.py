# semences/adapters/cli.py
"""
CLI de gestion des semences forestières (Typer).

Commandes principales:
- init-data <json>        -> écrit le jeu de démonstration dans un fichier JSON
- dashboard [--json]      -> synthèse (stock, couverture, déficits, surplus)
- analyse                 -> table besoins / stock (espèce, DRANEF, détaillée)
- export-csv              -> export CSV de la table d'analyse
- apercus                 -> recommandations du tableau de bord
- lots / besoins / qc / stock / distributions / provenances
- referentiel / traitements / programmes
- tui                     -> tableau de bord interactif (Textual)

Les commandes de modification exigent ``--data`` (le fichier JSON est réécrit).
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from semences.adapters.export import exporter_csv
from semences.adapters.insights import gerer_apercus, parse_apercus
from semences.adapters.parsers import parse_date, parse_enum
from semences.config import DATA_PATH
from semences.domain.balance import GroupBy, format_coverage
from semences.domain.errors import NotFoundError, ValidationError
from semences.domain.models import CheckResult, CheckType, LotCategory, LotStatus, NeedStatus
from semences.domain.policies import (
    classify_balance,
    coverage_style,
    lot_status_style,
    need_status_style,
    program_label,
    program_status_style,
    is_program_late,
)
from semences.infra.store import SeedStore, load_store, new_store, save_store_json
from semences.usecases.besoins import rechercher_besoins, run_enregistrer_besoin, run_importer_besoins
from semences.usecases.inventaire import rechercher_distributions, rechercher_stock, run_enregistrer_distribution
from semences.usecases.lots import (
    rechercher_lots,
    run_changer_statut_lot,
    run_enregistrer_lot,
    run_supprimer_lot,
)
from semences.usecases.qualite import run_enregistrer_controle
from semences.usecases.rapports import (
    historique_controles,
    rapport_besoins_stock,
    rapport_distributions,
    rapport_traitements_en_cours,
    resume_tableau_de_bord,
)
from semences.usecases.referentiel import (
    rechercher_especes,
    rechercher_prestataires,
    rechercher_provenances,
    rechercher_regions,
    rechercher_srs,
    run_enregistrer_provenance,
)
from semences.usecases.suivi import rechercher_programmes


app = typer.Typer(help="Gestion des Semences Forestières - CLI")
console = Console()

DATA_OPTION = typer.Option(DATA_PATH, "--data", help="Fichier JSON des données (défaut: démonstration)")


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _fmt(val: Any) -> str:
    if isinstance(val, bool):
        return str(val)
    if isinstance(val, (int, float)):
        return f"{val:,.2f}".replace(",", " ")
    if val is None:
        return ""
    return str(val)


def _display_table(report, title: str = "Résultat", styles: Optional[List[Optional[str]]] = None) -> None:
    """Affiche un rapport ``(colonnes, lignes, message)`` dans une table Rich."""
    columns, rows, msg = report
    if not rows:
        console.print(Panel(msg or "Aucune donnée trouvée", title=title, border_style="yellow"))
        return
    table = Table(title=title, box=box.ROUNDED)
    for i, col in enumerate(columns):
        numeric = any(isinstance(r[i], (int, float)) and not isinstance(r[i], bool) for r in rows)
        table.add_column(col, justify="right" if numeric else "left")
    for n, row in enumerate(rows):
        style = styles[n] if styles else None
        table.add_row(*[_fmt(v) for v in row], style=style)
    console.print(table)


def _fail(message: str) -> None:
    console.print(f"[bold red]{escape(message)}[/]")
    raise typer.Exit(code=1)


def _load(data_path: Optional[str]) -> SeedStore:
    try:
        return load_store(data_path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        _fail(f"Impossible de charger les données: {e}")


def _require_data(data_path: Optional[str]) -> str:
    if not data_path:
        _fail("Option --data requise pour modifier les données.")
    return data_path


def _run(store: SeedStore, data_path: str, fn, *args, **kwargs):
    """Exécute un use case de modification puis réécrit le fichier de données."""
    try:
        result = fn(store, *args, **kwargs)
    except (ValidationError, NotFoundError) as e:
        _fail(str(e))
    save_store_json(store, data_path)
    return result


def _enum_option(enum_cls, value: Optional[str], label: str):
    if value is None:
        return None
    member = parse_enum(enum_cls, value)
    if member is None:
        choices = ", ".join(m.value for m in enum_cls)
        _fail(f"{label} inconnu: {value} (valeurs: {choices})")
    return member


def _group_by(value: str) -> GroupBy:
    try:
        return GroupBy(value)
    except ValueError:
        _fail(f"Regroupement inconnu: {value} (species, dranef, detailed)")


# -----------------------
# données / TUI
# -----------------------

@app.command("init-data")
def cmd_init_data(path: str = typer.Argument(..., help="Fichier JSON à créer")):
    """Écrit le jeu de démonstration dans un fichier JSON."""
    out = save_store_json(new_store(), path)
    typer.echo(f">> Données de démonstration écrites dans: {out}")


@app.command("tui")
def cmd_tui(data_path: Optional[str] = DATA_OPTION):
    """Lance le tableau de bord interactif (TUI)."""
    from semences.adapters.tui import main_tui
    main_tui(data_path)


# -----------------------
# tableau de bord / analyse
# -----------------------

@app.command("dashboard")
def cmd_dashboard(
    as_json: bool = typer.Option(False, "--json", help="Sortie JSON brute"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Synthèse: stock total, lots, contrôles non conformes, couverture, déficits et surplus."""
    store = _load(data_path)
    res = resume_tableau_de_bord(store)
    if as_json:
        _print_json({**res, "graphique": [[b.species_name, b.needed, b.stocked] for b in res["graphique"]]})
        return
    couverture = res["couverture_globale"]
    lines = [
        f"Stock total: {_fmt(res['stock_total_kg'])} kg",
        f"Lots: {res['nombre_lots']}",
        f"Contrôles non conformes: {res['controles_non_conformes']}",
        f"Espèces: {res['nombre_especes']}",
        f"Couverture globale: [{coverage_style(couverture)}]{format_coverage(couverture)}[/] ({res['bande_couverture']})",
    ]
    console.print(Panel("\n".join(lines), title="Tableau de bord"))
    _display_table((["Espèce", "Déficit (kg)"], [list(d) for d in res["deficits"]], "Aucune espèce en déficit."),
                   title="Espèces en déficit")
    _display_table((["Espèce", "Surplus (kg)"], [list(s) for s in res["surplus"]], "Aucune espèce en surplus."),
                   title="Espèces en surplus")
    _display_table(
        (["Espèce", "Besoins (kg)", "Stock (kg)"],
         [[b.species_name, b.needed, b.stocked] for b in res["graphique"]], None),
        title="Besoins vs stock (plus gros besoins)",
    )


@app.command("analyse")
def cmd_analyse(
    group_by: str = typer.Option("species", "--group-by", help="species | dranef | detailed"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Analyse besoins / stock."""
    store = _load(data_path)
    report = rapport_besoins_stock(store, _group_by(group_by))
    columns, rows, msg = report
    styles = []
    for r in rows:
        needed, stocked = r[-4], r[-3]
        styles.append({"DEFICIT": "red", "SURPLUS": "green", "EQUILIBRE": None}[classify_balance(needed, stocked)])
    _display_table(report, title="Analyse besoins / stock", styles=styles)


@app.command("export-csv")
def cmd_export_csv(
    group_by: str = typer.Option("species", "--group-by", help="species | dranef | detailed"),
    out: Optional[str] = typer.Option(None, "--out", help="Fichier CSV (défaut: analyse_besoins_stock_{mode}.csv)"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Exporte la table d'analyse en CSV (séparateur « ; »)."""
    store = _load(data_path)
    path = exporter_csv(store, _group_by(group_by), out)
    typer.echo(f">> Export écrit: {path}")


@app.command("apercus")
def cmd_apercus(data_path: Optional[str] = DATA_OPTION):
    """Recommandations du tableau de bord."""
    store = _load(data_path)
    res = resume_tableau_de_bord(store)
    resume = {
        "couverture_globale": round(res["couverture_globale"], 2),
        "deficits": [name for name, _ in res["deficits"]],
        "surplus": [name for name, _ in res["surplus"]],
    }
    for title, body in parse_apercus(gerer_apercus(resume)):
        console.print(Panel(body, title=title or "Aperçu"))


# -----------------------
# lots
# -----------------------

lots_app = typer.Typer(help="Lots de semences")
app.add_typer(lots_app, name="lots")


@lots_app.command("list")
def cmd_lots_list(
    terme: Optional[str] = typer.Option(None, "--terme", help="Recherche texte"),
    statut: Optional[str] = typer.Option(None, "--statut", help="En traitement | En stock | Distribué"),
    categorie: Optional[str] = typer.Option(None, "--categorie", help="Récolte | Achat"),
    debut: Optional[str] = typer.Option(None, "--debut", help="Date de récolte minimale"),
    fin: Optional[str] = typer.Option(None, "--fin", help="Date de récolte maximale"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Liste les lots filtrés."""
    store = _load(data_path)
    lots = rechercher_lots(
        store, terme, parse_date(debut), parse_date(fin),
        _enum_option(LotStatus, statut, "Statut"), _enum_option(LotCategory, categorie, "Catégorie"),
    )
    rows = [
        [lot.id, store.species_name(lot.species_id), lot.quantity_kg, lot.harvest_date or "", lot.category.value,
         store.srs_name(lot.srs_id), store.provider_name(lot.provider_id), lot.status.value]
        for lot in lots
    ]
    _display_table(
        (["ID", "Espèce", "Quantité (kg)", "Récolte", "Catégorie", "SRS", "Prestataire", "Statut"], rows,
         "Aucun lot trouvé."),
        title="Lots", styles=[lot_status_style(lot.status) for lot in lots],
    )


@lots_app.command("add")
def cmd_lots_add(
    espece: str = typer.Option(..., "--espece", help="Identifiant de l'espèce"),
    provenance: str = typer.Option(..., "--provenance", help="Identifiant de la provenance"),
    date_recolte: Optional[str] = typer.Option(None, "--date-recolte", help="Date de récolte"),
    annee: Optional[int] = typer.Option(None, "--annee", help="Année de récolte (si pas de date)"),
    quantite: str = typer.Option("0", "--quantite", help="Quantité (kg)"),
    categorie: str = typer.Option("Récolte", "--categorie", help="Récolte | Achat"),
    srs: str = typer.Option("", "--srs", help="Identifiant de la SRS"),
    prestataire: Optional[str] = typer.Option(None, "--prestataire", help="Identifiant du prestataire"),
    peuplement: str = typer.Option("", "--peuplement", help="Peuplement semencier"),
    statut: str = typer.Option("En traitement", "--statut", help="Statut initial"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Crée un lot (identifiant généré)."""
    path = _require_data(data_path)
    store = _load(path)
    lot = _run(store, path, run_enregistrer_lot, {
        "harvest_year": annee, "harvest_date": date_recolte, "species_id": espece, "provenance_id": provenance,
        "quantity_kg": quantite, "category": categorie, "srs_id": srs, "provider_id": prestataire,
        "seed_stand": peuplement, "status": statut,
    })
    typer.echo(f">> Lot créé: {lot.id}")


@lots_app.command("status")
def cmd_lots_status(
    lot_id: str = typer.Argument(..., help="Identifiant du lot"),
    statut: str = typer.Argument(..., help="En traitement | En stock | Distribué"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Change le statut d'un lot (« Distribué » retire ses articles en stock)."""
    path = _require_data(data_path)
    store = _load(path)
    lot = _run(store, path, run_changer_statut_lot, lot_id, _enum_option(LotStatus, statut, "Statut"))
    typer.echo(f">> Lot {lot.id}: {lot.status.value}")


@lots_app.command("delete")
def cmd_lots_delete(
    lot_id: str = typer.Argument(..., help="Identifiant du lot"),
    yes: bool = typer.Option(False, "--yes", help="Ne pas demander de confirmation"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Supprime un lot et ses articles en stock."""
    path = _require_data(data_path)
    store = _load(path)
    if not yes:
        typer.confirm("Êtes-vous sûr de vouloir supprimer ce lot ?", abort=True)
    res = _run(store, path, run_supprimer_lot, lot_id)
    typer.echo(f">> Lot supprimé: {res['lot']} ({res['articles_retires']} article(s) retiré(s) du stock)")


@lots_app.command("history")
def cmd_lots_history(lot_id: str = typer.Argument(...), data_path: Optional[str] = DATA_OPTION):
    """Historique des contrôles qualité d'un lot."""
    store = _load(data_path)
    _display_table(historique_controles(store, lot_id), title=f"Contrôles qualité - {lot_id}")


# -----------------------
# besoins
# -----------------------

besoins_app = typer.Typer(help="Besoins en semences")
app.add_typer(besoins_app, name="besoins")


@besoins_app.command("list")
def cmd_besoins_list(
    terme: Optional[str] = typer.Option(None, "--terme"),
    debut: Optional[str] = typer.Option(None, "--debut"),
    fin: Optional[str] = typer.Option(None, "--fin"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Liste les besoins filtrés."""
    store = _load(data_path)
    needs = rechercher_besoins(store, terme, parse_date(debut), parse_date(fin))
    rows = [
        [n.id, n.dranef, n.province, store.species_name(n.species_id), n.number_of_plants,
         n.calculated_seed_quantity_kg, n.request_date or "", n.status.value]
        for n in needs
    ]
    _display_table(
        (["ID", "DRANEF", "Province", "Espèce", "Plants", "Semences (kg)", "Demande", "Statut"], rows,
         "Aucun besoin trouvé."),
        title="Besoins", styles=[need_status_style(n.status) for n in needs],
    )


@besoins_app.command("add")
def cmd_besoins_add(
    espece: str = typer.Option(..., "--espece", help="Identifiant ou nom de l'espèce"),
    plants: str = typer.Option(..., "--plants", help="Nombre de plants"),
    dranef: str = typer.Option("", "--dranef"),
    province: str = typer.Option("", "--province"),
    projet: str = typer.Option("", "--projet"),
    perimetre: str = typer.Option("", "--perimetre"),
    date_demande: Optional[str] = typer.Option(None, "--date"),
    statut: Optional[str] = typer.Option(None, "--statut", help="Nouveau | Validé | Traité"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Enregistre un besoin (quantité de semences calculée)."""
    path = _require_data(data_path)
    store = _load(path)
    need = _run(store, path, run_enregistrer_besoin, {
        "species_id": espece, "number_of_plants": plants, "dranef": dranef, "province": province,
        "project": projet, "perimeter_name": perimetre, "request_date": date_demande,
        "status": _enum_option(NeedStatus, statut, "Statut"),
    })
    typer.echo(f">> Besoin créé: {need.id} ({_fmt(need.calculated_seed_quantity_kg)} kg de semences)")


@besoins_app.command("import")
def cmd_besoins_import(
    xlsx: str = typer.Argument(..., help="Classeur XLSX des besoins"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Importe des besoins depuis un XLSX."""
    path = _require_data(data_path)
    store = _load(path)
    res = _run(store, path, run_importer_besoins, xlsx)
    console.print(Panel(
        f"Lignes lues: {res['lignes']}\nBesoins créés: {len(res['crees'])}\nLignes rejetées: {len(res['rejets'])}",
        title="Import des besoins",
    ))
    if res["rejets"]:
        _display_table((["Ligne", "Motif"], [[r["ligne"], r["motif"]] for r in res["rejets"]], None),
                       title="Lignes rejetées")


# -----------------------
# contrôle qualité
# -----------------------

qc_app = typer.Typer(help="Contrôles qualité")
app.add_typer(qc_app, name="qc")


@qc_app.command("add")
def cmd_qc_add(
    lot: str = typer.Option(..., "--lot"),
    resultat: str = typer.Option(..., "--resultat", help="Pass | Fail"),
    type_controle: str = typer.Option("Avant Conditionnement", "--type"),
    date_controle: Optional[str] = typer.Option(None, "--date"),
    germination: float = typer.Option(0.0, "--germination"),
    purete: float = typer.Option(0.0, "--purete"),
    humidite: float = typer.Option(0.0, "--humidite"),
    pmg: float = typer.Option(0.0, "--pmg", help="Poids de 1000 graines (g)"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Enregistre un contrôle qualité (non conforme => lot en traitement)."""
    path = _require_data(data_path)
    store = _load(path)
    qc = _run(store, path, run_enregistrer_controle, {
        "lot_id": lot, "result": _enum_option(CheckResult, resultat, "Résultat"),
        "check_type": _enum_option(CheckType, type_controle, "Type de contrôle"), "check_date": date_controle,
        "germination_rate": germination, "purity": purete, "moisture_content": humidite,
        "thousand_seed_weight": pmg,
    })
    typer.echo(f">> Contrôle créé: {qc.id} ({qc.result.value})")


# -----------------------
# stock / distributions
# -----------------------

stock_app = typer.Typer(help="Inventaire")
app.add_typer(stock_app, name="stock")


@stock_app.command("list")
def cmd_stock_list(
    terme: Optional[str] = typer.Option(None, "--terme"),
    debut: Optional[str] = typer.Option(None, "--debut"),
    fin: Optional[str] = typer.Option(None, "--fin"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Articles en stock."""
    store = _load(data_path)
    rows = [
        [s.id, s.lot_id, store.species_name(s.species_id), s.quantity_kg, s.entry_date or "", store.srs_name(s.srs_id)]
        for s in rechercher_stock(store, terme, parse_date(debut), parse_date(fin))
    ]
    _display_table((["ID", "Lot", "Espèce", "Quantité (kg)", "Entrée", "SRS"], rows, "Stock vide."), title="Inventaire")


dist_app = typer.Typer(help="Distributions")
app.add_typer(dist_app, name="distributions")


@dist_app.command("list")
def cmd_dist_list(
    terme: Optional[str] = typer.Option(None, "--terme"),
    debut: Optional[str] = typer.Option(None, "--debut"),
    fin: Optional[str] = typer.Option(None, "--fin"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Distributions filtrées."""
    store = _load(data_path)
    rows = [
        [d.id, d.stock_item_id, d.quantity_kg, d.destination, d.distribution_date or ""]
        for d in rechercher_distributions(store, terme, parse_date(debut), parse_date(fin))
    ]
    _display_table((["ID", "Article", "Quantité (kg)", "Destination", "Date"], rows, "Aucune distribution."),
                   title="Distributions")


@dist_app.command("add")
def cmd_dist_add(
    article: str = typer.Option(..., "--article", help="Identifiant de l'article en stock"),
    quantite: str = typer.Option(..., "--quantite"),
    destination: str = typer.Option(..., "--destination"),
    date_distribution: Optional[str] = typer.Option(None, "--date"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Enregistre une distribution."""
    path = _require_data(data_path)
    store = _load(path)
    dist = _run(store, path, run_enregistrer_distribution, {
        "stock_item_id": article, "quantity_kg": quantite, "destination": destination,
        "distribution_date": date_distribution,
    })
    typer.echo(f">> Distribution créée: {dist.id}")


@dist_app.command("resume")
def cmd_dist_resume(
    par: str = typer.Option("species", "--par", help="species | destination"),
    terme: Optional[str] = typer.Option(None, "--terme"),
    debut: Optional[str] = typer.Option(None, "--debut"),
    fin: Optional[str] = typer.Option(None, "--fin"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Quantités distribuées par espèce ou par destination (top 7)."""
    if par not in ("species", "destination"):
        _fail(f"Regroupement inconnu: {par} (species, destination)")
    store = _load(data_path)
    _display_table(rapport_distributions(store, par, terme, parse_date(debut), parse_date(fin)),
                   title="Résumé des distributions")


# -----------------------
# provenances / référentiel
# -----------------------

prov_app = typer.Typer(help="Provenances")
app.add_typer(prov_app, name="provenances")


@prov_app.command("list")
def cmd_prov_list(terme: Optional[str] = typer.Option(None, "--terme"), data_path: Optional[str] = DATA_OPTION):
    store = _load(data_path)
    rows = [
        [p.id, p.code, p.name, p.localisation, store.region_name(p.region_id), store.species_name(p.species_id)]
        for p in rechercher_provenances(store, terme)
    ]
    _display_table((["ID", "Code", "Nom", "Localisation", "Région", "Espèce"], rows, "Aucune provenance."),
                   title="Provenances")


@prov_app.command("add")
def cmd_prov_add(
    nom: str = typer.Option(..., "--nom"),
    region: str = typer.Option(..., "--region", help="Identifiant de la région"),
    espece: str = typer.Option(..., "--espece", help="Identifiant de l'espèce"),
    localisation: str = typer.Option("", "--localisation"),
    data_path: Optional[str] = DATA_OPTION,
):
    """Crée une provenance (code calculé)."""
    path = _require_data(data_path)
    store = _load(path)
    prov = _run(store, path, run_enregistrer_provenance, {
        "name": nom, "region_id": region, "species_id": espece, "localisation": localisation,
    })
    typer.echo(f">> Provenance créée: {prov.id} ({prov.code})")


ref_app = typer.Typer(help="Référentiel")
app.add_typer(ref_app, name="referentiel")


@ref_app.command("especes")
def cmd_ref_especes(terme: Optional[str] = typer.Option(None, "--terme"), data_path: Optional[str] = DATA_OPTION):
    store = _load(data_path)
    rows = [
        [s.id, s.scientific_name, s.common_name, s.genus, s.group,
         s.seeding_coefficient_kg_per_1000_plants if s.seeding_coefficient_kg_per_1000_plants is not None else "N/A"]
        for s in rechercher_especes(store, terme)
    ]
    _display_table((["ID", "Nom scientifique", "Nom commun", "Genre", "Groupe", "Coef. (kg/1000 plants)"], rows,
                    "Aucune espèce."), title="Espèces")


@ref_app.command("regions")
def cmd_ref_regions(terme: Optional[str] = typer.Option(None, "--terme"), data_path: Optional[str] = DATA_OPTION):
    store = _load(data_path)
    rows = [[r.id, r.code, r.name] for r in rechercher_regions(store, terme)]
    _display_table((["ID", "Code", "Nom"], rows, "Aucune région."), title="Régions de provenance")


@ref_app.command("srs")
def cmd_ref_srs(terme: Optional[str] = typer.Option(None, "--terme"), data_path: Optional[str] = DATA_OPTION):
    store = _load(data_path)
    rows = [[s.id, s.name, s.dranef, s.province] for s in rechercher_srs(store, terme)]
    _display_table((["ID", "Nom", "DRANEF", "Province"], rows, "Aucune SRS."), title="Stations (SRS)")


@ref_app.command("prestataires")
def cmd_ref_prestataires(terme: Optional[str] = typer.Option(None, "--terme"), data_path: Optional[str] = DATA_OPTION):
    store = _load(data_path)
    rows = [[p.id, p.name, p.address, p.phone] for p in rechercher_prestataires(store, terme)]
    _display_table((["ID", "Nom", "Adresse", "Téléphone"], rows, "Aucun prestataire."), title="Prestataires")


# -----------------------
# suivi
# -----------------------

trt_app = typer.Typer(help="Traitements de semences")
app.add_typer(trt_app, name="traitements")


@trt_app.command("en-cours")
def cmd_trt_en_cours(data_path: Optional[str] = DATA_OPTION):
    """Traitements en cours, par date de fin."""
    store = _load(data_path)
    _display_table(rapport_traitements_en_cours(store), title="Traitements en cours")


prog_app = typer.Typer(help="Programmes d'évaluation")
app.add_typer(prog_app, name="programmes")


@prog_app.command("list")
def cmd_prog_list(terme: Optional[str] = typer.Option(None, "--terme"), data_path: Optional[str] = DATA_OPTION):
    """Programmes d'évaluation (« En Retard » si la date programmée est dépassée)."""
    store = _load(data_path)
    programs = rechercher_programmes(store, terme)
    rows = [
        [p.id, store.species_name(p.species_id), store.srs_name(p.srs_id), p.province,
         p.programmed_date or "", p.real_date or "", program_label(p)]
        for p in programs
    ]
    _display_table(
        (["ID", "Espèce", "SRS", "Province", "Date programmée", "Date réelle", "Statut"], rows, "Aucun programme."),
        title="Programmes d'évaluation",
        styles=[program_status_style(p.status, is_program_late(p)) for p in programs],
    )


def main():
    app()


if __name__ == "__main__":
    main()
