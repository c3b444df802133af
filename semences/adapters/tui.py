# semences/adapters/tui.py
"""
Tableau de bord interactif (Textual).

Menu en arbre à gauche, synthèse du stock à droite; les listes et rapports
s'ouvrent dans des écrans DataTable. L'écran d'analyse besoins / stock
bascule entre les regroupements par espèce, par DRANEF et détaillé, et
exporte le regroupement affiché en CSV.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static, Tree

from semences.adapters.export import exporter_csv
from semences.adapters.insights import gerer_apercus, parse_apercus
from semences.domain.balance import GroupBy, format_coverage
from semences.domain.policies import program_label
from semences.infra.logger import LOG_FILES, LOGS_DIR, get_log_summary, log_system_event
from semences.infra.store import SeedStore, load_store, save_store_json
from semences.usecases.besoins import run_importer_besoins
from semences.usecases.rapports import (
    rapport_besoins_stock,
    rapport_distributions,
    rapport_traitements_en_cours,
    resume_tableau_de_bord,
)

GROUP_BUTTONS = {
    "btn-species": GroupBy.SPECIES,
    "btn-dranef": GroupBy.DRANEF,
    "btn-detailed": GroupBy.DETAILED,
}


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:,.2f}".replace(",", " ")
    return str(value)


class OutputDataTableScreen(Screen):
    """Écran DataTable pour une liste ou un rapport."""
    BINDINGS = [
        ("escape", "app.pop_screen", "Retour"),
        ("q", "app.pop_screen", "Retour"),
    ]

    def __init__(self, title: str, columns: list, rows: list) -> None:
        super().__init__()
        self.title = title
        self.columns = columns
        self.rows = rows

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.title}", classes="output-title")
            dt = DataTable(zebra_stripes=True)
            dt.add_columns(*self.columns)
            for row in self.rows:
                dt.add_row(*[_cell(cell) for cell in row])
            yield dt
        yield Footer()


class OutputScreen(Screen):
    """Écran de texte (synthèse, aperçus, journaux)."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Retour"),
        ("q", "app.pop_screen", "Retour"),
    ]

    def __init__(self, title: str, content: str) -> None:
        super().__init__()
        self.title = title
        self.content = content

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.title}", classes="output-title")
            yield Static(self.content, markup=False)
        yield Footer()


class AnalysisScreen(Screen):
    """Table besoins / stock avec choix du regroupement."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Retour"),
        ("e", "export", "Exporter CSV"),
    ]

    def __init__(self, store: SeedStore, group_by: GroupBy = GroupBy.SPECIES) -> None:
        super().__init__()
        self.store = store
        self.group_by = GroupBy(group_by)

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical():
            yield Static("📊 Analyse besoins / stock", classes="output-title")
            with Horizontal():
                yield Button("Par espèce", id="btn-species", variant="primary")
                yield Button("Par DRANEF", id="btn-dranef")
                yield Button("Détaillée", id="btn-detailed")
                yield Button("💾 Exporter CSV", id="btn-export")
            yield DataTable(zebra_stripes=True, id="analysis-table")
        yield Footer()

    def on_mount(self) -> None:
        self.show_group(self.group_by)

    def table_data(self, group_by: GroupBy):
        columns, rows, _msg = rapport_besoins_stock(self.store, group_by)
        return columns, rows

    def show_group(self, group_by: GroupBy) -> None:
        self.group_by = GroupBy(group_by)
        columns, rows = self.table_data(self.group_by)
        dt = self.query_one("#analysis-table", DataTable)
        dt.clear(columns=True)
        dt.add_columns(*columns)
        for row in rows:
            dt.add_row(*[_cell(c) for c in row])
        for button_id, mode in GROUP_BUTTONS.items():
            self.query_one(f"#{button_id}", Button).variant = "primary" if mode is self.group_by else "default"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id in GROUP_BUTTONS:
            self.show_group(GROUP_BUTTONS[event.button.id])
        elif event.button.id == "btn-export":
            self.action_export()

    def action_export(self) -> None:
        path = exporter_csv(self.store, self.group_by)
        self.notify(f"✅ Export écrit: {path}")


class FileInputForm(ModalScreen):
    """Saisie d'un chemin de fichier."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Annuler"),
    ]

    def __init__(self, operation: str, title: str) -> None:
        super().__init__()
        self.operation = operation
        self.title = title
        self.file_input: Optional[Input] = None

    def compose(self) -> ComposeResult:
        with Container(id="file-input-modal"):
            yield Static(f"📁 {self.title}", classes="modal-title")
            with Vertical():
                yield Label("Classeur Excel (.xlsx):")
                self.file_input = Input(placeholder="besoins.xlsx", id="file-input")
                yield self.file_input
                with Horizontal():
                    yield Button("Exécuter", variant="primary", id="execute-btn")
                    yield Button("Annuler", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "execute-btn":
            file_path = self.file_input.value.strip() if self.file_input else ""
            if not file_path:
                self.notify("❌ Indiquez le fichier!", severity="warning")
                return
            self.dismiss({"file": file_path})
        elif event.button.id == "cancel-btn":
            self.app.pop_screen()


def resume_texte(store: SeedStore) -> str:
    """Synthèse du tableau de bord en texte."""
    res = resume_tableau_de_bord(store)
    lines = [
        f"🌱 Stock total: {res['stock_total_kg']:.2f} kg",
        f"📦 Lots: {res['nombre_lots']}",
        f"🧪 Contrôles non conformes: {res['controles_non_conformes']}",
        f"🌳 Espèces: {res['nombre_especes']}",
        f"📈 Couverture globale: {format_coverage(res['couverture_globale'])} ({res['bande_couverture']})",
    ]
    if res["deficits"]:
        name, qty = res["deficits"][0]
        lines.append(f"⚠️ Plus gros déficit: {name} ({qty:.2f} kg)")
    return "\n".join(lines)


class StatusDisplay(Static):
    """Synthèse du tableau de bord."""

    def __init__(self, store: SeedStore) -> None:
        super().__init__()
        self.store = store
        self.refresh_status()

    def refresh_status(self) -> None:
        self.update(resume_texte(self.store))


class MenuTreeWidget(Tree):
    """Arbre de navigation."""

    def __init__(self) -> None:
        super().__init__("🌲 Semences Forestières - Menu")
        self.setup_menu_tree()

    def setup_menu_tree(self) -> None:
        dash = self.root.add("📊 Tableau de bord", data="dashboard-node")
        dash.add_leaf("📈 Synthèse", data="dashboard")
        dash.add_leaf("💡 Aperçus", data="apercus")
        dash.add_leaf("📊 Analyse besoins / stock", data="analyse")

        data_node = self.root.add("🗃️ Données", data="data-node")
        data_node.add_leaf("📦 Lots", data="ver-lots")
        data_node.add_leaf("📝 Besoins", data="ver-besoins")
        data_node.add_leaf("🏬 Inventaire", data="ver-stock")
        data_node.add_leaf("🚚 Distributions", data="ver-distributions")
        data_node.add_leaf("🧪 Contrôles qualité", data="ver-controles")
        data_node.add_leaf("🌳 Espèces", data="ver-especes")
        data_node.add_leaf("📍 Provenances", data="ver-provenances")
        data_node.add_leaf("🗓️ Programmes d'évaluation", data="ver-programmes")

        reports = self.root.add("📑 Rapports", data="reports-node")
        reports.add_leaf("🌳 Distributions par espèce", data="rel-dist-especes")
        reports.add_leaf("📍 Distributions par destination", data="rel-dist-destinations")
        reports.add_leaf("⏳ Traitements en cours", data="rel-traitements")

        imports = self.root.add("📥 Import", data="import-node")
        imports.add_leaf("📥 Importer des besoins (XLSX)", data="import-besoins")

        logs = self.root.add("📋 Journaux", data="logs-node")
        logs.add_leaf("📋 Transactions", data="view-logs")
        logs.add_leaf("📊 Résumé des journaux", data="log-summary")


CATEGORY_NODES = {"dashboard-node", "data-node", "reports-node", "import-node", "logs-node"}


class SemencesDashboardApp(App):
    """Application TUI de gestion des semences."""

    CSS = """
    Screen {
        background: #0b1f14;
    }

    .modal-title, .output-title {
        background: #1f5135;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    Container#file-input-modal {
        background: #12301f;
        border: solid #4caf50;
        width: 60;
        height: 15;
        margin: 2;
    }

    Tree {
        background: #0f2a1b;
        color: #d8f0dd;
    }

    StatusDisplay {
        background: #1f5135;
        color: #ffffff;
        padding: 1;
    }

    Button {
        margin: 1;
    }
    """

    TITLE = "🌲 Semences Forestières - Tableau de bord"
    BINDINGS = [
        ("q", "quit", "Quitter"),
        ("r", "refresh", "Actualiser"),
        ("a", "analyse", "Analyse"),
    ]

    def __init__(self, data_path: Optional[str] = None, store: Optional[SeedStore] = None) -> None:
        super().__init__()
        self.data_path = data_path
        self.store = store if store is not None else load_store(data_path)
        self.menu_tree: Optional[MenuTreeWidget] = None
        self.status_display: Optional[StatusDisplay] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Container(classes="left-panel"):
                self.menu_tree = MenuTreeWidget()
                yield self.menu_tree
            with Vertical(classes="right-panel"):
                self.status_display = StatusDisplay(self.store)
                yield self.status_display
                yield Static(
                    "Flèches ↑↓ pour naviguer, ENTRÉE pour ouvrir, 'a' pour l'analyse, 'q' pour quitter.",
                    classes="info-panel",
                )
        yield Footer()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        if not event.node.data or event.node.data in CATEGORY_NODES:
            return
        self.execute_action(event.node.data)

    def table_for(self, action: str):
        """``(titre, colonnes, lignes)`` des écrans de liste."""
        s = self.store
        if action == "ver-lots":
            return "Lots", ["ID", "Espèce", "Quantité (kg)", "Récolte", "SRS", "Statut"], [
                [lot.id, s.species_name(lot.species_id), lot.quantity_kg, lot.harvest_date, s.srs_name(lot.srs_id), lot.status.value]
                for lot in s.lots
            ]
        if action == "ver-besoins":
            return "Besoins", ["ID", "DRANEF", "Province", "Espèce", "Plants", "Semences (kg)", "Statut"], [
                [n.id, n.dranef, n.province, s.species_name(n.species_id), n.number_of_plants,
                 n.calculated_seed_quantity_kg, n.status.value]
                for n in s.seed_needs
            ]
        if action == "ver-stock":
            return "Inventaire", ["ID", "Lot", "Espèce", "Quantité (kg)", "Entrée", "SRS"], [
                [i.id, i.lot_id, s.species_name(i.species_id), i.quantity_kg, i.entry_date, s.srs_name(i.srs_id)]
                for i in s.stock_items
            ]
        if action == "ver-distributions":
            return "Distributions", ["ID", "Article", "Quantité (kg)", "Destination", "Date"], [
                [d.id, d.stock_item_id, d.quantity_kg, d.destination, d.distribution_date] for d in s.distributions
            ]
        if action == "ver-controles":
            return "Contrôles qualité", ["ID", "Lot", "Type", "Date", "Germination (%)", "Résultat"], [
                [q.id, q.lot_id, q.check_type.value, q.check_date, q.germination_rate, q.result.value]
                for q in s.quality_checks
            ]
        if action == "ver-especes":
            return "Espèces", ["ID", "Nom scientifique", "Nom commun", "Genre", "Groupe"], [
                [e.id, e.scientific_name, e.common_name, e.genus, e.group] for e in s.species
            ]
        if action == "ver-provenances":
            return "Provenances", ["ID", "Code", "Nom", "Région", "Espèce"], [
                [p.id, p.code, p.name, s.region_name(p.region_id), s.species_name(p.species_id)]
                for p in s.provenances
            ]
        if action == "ver-programmes":
            return "Programmes d'évaluation", ["ID", "Espèce", "SRS", "Date programmée", "Statut"], [
                [p.id, s.species_name(p.species_id), s.srs_name(p.srs_id), p.programmed_date, program_label(p)]
                for p in s.evaluation_programs
            ]
        raise KeyError(action)

    def execute_action(self, action: str) -> None:
        log_system_event("tui_action_start", {"action": action})
        try:
            if action == "dashboard":
                self.push_screen(OutputScreen("Synthèse", resume_texte(self.store)))
            elif action == "apercus":
                self.show_apercus()
            elif action == "analyse":
                self.action_analyse()
            elif action.startswith("ver-"):
                title, columns, rows = self.table_for(action)
                self.push_screen(OutputDataTableScreen(title, columns, rows))
            elif action in ("rel-dist-especes", "rel-dist-destinations", "rel-traitements"):
                self.run_report(action)
            elif action == "import-besoins":
                self.push_screen(FileInputForm(action, "Importer des besoins (XLSX)"), self.on_file_input_result)
            elif action == "view-logs":
                self.show_log_content("transactions")
            elif action == "log-summary":
                self.show_log_summary()
            else:
                self.notify(f"Action inconnue: {action}", severity="warning")
        except Exception as e:
            log_system_event("tui_action_error", {"action": action, "error": str(e)}, level="error")
            self.notify(f"❌ Erreur: {e}", severity="error")

    def run_report(self, report_type: str) -> None:
        if report_type == "rel-dist-especes":
            titre, resultat = "Distributions par espèce", rapport_distributions(self.store, "species")
        elif report_type == "rel-dist-destinations":
            titre, resultat = "Distributions par destination", rapport_distributions(self.store, "destination")
        else:
            titre, resultat = "Traitements en cours", rapport_traitements_en_cours(self.store)
        colonnes, rows, msg = resultat
        if rows:
            self.push_screen(OutputDataTableScreen(titre, colonnes, rows))
        else:
            self.push_screen(OutputScreen(titre, msg or "Aucune donnée trouvée."))

    def show_apercus(self) -> None:
        res = resume_tableau_de_bord(self.store)
        texte = gerer_apercus({"couverture_globale": res["couverture_globale"]})
        blocs: List[str] = []
        for titre, corps in parse_apercus(texte):
            blocs.append(f"{titre}\n{corps}" if titre else corps)
        self.push_screen(OutputScreen("Aperçus", "\n\n".join(blocs)))

    def on_file_input_result(self, result: Optional[Dict[str, str]]) -> None:
        if not result:
            return
        try:
            res = run_importer_besoins(self.store, result["file"])
            if self.data_path:
                save_store_json(self.store, self.data_path)
            self.action_refresh()
            self.push_screen(OutputScreen(
                "Import des besoins",
                f"Lignes lues: {res['lignes']}\nBesoins créés: {len(res['crees'])}\n"
                f"Lignes rejetées: {len(res['rejets'])}",
            ))
        except Exception as e:
            self.notify(f"❌ Erreur d'import: {e}", severity="error")

    def show_log_content(self, log_type: str) -> None:
        content = get_log_summary(log_type, lines=500)
        self.push_screen(OutputScreen(f"📋 Journal - {log_type}", content or "Journalisation désactivée."))

    def show_log_summary(self) -> None:
        lines = []
        for name, path in LOG_FILES.items():
            if Path(path).exists():
                lines.append(f"✅ {name}: {Path(path).stat().st_size / 1024:.1f} KB")
            else:
                lines.append(f"❌ {name}: fichier absent")
        lines.append(f"\n📁 Répertoire des journaux: {LOGS_DIR}")
        self.push_screen(OutputScreen("Résumé des journaux", "\n".join(lines)))

    def action_analyse(self) -> None:
        self.push_screen(AnalysisScreen(self.store))

    def action_refresh(self) -> None:
        if self.status_display:
            self.status_display.refresh_status()
        self.notify("🔄 Synthèse actualisée", timeout=2)


def main_tui(data_path: Optional[str] = None) -> None:
    """Lance l'application TUI."""
    SemencesDashboardApp(data_path).run()
