import json
from pathlib import Path

import pandas as pd
import pytest
from rich.console import Console
from typer.testing import CliRunner

from semences.adapters import cli
from semences.adapters.cli import app
from semences.infra.store import clear_cache

runner = CliRunner()


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture(autouse=True)
def _wide_console(monkeypatch):
    # tables Rich sans retour à la ligne
    monkeypatch.setattr(cli, "console", Console(width=200))


@pytest.fixture
def data_file(tmp_path: Path) -> str:
    path = tmp_path / "semences.json"
    result = runner.invoke(app, ["init-data", str(path)])
    assert result.exit_code == 0, result.output
    assert ">> Données de démonstration écrites dans:" in result.stdout
    return str(path)


def _saved(path: str) -> dict:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def test_cli_init_data_writes_every_collection(data_file):
    data = _saved(data_file)
    assert len(data["lots"]) == 5
    assert len(data["species"]) == 159
    assert data["seed_needs"][2]["calculated_seed_quantity_kg"] == 1125.0


def test_cli_dashboard_and_analysis_on_demo_data():
    result = runner.invoke(app, ["dashboard"])
    assert result.exit_code == 0, result.output
    assert "Tableau de bord" in result.stdout
    assert "CRITIQUE" in result.stdout

    result = runner.invoke(app, ["analyse", "--group-by", "species"])
    assert result.exit_code == 0, result.output
    assert "Arganier" in result.stdout


def test_cli_dashboard_json_output():
    result = runner.invoke(app, ["dashboard", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["stock_total_kg"] == 470.0
    assert data["bande_couverture"] == "CRITIQUE"
    assert data["deficits"][0] == ["Arganier", 1125.0]
    assert data["graphique"][0][0] == "Arganier"


def test_cli_unknown_grouping_fails():
    result = runner.invoke(app, ["analyse", "--group-by", "province"])
    assert result.exit_code == 1
    assert "Regroupement inconnu" in result.stdout


def test_cli_export_csv(tmp_path: Path):
    out = tmp_path / "export.csv"
    result = runner.invoke(app, ["export-csv", "--group-by", "detailed", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == f">> Export écrit: {out}"
    assert out.read_text(encoding="utf-8").startswith("Province (DRANEF);Espèce;")


def test_cli_apercus():
    result = runner.invoke(app, ["apercus"])
    assert result.exit_code == 0, result.output
    assert "Alerte stock bas" in result.stdout


def test_cli_lots_add_generates_id(data_file):
    result = runner.invoke(app, [
        "lots", "add", "--espece", "esp-034", "--provenance", "prov-03", "--date-recolte", "2024-05-10",
        "--quantite", "12,5", "--srs", "srs-01", "--data", data_file,
    ])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == ">> Lot créé: 24-PH-I3-001"

    lot = _saved(data_file)["lots"][0]
    assert lot["id"] == "24-PH-I3-001"
    assert lot["quantity_kg"] == 12.5
    assert lot["status"] == "En traitement"


def test_cli_lots_add_validation_message(data_file):
    result = runner.invoke(app, [
        "lots", "add", "--espece", "esp-999", "--provenance", "prov-03", "--annee", "2024", "--data", data_file,
    ])
    assert result.exit_code == 1
    assert "Espèce non trouvée." in result.stdout
    assert len(_saved(data_file)["lots"]) == 5


def test_cli_mutation_requires_data_file():
    result = runner.invoke(app, ["lots", "status", "23-PH-I3-001", "Distribué", "--data", ""])
    assert result.exit_code == 1
    assert "--data" in result.stdout


def test_cli_lots_status_distributed_removes_stock(data_file):
    result = runner.invoke(app, ["lots", "status", "23-PH-I3-001", "Distribué", "--data", data_file])
    assert result.exit_code == 0, result.output
    assert ">> Lot 23-PH-I3-001: Distribué" in result.stdout
    assert [s["id"] for s in _saved(data_file)["stock_items"]] == ["STK-002", "STK-003"]


def test_cli_lots_status_unknown(data_file):
    result = runner.invoke(app, ["lots", "status", "23-PH-I3-001", "Perdu", "--data", data_file])
    assert result.exit_code == 1
    assert "Statut inconnu" in result.stdout


def test_cli_lots_delete_asks_confirmation(data_file):
    result = runner.invoke(app, ["lots", "delete", "24-PC-IV1-001", "--data", data_file], input="n\n")
    assert result.exit_code == 1
    assert any(lot["id"] == "24-PC-IV1-001" for lot in _saved(data_file)["lots"])

    result = runner.invoke(app, ["lots", "delete", "24-PC-IV1-001", "--data", data_file], input="y\n")
    assert result.exit_code == 0, result.output
    assert "1 article(s) retiré(s) du stock" in result.stdout
    data = _saved(data_file)
    assert all(lot["id"] != "24-PC-IV1-001" for lot in data["lots"])
    assert all(s["lot_id"] != "24-PC-IV1-001" for s in data["stock_items"])


def test_cli_lots_delete_unknown(data_file):
    result = runner.invoke(app, ["lots", "delete", "nope", "--yes", "--data", data_file])
    assert result.exit_code == 1
    assert "nope" in result.stdout


def test_cli_lots_list_and_history():
    result = runner.invoke(app, ["lots", "list", "--statut", "Distribué"])
    assert result.exit_code == 0, result.output
    assert "22-TA-IV2-001" in result.stdout

    result = runner.invoke(app, ["lots", "history", "24-AS-IV1-001"])
    assert result.exit_code == 0, result.output
    assert "Fail" in result.stdout


def test_cli_besoins_add_and_import(data_file, tmp_path: Path):
    result = runner.invoke(app, ["besoins", "add", "--espece", "esp-034", "--plants", "10 000", "--dranef", "ORIENTAL",
                                 "--province", "Nador", "--data", data_file])
    assert result.exit_code == 0, result.output
    assert "5.00 kg de semences" in result.stdout

    xlsx = tmp_path / "besoins.xlsx"
    pd.DataFrame({
        "Espèce": ["Arganier", "Espèce inconnue"],
        "Nombre de plants": ["2000", "1000"],
        "Province": ["Essaouira", "Tata"],
    }).to_excel(xlsx, index=False)
    result = runner.invoke(app, ["besoins", "import", str(xlsx), "--data", data_file])
    assert result.exit_code == 0, result.output
    assert "Besoins créés: 1" in result.stdout
    assert "Lignes rejetées: 1" in result.stdout
    assert len(_saved(data_file)["seed_needs"]) == 6


def test_cli_qc_fail_puts_lot_back_in_processing(data_file):
    result = runner.invoke(app, ["qc", "add", "--lot", "23-FA-IV2-001", "--resultat", "Fail", "--data", data_file])
    assert result.exit_code == 0, result.output
    lot = next(lot for lot in _saved(data_file)["lots"] if lot["id"] == "23-FA-IV2-001")
    assert lot["status"] == "En traitement"


def test_cli_distributions(data_file):
    result = runner.invoke(app, ["distributions", "add", "--article", "STK-003", "--quantite", "5",
                                 "--destination", "Pépinière Azrou", "--date", "2024-06-01", "--data", data_file])
    assert result.exit_code == 0, result.output
    assert result.stdout.startswith(">> Distribution créée: DIST-")

    result = runner.invoke(app, ["distributions", "resume", "--par", "province"])
    assert result.exit_code == 1


def test_cli_provenance_code_is_derived(data_file):
    result = runner.invoke(app, ["provenances", "add", "--nom", "Jbel Lakraa", "--region", "reg-I3",
                                 "--espece", "esp-034", "--data", data_file])
    assert result.exit_code == 0, result.output
    assert "(I3-PH-JbelLakraa)" in result.stdout


@pytest.mark.parametrize("args", [
    ["referentiel", "especes", "--terme", "cedrus"],
    ["referentiel", "regions"],
    ["referentiel", "srs"],
    ["referentiel", "prestataires"],
    ["stock", "list"],
    ["besoins", "list"],
    ["distributions", "list"],
    ["provenances", "list"],
    ["traitements", "en-cours"],
    ["programmes", "list"],
])
def test_cli_read_only_listings(args):
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output


def test_cli_missing_data_file(tmp_path: Path):
    result = runner.invoke(app, ["dashboard", "--data", str(tmp_path / "absent.json")])
    assert result.exit_code == 1
    assert "Impossible de charger les données" in result.stdout
