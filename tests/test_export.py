import pandas as pd
import pytest

from semences.adapters.export import dataframe_analyse, exporter_csv, nom_fichier_csv
from semences.domain.balance import GroupBy
from semences.infra.store import new_store


@pytest.fixture
def store():
    return new_store()


def test_default_file_names():
    assert nom_fichier_csv(GroupBy.SPECIES) == "analyse_besoins_stock_species.csv"
    assert nom_fichier_csv("detailed") == "analyse_besoins_stock_detailed.csv"


def test_dataframe_values_are_formatted(store):
    df = dataframe_analyse(store, GroupBy.SPECIES)
    row = df[df["Espèce"] == "Pin d'Alep"].iloc[0]
    assert row["Besoins (kg)"] == "60.00"
    assert row["Stock (kg)"] == "150.00"
    assert row["Bilan (kg)"] == "90.00"
    assert row["Taux de Couverture (%)"] == "250%"


def test_export_species_csv(store, tmp_path):
    out = tmp_path / "analyse.csv"
    path = exporter_csv(store, GroupBy.SPECIES, str(out))
    assert path == str(out)

    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Espèce;Besoins (kg);Stock (kg);Bilan (kg);Taux de Couverture (%)"
    assert lines[1] == "Arganier;1125.00;0.00;-1125.00;0%"
    assert "Frêne à feuilles étroites;0.00;200.00;200.00;N/A" in lines


def test_export_detailed_header(store, tmp_path):
    out = tmp_path / "detail.csv"
    exporter_csv(store, GroupBy.DETAILED, str(out))
    header = out.read_text(encoding="utf-8").splitlines()[0]
    assert header == "Province (DRANEF);Espèce;Besoins (kg);Stock (kg);Bilan (kg);Taux de Couverture (%)"

    df = pd.read_csv(out, sep=";", dtype=str)
    assert list(df.columns)[:2] == ["Province (DRANEF)", "Espèce"]
    assert len(df) == 7


def test_export_default_path(store, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = exporter_csv(store, GroupBy.DRANEF)
    assert path == "analyse_besoins_stock_dranef.csv"
    assert (tmp_path / path).read_text(encoding="utf-8").startswith("DRANEF;")
