"""
Tests for the logging helpers (gated by ENABLE_LOGGING / ENABLE_OUTPUT).
"""

from unittest.mock import Mock

import pytest

from semences.infra import logger as logger_mod
from semences.infra.store import new_store
from semences.usecases.lots import run_changer_statut_lot


@pytest.fixture
def loggers(monkeypatch):
    mocks = {name: Mock() for name in ("transaction_logger", "lot_logger", "stock_logger", "system_logger")}
    for name, mock in mocks.items():
        monkeypatch.setattr(logger_mod, name, mock)
    monkeypatch.setattr(logger_mod, "ENABLE_LOGGING", True)
    return mocks


def test_helpers_are_silent_when_disabled(monkeypatch):
    monkeypatch.setattr(logger_mod, "ENABLE_LOGGING", False)
    monkeypatch.setattr(logger_mod, "ENABLE_OUTPUT", False)
    mock = Mock()
    monkeypatch.setattr(logger_mod, "transaction_logger", mock)
    logger_mod.log_transaction("op", {})
    mock.info.assert_not_called()
    assert logger_mod.get_log_summary("transactions") is None


def test_log_transaction_success_and_failure(loggers):
    logger_mod.log_transaction("enregistrer_lot", {"id": None}, result="24-PH-I3-001")
    logger_mod.log_transaction("enregistrer_lot", {"id": None}, error="Espèce non trouvée.")
    assert "TRANSACTION_SUCCESS: enregistrer_lot" in loggers["transaction_logger"].info.call_args[0][0]
    assert "TRANSACTION_FAILED" in loggers["transaction_logger"].error.call_args[0][0]


def test_log_system_event_level(loggers):
    logger_mod.log_system_event("load_store_error", {"path": "x"}, level="error")
    loggers["system_logger"].error.assert_called_once()


def test_status_change_logs_cascade(loggers):
    store = new_store()
    run_changer_statut_lot(store, "23-PH-I3-001", "Distribué")
    lot_msg = loggers["lot_logger"].info.call_args[0][0]
    stock_msg = loggers["stock_logger"].info.call_args[0][0]
    assert lot_msg.startswith("LOT_UPDATE")
    assert stock_msg.startswith("STOCK_CASCADE")
    assert "STK-001" in stock_msg


def test_get_log_summary_tail(loggers, monkeypatch, tmp_path):
    log_file = tmp_path / "transactions.log"
    log_file.write_text("".join(f"ligne {i}\n" for i in range(10)), encoding="utf-8")
    monkeypatch.setitem(logger_mod.LOG_FILES, "transactions", log_file)
    assert logger_mod.get_log_summary("transactions", lines=2) == "ligne 8\nligne 9\n"
    assert logger_mod.get_log_summary("inconnu") == "Journal inconnu introuvable."


def test_setup_logger_writes_file(tmp_path):
    path = tmp_path / "logs" / "essai.log"
    log = logger_mod.setup_logger("semences.essai", str(path))
    log.info("bonjour")
    for handler in log.handlers:
        handler.flush()
    assert "bonjour" in path.read_text(encoding="utf-8")
