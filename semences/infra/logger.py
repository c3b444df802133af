# semences/infra/logger.py
"""
Système de journalisation des opérations sur les semences.

Ce module configure et fournit des loggers pour enregistrer les opérations
critiques du système: création/modification des lots, mouvements de stock,
transactions des use cases et événements système (rapports, chargements).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from semences.config import LOGS_DIR


# Flag global pour activer/désactiver la journalisation
ENABLE_LOGGING = False
# Flag global pour activer/désactiver les sorties console
ENABLE_OUTPUT = False


def print_system(*args, **kwargs):
    """Print contrôlé par ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)


# Configuration de base des loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configure un logger dédié avec fichier de sortie.

    Args:
        name: Nom du logger
        log_file: Chemin du fichier de journal
        level: Niveau de journalisation (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configuré
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Retire les handlers existants (réimport du module)
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    # Le fichier n'est ouvert qu'à la première écriture
    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "lots": LOGS_DIR / "lots.log",
    "stock": LOGS_DIR / "stock.log",
    "system": LOGS_DIR / "system.log",
}

# Loggers spécifiques à chaque domaine
transaction_logger = setup_logger('semences.transactions', str(LOG_FILES["transactions"]))
lot_logger = setup_logger('semences.lots', str(LOG_FILES["lots"]))
stock_logger = setup_logger('semences.stock', str(LOG_FILES["stock"]))
system_logger = setup_logger('semences.system', str(LOG_FILES["system"]))


def _enabled() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Enregistre une transaction complète (use case) dans le journal.

    Args:
        operation: Type d'opération (enregistrer_lot, supprimer_besoin, ...)
        data: Données de la transaction
        result: Résultat de l'opération (optionnel)
        error: Message d'erreur (optionnel)
    """
    if not _enabled():
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_lot(action: str, lot_id: str, **kwargs) -> None:
    """
    Journal spécifique au cycle de vie des lots.

    Args:
        action: Action réalisée (create, update, status, delete)
        lot_id: Identifiant du lot
        **kwargs: Données additionnelles
    """
    if not _enabled():
        return
    log_data = {"action": action, "lot_id": lot_id, **kwargs}
    lot_logger.info(f"LOT_{action.upper()}: {log_data}")


def log_stock(action: str, stock_item_id: Optional[str], quantity_kg: Optional[float] = None, **kwargs) -> None:
    """
    Journal spécifique aux mouvements de stock (entrées, retraits, distributions).

    Args:
        action: Action réalisée (insert, update, delete, cascade, distribution)
        stock_item_id: Article concerné (None pour un retrait en cascade)
        quantity_kg: Quantité mouvementée
        **kwargs: Données additionnelles
    """
    if not _enabled():
        return
    log_data = {"action": action, "stock_item_id": stock_item_id, "quantity_kg": quantity_kg, **kwargs}
    stock_logger.info(f"STOCK_{action.upper()}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Journal des événements système.

    Args:
        event: Description de l'événement
        details: Détails additionnels (optionnel)
        level: Niveau (info, warning, error)
    """
    if not _enabled():
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """
    Journal des opérations sur fichiers (import, export).

    Args:
        operation: Type d'opération (import, export, load, save)
        file_path: Chemin du fichier
        rows_processed: Nombre de lignes traitées
        **kwargs: Données additionnelles
    """
    if not _enabled():
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Renvoie les dernières lignes d'un journal.

    Args:
        log_type: Type de journal (transactions, lots, stock, system)
        lines: Nombre de lignes à renvoyer

    Returns:
        Contenu du journal, ou None si la journalisation est désactivée
    """
    if not _enabled():
        return None

    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Journal {log_type} introuvable."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
    except OSError as e:
        return f"Erreur de lecture du journal {log_type}: {e}"
    return ''.join(all_lines[-lines:])
