"""
Règles de classification et utilitaires de statut.

Ce module regroupe les règles métier de classement (bilan d'une espèce,
niveau de couverture, statut d'un lot après contrôle, retard d'un
programme d'évaluation) ainsi que les correspondances statut -> style
utilisées par la CLI et la TUI. Chaque correspondance couvre tous les
membres de son énumération.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from semences.config import DEFAULTS
from semences.domain.models import (
    CheckResult,
    EvaluationProgram,
    LotStatus,
    NeedStatus,
    ProgramStatus,
    TreatmentStatus,
)


def classify_balance(needed: Optional[float], stocked: Optional[float]) -> str:
    """Classe le bilan d'une espèce.

    Règles:
        - ``stocked - needed < 0`` → ``'DEFICIT'``
        - ``stocked - needed > 0`` et ``needed > 0`` → ``'SURPLUS'``
        - sinon → ``'EQUILIBRE'`` (y compris du stock sans besoin exprimé)

    Args:
        needed: Besoin total (kg).
        stocked: Stock total (kg).

    Returns:
        ``'DEFICIT'``, ``'SURPLUS'`` ou ``'EQUILIBRE'``.
    """
    n = float(needed or 0.0)
    s = float(stocked or 0.0)
    if s - n < 0:
        return "DEFICIT"
    if s - n > 0 and n > 0:
        return "SURPLUS"
    return "EQUILIBRE"


def coverage_band(coverage: float) -> str:
    """``'CRITIQUE'`` sous le seuil critique, ``'ALERTE'`` sous le seuil d'alerte, sinon ``'OK'``."""
    if coverage < DEFAULTS.seuil_couverture_critique:
        return "CRITIQUE"
    if coverage < DEFAULTS.seuil_couverture_alerte:
        return "ALERTE"
    return "OK"


def status_after_check(current: LotStatus, result: CheckResult) -> LotStatus:
    """Un contrôle non conforme renvoie le lot en traitement."""
    if result is CheckResult.FAIL:
        return LotStatus.PROCESSING
    return current


def is_program_late(program: EvaluationProgram, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return (
        program.real_date is None
        and program.programmed_date is not None
        and program.programmed_date < today
        and program.status is not ProgramStatus.DONE
    )


def program_label(program: EvaluationProgram, today: Optional[date] = None) -> str:
    """Libellé affiché: ``'En Retard'`` pour un programme en retard, sinon le statut."""
    if is_program_late(program, today):
        return "En Retard"
    return program.status.value


# -------------------------
# Styles (rich)
# -------------------------

def lot_status_style(status: LotStatus) -> str:
    return {
        LotStatus.PROCESSING: "yellow",
        LotStatus.IN_STOCK: "green",
        LotStatus.DISTRIBUTED: "blue",
    }[status]


def treatment_status_style(status: TreatmentStatus) -> str:
    return {
        TreatmentStatus.PLANNED: "blue",
        TreatmentStatus.IN_PROGRESS: "yellow",
        TreatmentStatus.DONE: "green",
    }[status]


def need_status_style(status: NeedStatus) -> str:
    return {
        NeedStatus.NEW: "blue",
        NeedStatus.VALIDATED: "yellow",
        NeedStatus.PROCESSED: "green",
    }[status]


def program_status_style(status: ProgramStatus, late: bool = False) -> str:
    if late:
        return "bold red"
    return {
        ProgramStatus.PLANNED: "blue",
        ProgramStatus.IN_PROGRESS: "yellow",
        ProgramStatus.DONE: "green",
    }[status]


def check_result_style(result: CheckResult) -> str:
    return {
        CheckResult.PASS: "green",
        CheckResult.FAIL: "bold red",
    }[result]


def coverage_style(coverage: float) -> str:
    return {
        "CRITIQUE": "bold red",
        "ALERTE": "bold yellow",
        "OK": "bold green",
    }[coverage_band(coverage)]
