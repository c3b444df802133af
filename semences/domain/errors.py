# semences/domain/errors.py
"""
Exceptions métier.

Les messages sont destinés à l'utilisateur final (en français) et sont
affichés tels quels par la CLI et la TUI.
"""


class ValidationError(ValueError):
    """Champs requis manquants ou référence introuvable: l'opération est annulée."""


class NotFoundError(KeyError):
    """Aucun enregistrement ne correspond à l'identifiant demandé."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(record_id)
        self.collection = collection
        self.record_id = record_id

    def __str__(self) -> str:
        return f"{self.collection}: identifiant introuvable '{self.record_id}'"
