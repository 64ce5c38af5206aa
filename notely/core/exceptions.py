"""
Erreurs métier de Notely.

Les services lèvent ces exceptions, main.py les traduit en réponses HTTP.
Aucune écriture n'est faite avant qu'un contrôle (existence, propriétaire,
état) ne passe.
"""

from typing import Any, Dict, Optional


class NotelyError(Exception):
    """Erreur de base, porte le code HTTP associé"""
    status_code = 500

    def __init__(self, message: str = "Unexpected error", context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}  # loggué, jamais renvoyé au client
        super().__init__(message)


class NotFoundError(NotelyError):
    """L'id ne correspond à aucune ligne (ou à une ligne d'un autre user sur les chemins de lecture)"""
    status_code = 404


class ForbiddenError(NotelyError):
    """La ligne existe mais appartient à un autre utilisateur"""
    status_code = 403

    def __init__(self, message: str = "Access denied", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class InvalidStateError(NotelyError):
    """Transition interdite, ex: restaurer un item qui n'est pas dans la corbeille"""
    status_code = 400


class ConflictError(NotelyError):
    status_code = 409


class ValidationFailedError(NotelyError):
    status_code = 400


class StorageError(NotelyError):
    """Le fournisseur de stockage a échoué"""
    status_code = 502
