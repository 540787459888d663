"""
Taxonomie des erreurs métier, partagée entre l'API et le client.

Chaque erreur porte un `code` stable transmis dans le corps des réponses HTTP :
le client reconstruit l'erreur à partir de ce code, jamais à partir du message.
"""

from typing import Dict, Optional


class RegistryError(Exception):
    """Erreur de base. `status_code` est le code HTTP renvoyé par l'API."""

    code = "registry_error"
    status_code = 500
    default_message = "Erro inesperado."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class InvalidRecord(RegistryError):
    """Un ou plusieurs champs invalides. `errors` : champ → premier message."""

    code = "validation_error"
    status_code = 422
    default_message = "Dados inválidos."

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class DuplicateKey(RegistryError):
    code = "duplicate_key"
    status_code = 409
    default_message = "Esta matrícula já está cadastrada"


class NotFound(RegistryError):
    code = "not_found"
    status_code = 404
    default_message = "Aluno não encontrado."


class AuthError(RegistryError):
    code = "auth_error"
    status_code = 401
    default_message = "Sessão inválida ou expirada."


class StoreError(RegistryError):
    code = "store_error"
    status_code = 503
    default_message = "Falha de comunicação com o servidor."


ERRORS_BY_CODE = {
    cls.code: cls for cls in (InvalidRecord, DuplicateKey, NotFound, AuthError, StoreError)
}
