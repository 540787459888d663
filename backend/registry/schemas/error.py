"""
Schéma des réponses d'erreur de l'API.
"""

from typing import Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Corps renvoyé pour toute RegistryError (voir registry.errors)."""
    detail: str
    code: str
    errors: Optional[Dict[str, str]] = None
