"""
Dépendances FastAPI partagées par les routers.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from registry.database import get_db
from registry.errors import AuthError
from registry.models.user import User
from registry.services import auth_service


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """Extrait le jeton de l'en-tête `Authorization: Bearer <jeton>`."""
    if not authorization:
        raise AuthError("Autenticação necessária.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Autenticação necessária.")
    return token.strip()


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    """Résout l'utilisateur connecté ; 401 si le jeton est inconnu ou expiré."""
    user = auth_service.resolve_user(db, token)
    if user is None:
        raise AuthError()
    return user
