"""
Router d'authentification.
POST /api/v1/auth/signup  — création de compte
POST /api/v1/auth/login   — ouverture de session (jeton bearer)
POST /api/v1/auth/logout  — révocation du jeton
GET  /api/v1/auth/me      — utilisateur connecté
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from registry.database import get_db
from registry.dependencies import get_bearer_token, get_current_user
from registry.models.user import User
from registry.schemas.auth import Credentials, SessionResponse, UserResponse
from registry.schemas.error import ErrorResponse
from registry.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Autenticação"])


@router.post("/signup", response_model=UserResponse, status_code=201, summary="Criar uma conta",
             responses={409: {"model": ErrorResponse}})
def sign_up(data: Credentials, db: Session = Depends(get_db)):
    return auth_service.sign_up(db, data.email, data.password)


@router.post("/login", response_model=SessionResponse, summary="Entrar",
             responses={401: {"model": ErrorResponse}})
def login(data: Credentials, db: Session = Depends(get_db)):
    """Vérifie les identifiants et retourne un jeton à envoyer en `Authorization: Bearer`."""
    session = auth_service.sign_in(db, data.email, data.password)
    return SessionResponse(
        access_token=session.token,
        expires_at=session.expires_at,
        user=UserResponse.model_validate(session.user),
    )


@router.post("/logout", status_code=204, summary="Sair")
def logout(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    """Révoque le jeton courant. Idempotent."""
    auth_service.sign_out(db, token)


@router.get("/me", response_model=UserResponse, summary="Usuário conectado",
            responses={401: {"model": ErrorResponse}})
def me(current_user: User = Depends(get_current_user)):
    return current_user
