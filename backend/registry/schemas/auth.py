"""
Schémas Pydantic pour l'authentification.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator


class Credentials(BaseModel):
    """Corps de requête pour l'inscription et la connexion."""
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("A senha deve ter no mínimo 6 caracteres.")
        return v


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Réponse de POST /auth/login."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse
