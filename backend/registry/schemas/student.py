"""
Schémas Pydantic pour les élèves.
"""

import uuid
import datetime as dt
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, StrictInt, field_validator


class StudentInput(BaseModel):
    """
    Saisie brute du formulaire (POST/PUT /students).
    Aucune règle ici : les champs sont validés par `services.validator.validate`,
    qui renvoie un message par champ invalide.
    """
    name: str = ""
    matricula: str = ""
    course: str = ""
    age: Optional[Union[StrictInt, str]] = None
    birth_date: str = ""


class StudentRecord(BaseModel):
    """Enregistrement validé, prêt pour la persistance (sans id, propriétaire ni date)."""
    name: str
    matricula: str
    course: str
    age: int
    birth_date: str


class StudentResponse(BaseModel):
    """Schéma de réponse pour un élève (GET /students)."""
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    matricula: str
    course: str
    age: int
    birth_date: str
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("birth_date", mode="before")
    @classmethod
    def iso_date(cls, v):
        if isinstance(v, dt.date):
            return v.isoformat()
        return v

    def to_record(self) -> StudentRecord:
        return StudentRecord(
            name=self.name,
            matricula=self.matricula,
            course=self.course,
            age=self.age,
            birth_date=self.birth_date,
        )
