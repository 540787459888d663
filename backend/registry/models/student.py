"""
Modèle SQLAlchemy pour la table students.
La matrícula est unique sur toute la table, pas seulement par propriétaire.
"""

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Uuid

from registry.database import Base
from registry.models.user import _utcnow


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    matricula = Column(String(50), unique=True, nullable=False)
    course = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    birth_date = Column(Date, nullable=False)
    # Horodatage côté Python : précision à la microseconde pour le tri par défaut
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
