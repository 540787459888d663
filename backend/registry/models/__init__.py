# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# users doit être chargé avant auth_sessions et students (FK → users.id).

from registry.models.user import User  # noqa: F401
from registry.models.auth_session import AuthSession  # noqa: F401
from registry.models.student import Student  # noqa: F401
