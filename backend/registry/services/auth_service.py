"""
Service d'authentification : inscription, connexion, résolution du jeton, déconnexion.

Les mots de passe sont hachés en PBKDF2-SHA256 avec un sel aléatoire.
Les jetons de session sont opaques (secrets.token_urlsafe) et stockés en BDD
avec une date d'expiration ; la déconnexion supprime la ligne.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registry.config import settings
from registry.errors import AuthError, DuplicateKey
from registry.models.auth_session import AuthSession
from registry.models.user import User

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """Retourne `pbkdf2_sha256$<iterations>$<sel>$<hash hex>`."""
    iterations = iterations or settings.PASSWORD_HASH_ITERATIONS
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algorithm, iterations, salt, expected = stored.split("$", 3)
        iterations = int(iterations)
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return hmac.compare_digest(digest.hex(), expected)


def _as_utc(value: datetime) -> datetime:
    # SQLite renvoie des datetimes naïfs
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sign_up(db: Session, email: str, password: str) -> User:
    """
    Crée un compte.
    Lève DuplicateKey si l'email est déjà utilisé.
    """
    email = email.lower()
    existing = db.execute(select(User.id).where(User.email == email)).scalar_one_or_none()
    if existing is not None:
        raise DuplicateKey("Este e-mail já está cadastrado")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey("Este e-mail já está cadastrado")
    db.refresh(user)
    logger.info("Compte créé : %s (%s)", user.email, user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> AuthSession:
    """Vérifie les identifiants et ouvre une session. Lève AuthError sinon."""
    user = db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Échec de connexion pour %s", email)
        raise AuthError("E-mail ou senha incorretos.")

    now = datetime.now(timezone.utc)
    session = AuthSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Connexion : %s", user.email)
    return session


def resolve_user(db: Session, token: str) -> Optional[User]:
    """Retourne l'utilisateur associé au jeton, ou None si inconnu ou expiré."""
    session = db.get(AuthSession, token)
    if session is None:
        return None
    if _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        db.delete(session)
        db.commit()
        return None
    return db.get(User, session.user_id)


def sign_out(db: Session, token: str) -> None:
    """Révoque le jeton. Sans effet si le jeton est déjà inconnu."""
    result = db.execute(delete(AuthSession).where(AuthSession.token == token))
    db.commit()
    if result.rowcount:
        logger.info("Déconnexion : session révoquée.")
