"""
Client du fournisseur d'authentification.

Conserve le jeton de la session courante et notifie les abonnés à chaque
connexion ou déconnexion (`on_auth_state_change`).
"""

import logging
from typing import Awaitable, Callable, List, Optional

import httpx

from registry.client.transport import send
from registry.errors import AuthError, StoreError
from registry.schemas.auth import SessionResponse, UserResponse

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[UserResponse]], Awaitable[None]]


class AuthClient:
    def __init__(self, http: httpx.AsyncClient, access_token: Optional[str] = None):
        self._http = http
        self._token = access_token
        self._listeners: List[AuthListener] = []

    @property
    def access_token(self) -> Optional[str]:
        return self._token

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Abonne `listener(event, user)` ; retourne la fonction de désabonnement."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self, event: str, user: Optional[UserResponse]) -> None:
        for listener in list(self._listeners):
            await listener(event, user)

    async def sign_up(self, email: str, password: str) -> UserResponse:
        response = await send(self._http, "POST", "/api/v1/auth/signup",
                              json={"email": email, "password": password})
        return UserResponse.model_validate(response.json())

    async def sign_in(self, email: str, password: str) -> UserResponse:
        response = await send(self._http, "POST", "/api/v1/auth/login",
                              json={"email": email, "password": password})
        session = SessionResponse.model_validate(response.json())
        self._token = session.access_token
        logger.info("Connecté : %s", session.user.email)
        await self._notify(SIGNED_IN, session.user)
        return session.user

    async def get_current_user(self) -> Optional[UserResponse]:
        """Retourne l'utilisateur du jeton courant, ou None sans session valide."""
        if not self._token:
            return None
        try:
            response = await send(self._http, "GET", "/api/v1/auth/me", token=self._token)
        except AuthError:
            self._token = None
            return None
        return UserResponse.model_validate(response.json())

    async def sign_out(self) -> None:
        """
        Révoque le jeton côté serveur puis oublie la session locale.
        La session locale est effacée même si la révocation échoue.
        """
        token, self._token = self._token, None
        if token:
            try:
                await send(self._http, "POST", "/api/v1/auth/logout", token=token)
            except (AuthError, StoreError) as e:
                logger.warning("Révocation du jeton impossible : %s", e)
        await self._notify(SIGNED_OUT, None)
