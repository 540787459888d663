"""
Porte de session : résout puis suit l'identité de l'utilisateur connecté.

États : RESOLVING → AUTHENTICATED | ANONYMOUS, AUTHENTICATED → ANONYMOUS à la
déconnexion, ANONYMOUS → AUTHENTICATED à la connexion depuis l'écran d'entrée.
Tant que l'état est RESOLVING, les vues affichent un chargement et n'appellent
pas le registre.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from registry.client.auth_client import SIGNED_IN, SIGNED_OUT, AuthClient
from registry.errors import RegistryError
from registry.schemas.auth import UserResponse

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


_TRANSITIONS = {
    GateState.RESOLVING: {GateState.AUTHENTICATED, GateState.ANONYMOUS},
    GateState.AUTHENTICATED: {GateState.ANONYMOUS},
    GateState.ANONYMOUS: {GateState.AUTHENTICATED},
}

GateListener = Callable[[GateState], Awaitable[None]]


class SessionGate:
    def __init__(self, auth: AuthClient):
        self._auth = auth
        self.state = GateState.RESOLVING
        self.user: Optional[UserResponse] = None
        self._listeners: List[GateListener] = []
        auth.on_auth_state_change(self._on_auth_change)

    @property
    def loading(self) -> bool:
        return self.state is GateState.RESOLVING

    @property
    def is_authenticated(self) -> bool:
        return self.state is GateState.AUTHENTICATED

    def subscribe(self, listener: GateListener) -> Callable[[], None]:
        """Abonne `listener(state)` aux changements d'état ; retourne le désabonnement."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _transition(self, state: GateState, user: Optional[UserResponse]) -> None:
        if state not in _TRANSITIONS[self.state]:
            logger.debug("Transition ignorée : %s → %s", self.state.value, state.value)
            return
        self.state = state
        self.user = user
        logger.info("Session : %s", state.value)
        for listener in list(self._listeners):
            await listener(state)

    async def resolve(self) -> GateState:
        """Résolution initiale de l'identité. Une erreur réseau laisse l'utilisateur anonyme."""
        if self.state is not GateState.RESOLVING:
            return self.state
        try:
            user = await self._auth.get_current_user()
        except RegistryError as e:
            logger.warning("Résolution de la session impossible : %s", e)
            user = None
        await self._transition(GateState.AUTHENTICATED if user else GateState.ANONYMOUS, user)
        return self.state

    async def sign_out(self) -> None:
        await self._auth.sign_out()
        # Au cas où la notification du client d'auth n'aurait pas été reçue
        await self._transition(GateState.ANONYMOUS, None)

    async def _on_auth_change(self, event: str, user: Optional[UserResponse]) -> None:
        if event == SIGNED_IN and user is not None:
            await self._transition(GateState.AUTHENTICATED, user)
        elif event == SIGNED_OUT:
            await self._transition(GateState.ANONYMOUS, None)
