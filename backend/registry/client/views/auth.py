"""
Écran d'entrée : connexion ou création de compte.
"""

import logging

from registry.client.auth_client import AuthClient
from registry.client.navigation import Navigator, Notifier, Route, View
from registry.client.session_gate import SessionGate
from registry.client.views.base import BaseView
from registry.errors import InvalidRecord, RegistryError

logger = logging.getLogger(__name__)


def _error_message(error: RegistryError) -> str:
    # Saisie refusée par l'API : le premier message de champ est plus parlant
    if isinstance(error, InvalidRecord) and error.errors:
        return next(iter(error.errors.values()))
    return error.message


class AuthView(BaseView):
    requires_session = False

    def __init__(self, gate: SessionGate, auth: AuthClient, navigator: Navigator, notifier: Notifier):
        super().__init__(gate, navigator, notifier)
        self.auth = auth
        self.email = ""
        self.password = ""
        self.submitting = False

    @property
    def route(self) -> Route:
        return Route(View.AUTH)

    async def on_authenticated(self) -> None:
        self.navigator.navigate(View.LIST)

    async def sign_in(self) -> bool:
        """Connexion ; la porte de session passe AUTHENTICATED et la vue redirige vers la liste."""
        if self.submitting:
            return False
        self.submitting = True
        try:
            await self.auth.sign_in(self.email, self.password)
        except RegistryError as e:
            logger.info("Connexion refusée (%s).", e.code)
            self.notifier.error(_error_message(e))
            return False
        finally:
            self.submitting = False
        return True

    async def sign_up(self) -> bool:
        """Création de compte puis connexion immédiate."""
        if self.submitting:
            return False
        self.submitting = True
        try:
            await self.auth.sign_up(self.email, self.password)
        except RegistryError as e:
            logger.info("Inscription refusée (%s).", e.code)
            self.notifier.error(_error_message(e))
            return False
        finally:
            self.submitting = False
        self.notifier.success("Conta criada com sucesso!")
        return await self.sign_in()
