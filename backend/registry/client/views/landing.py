"""
Page d'accueil : redirige vers la liste dès qu'une session existe.
"""

from registry.client.navigation import Route, View
from registry.client.views.base import BaseView


class LandingView(BaseView):
    requires_session = False

    @property
    def route(self) -> Route:
        return Route(View.LANDING)

    @property
    def loading(self) -> bool:
        return self.gate.loading

    async def on_authenticated(self) -> None:
        self.navigator.navigate(View.LIST)

    def start(self) -> None:
        """Bouton « Começar Agora » / « Entrar »."""
        self.navigator.navigate(View.AUTH)
