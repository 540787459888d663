"""
Socle commun des vues : montage, démontage et redirection sans session.
"""

import logging
from typing import Callable, List

from registry.client.navigation import Navigator, Notifier, Route, View
from registry.client.session_gate import GateState, SessionGate

logger = logging.getLogger(__name__)


class BaseView:
    """
    Une vue est montée tant que la route courante est la sienne.
    Après démontage, les réponses réseau encore en vol sont ignorées.
    """

    requires_session = True

    def __init__(self, gate: SessionGate, navigator: Navigator, notifier: Notifier):
        self.gate = gate
        self.navigator = navigator
        self.notifier = notifier
        self.mounted = False
        self._unsubscribers: List[Callable[[], None]] = []

    @property
    def route(self) -> Route:
        raise NotImplementedError

    async def mount(self) -> None:
        self.mounted = True
        self._unsubscribers = [
            self.gate.subscribe(self._on_gate_change),
            self.navigator.subscribe(self._on_route_change),
        ]
        await self._on_gate_change(self.gate.state)

    def unmount(self) -> None:
        self.mounted = False
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_route_change(self, route: Route) -> None:
        if route != self.route:
            self.unmount()

    async def _on_gate_change(self, state: GateState) -> None:
        if not self.mounted:
            return
        if state is GateState.ANONYMOUS and self.requires_session:
            self.navigator.navigate(View.AUTH)
        elif state is GateState.AUTHENTICATED:
            await self.on_authenticated()

    async def on_authenticated(self) -> None:
        """Appelé une fois la session confirmée (au montage ou après résolution)."""

    def _ensure_session(self) -> bool:
        """False (et redirection) si aucune session : l'appel réseau ne doit pas partir."""
        if self.gate.is_authenticated:
            return True
        if self.gate.state is GateState.ANONYMOUS:
            self.navigator.navigate(View.AUTH)
        return False
