"""
Assemblage du client : un seul contexte injecté dans chaque vue.

    ctx = build_context()
    await ctx.gate.resolve()
    view = await ctx.open(ctx.navigator.current)
"""

from dataclasses import dataclass, field
from typing import Optional

import httpx

from registry.client.auth_client import AuthClient
from registry.client.navigation import Navigator, Notifier, Route, View
from registry.client.session_gate import SessionGate
from registry.client.store_client import StudentStoreClient
from registry.client.transport import create_http_client
from registry.client.views.auth import AuthView
from registry.client.views.base import BaseView
from registry.client.views.landing import LandingView
from registry.client.views.student_form import StudentFormView
from registry.client.views.student_list import StudentListView


@dataclass
class ClientContext:
    http: httpx.AsyncClient
    auth: AuthClient
    gate: SessionGate
    store: StudentStoreClient
    navigator: Navigator = field(default_factory=Navigator)
    notifier: Notifier = field(default_factory=Notifier)

    def view_for(self, route: Route) -> BaseView:
        if route.view is View.LANDING:
            return LandingView(self.gate, self.navigator, self.notifier)
        if route.view is View.AUTH:
            return AuthView(self.gate, self.auth, self.navigator, self.notifier)
        if route.view is View.LIST:
            return StudentListView(self.gate, self.store, self.navigator, self.notifier)
        if route.view is View.CREATE_FORM:
            return StudentFormView(self.gate, self.store, self.navigator, self.notifier)
        return StudentFormView(self.gate, self.store, self.navigator, self.notifier, route.record_id)

    async def open(self, route: Route) -> BaseView:
        """Construit et monte la vue de `route`."""
        view = self.view_for(route)
        await view.mount()
        return view

    async def aclose(self) -> None:
        await self.http.aclose()


def build_context(
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    access_token: Optional[str] = None,
) -> ClientContext:
    http = create_http_client(base_url, transport)
    auth = AuthClient(http, access_token)
    return ClientContext(
        http=http,
        auth=auth,
        gate=SessionGate(auth),
        store=StudentStoreClient(http, auth),
    )
