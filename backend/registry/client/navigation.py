"""
Navigation côté client et notifications affichées à l'utilisateur.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class View(str, Enum):
    LANDING = "landing"
    AUTH = "auth"
    LIST = "list"
    CREATE_FORM = "create_form"
    EDIT_FORM = "edit_form"


@dataclass(frozen=True)
class Route:
    view: View
    record_id: Optional[uuid.UUID] = None

    @property
    def path(self) -> str:
        if self.view is View.LANDING:
            return "/"
        if self.view is View.AUTH:
            return "/auth"
        if self.view is View.LIST:
            return "/students"
        if self.view is View.CREATE_FORM:
            return "/students/new"
        return f"/students/edit/{self.record_id}"


RouteListener = Callable[[Route], None]


class Navigator:
    """Route courante et historique ; prévient les vues abonnées à chaque changement."""

    def __init__(self, start: Route = Route(View.LANDING)):
        self.current = start
        self.history: List[Route] = [start]
        self._listeners: List[RouteListener] = []

    def subscribe(self, listener: RouteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def navigate(self, view: View, record_id: Optional[uuid.UUID] = None) -> Route:
        if view is View.EDIT_FORM and record_id is None:
            raise ValueError("EDIT_FORM exige un identifiant d'élève.")
        route = Route(view, record_id if view is View.EDIT_FORM else None)
        if route == self.current:
            return route
        logger.debug("Navigation : %s → %s", self.current.path, route.path)
        self.current = route
        self.history.append(route)
        for listener in list(self._listeners):
            listener(route)
        return route


@dataclass(frozen=True)
class Notification:
    level: str  # success, error, info
    message: str


@dataclass
class Notifier:
    """Collecte les notifications transitoires (équivalent des toasts)."""

    items: List[Notification] = field(default_factory=list)

    def _push(self, level: str, message: str) -> None:
        self.items.append(Notification(level, message))
        log = logger.warning if level == "error" else logger.info
        log("Notification (%s) : %s", level, message)

    def success(self, message: str) -> None:
        self._push("success", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    def info(self, message: str) -> None:
        self._push("info", message)

    @property
    def last(self) -> Optional[Notification]:
        return self.items[-1] if self.items else None

    def clear(self) -> None:
        self.items.clear()
