"""
Liste des élèves de l'utilisateur connecté, avec confirmation de suppression.

La liste est chargée une seule fois au montage (session confirmée). Une ligne
n'est retirée de l'état local qu'après confirmation de la suppression par l'API.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from registry.client.navigation import Navigator, Notifier, Route, View
from registry.client.session_gate import SessionGate
from registry.client.store_client import StudentStoreClient
from registry.client.views.base import BaseView
from registry.errors import RegistryError
from registry.schemas.student import StudentResponse

logger = logging.getLogger(__name__)


def count_label(count: int) -> str:
    return f"{count} {'aluno cadastrado' if count == 1 else 'alunos cadastrados'}"


def age_label(age: int) -> str:
    return f"{age} anos"


def format_birth_date(value: str) -> str:
    """ISO → jj/mm/aaaa (format pt-BR). Valeur non ISO renvoyée telle quelle."""
    try:
        return date.fromisoformat(value).strftime("%d/%m/%Y")
    except ValueError:
        return value


class StudentListView(BaseView):
    def __init__(
        self,
        gate: SessionGate,
        store: StudentStoreClient,
        navigator: Navigator,
        notifier: Notifier,
    ):
        super().__init__(gate, navigator, notifier)
        self.store = store
        self.students: List[StudentResponse] = []
        self.loading = True
        self.pending_delete_id: Optional[uuid.UUID] = None
        self.deleting = False
        self._fetched = False

    @property
    def route(self) -> Route:
        return Route(View.LIST)

    @property
    def count_label(self) -> str:
        return count_label(len(self.students))

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.students

    def rows(self) -> List[dict]:
        """Lignes prêtes à afficher dans le tableau."""
        return [
            {
                "id": s.id,
                "name": s.name,
                "matricula": s.matricula,
                "course": s.course,
                "age": age_label(s.age),
                "birth_date": format_birth_date(s.birth_date),
            }
            for s in self.students
        ]

    async def on_authenticated(self) -> None:
        if not self._fetched:
            await self.fetch()

    async def fetch(self) -> None:
        if not self._ensure_session():
            return
        self._fetched = True
        self.loading = True
        try:
            students = await self.store.list()
        except RegistryError as e:
            logger.warning("Chargement de la liste impossible : %s", e.code)
            if self.mounted:
                self.notifier.error(f"Erro ao carregar alunos: {e.message}")
        else:
            if self.mounted:
                self.students = students
        finally:
            self.loading = False

    # --- Navigation ---

    def open_create(self) -> None:
        self.navigator.navigate(View.CREATE_FORM)

    def open_edit(self, student_id: uuid.UUID) -> None:
        self.navigator.navigate(View.EDIT_FORM, student_id)

    # --- Suppression ---

    def request_delete(self, student_id: uuid.UUID) -> None:
        """Ouvre la boîte de confirmation pour cet élève."""
        self.pending_delete_id = student_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        """
        Supprime l'élève sélectionné. En cas d'échec, la liste locale est inchangée
        et une notification d'erreur est émise.
        """
        student_id = self.pending_delete_id
        if student_id is None or self.deleting:
            return False
        if not self._ensure_session():
            self.pending_delete_id = None
            return False

        self.deleting = True
        try:
            await self.store.delete(student_id)
        except RegistryError as e:
            logger.warning("Suppression de %s impossible : %s", student_id, e.code)
            self.notifier.error(f"Erro ao excluir aluno: {e.message}")
            return False
        finally:
            self.deleting = False
            self.pending_delete_id = None

        if self.mounted:
            self.students = [s for s in self.students if s.id != student_id]
        self.notifier.success("Aluno excluído com sucesso!")
        return True

    async def sign_out(self) -> None:
        """Bouton « Sair » : la porte de session redirige vers l'écran d'entrée."""
        await self.gate.sign_out()
