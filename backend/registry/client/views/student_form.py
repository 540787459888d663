"""
Formulaire de création ou d'édition d'un élève.

Mode édition si un identifiant est fourni : l'élève est préchargé et la
matrícula n'est plus modifiable. Le validateur est toujours exécuté avant
tout appel au registre.
"""

import logging
import uuid
from typing import Dict, Optional

from registry.client.navigation import Navigator, Notifier, Route, View
from registry.client.session_gate import SessionGate
from registry.client.store_client import StudentStoreClient
from registry.client.views.base import BaseView
from registry.errors import DuplicateKey, InvalidRecord, NotFound, RegistryError
from registry.services.validator import FIELDS, validate

logger = logging.getLogger(__name__)


class StudentFormView(BaseView):
    def __init__(
        self,
        gate: SessionGate,
        store: StudentStoreClient,
        navigator: Navigator,
        notifier: Notifier,
        record_id: Optional[uuid.UUID] = None,
    ):
        super().__init__(gate, navigator, notifier)
        self.store = store
        self.record_id = record_id
        self.fields: Dict[str, str] = {name: "" for name in FIELDS}
        self.errors: Dict[str, str] = {}
        self.form_error: Optional[str] = None
        self._fetching = False
        self.submitting = False
        self._loaded = False

    @property
    def loading(self) -> bool:
        """Session en cours de résolution ou élève en cours de préchargement."""
        return self.gate.loading or self._fetching

    @property
    def is_edit(self) -> bool:
        return self.record_id is not None

    @property
    def route(self) -> Route:
        if self.is_edit:
            return Route(View.EDIT_FORM, self.record_id)
        return Route(View.CREATE_FORM)

    @property
    def title(self) -> str:
        return "Editar Aluno" if self.is_edit else "Novo Aluno"

    @property
    def submit_label(self) -> str:
        if self.submitting:
            return "Salvando..."
        return "Atualizar" if self.is_edit else "Cadastrar"

    def is_editable(self, name: str) -> bool:
        return not (self.is_edit and name == "matricula")

    def set_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(name)
        if not self.is_editable(name):
            return
        self.fields[name] = value

    async def on_authenticated(self) -> None:
        if self.is_edit and not self._loaded:
            await self.load()

    async def load(self) -> None:
        """Précharge l'élève en mode édition ; en cas d'échec, retour à la liste."""
        if not self._ensure_session():
            return
        self._loaded = True
        self._fetching = True
        try:
            student = await self.store.get_by_id(self.record_id)
        except RegistryError as e:
            if self.mounted:
                self.notifier.error(f"Erro ao carregar dados do aluno: {e.message}")
                self.navigator.navigate(View.LIST)
            return
        finally:
            self._fetching = False

        if not self.mounted:
            return
        self.fields = {
            "name": student.name,
            "matricula": student.matricula,
            "course": student.course,
            "age": str(student.age),
            "birth_date": student.birth_date,
        }

    async def submit(self) -> bool:
        """
        Valide puis enregistre. Retourne True si l'élève a été enregistré.

        DuplicateKey : message global, on reste sur le formulaire.
        NotFound : l'élève a disparu, retour à la liste.
        Autres erreurs : notification, formulaire inchangé pour réessayer.
        """
        if self.submitting or self.loading:
            return False

        self.errors = {}
        self.form_error = None
        result = validate(self.fields)
        if not result.ok:
            self.errors = result.errors
            return False

        if not self._ensure_session():
            return False

        self.submitting = True
        try:
            if self.is_edit:
                await self.store.update(self.record_id, result.record)
            else:
                await self.store.insert(result.record)
        except DuplicateKey as e:
            if self.mounted:
                self.form_error = e.message
            return False
        except InvalidRecord as e:
            if self.mounted:
                self.errors = e.errors
                if not e.errors:
                    self.form_error = e.message
            return False
        except NotFound as e:
            if self.mounted:
                self.notifier.error(e.message)
                self.navigator.navigate(View.LIST)
            return False
        except RegistryError as e:
            if self.mounted:
                self.notifier.error(e.message)
            return False
        finally:
            self.submitting = False

        if not self.mounted:
            logger.debug("Réponse reçue après navigation, ignorée.")
            return True

        if self.is_edit:
            self.notifier.success("Aluno atualizado com sucesso!")
        else:
            self.notifier.success("Aluno cadastrado com sucesso!")
        self.navigator.navigate(View.LIST)
        return True

    def cancel(self) -> None:
        self.navigator.navigate(View.LIST)
