"""
Client du registre d'élèves : list, get_by_id, insert, update, delete.

Chaque appel est une seule requête authentifiée par le jeton de l'AuthClient.
Sans session, aucune requête n'est émise (AuthError immédiate).
"""

import uuid
from typing import List

import httpx

from registry.client.auth_client import AuthClient
from registry.client.transport import send
from registry.errors import AuthError
from registry.schemas.student import StudentRecord, StudentResponse

BASE_PATH = "/api/v1/students"


class StudentStoreClient:
    def __init__(self, http: httpx.AsyncClient, auth: AuthClient):
        self._http = http
        self._auth = auth

    def _token(self) -> str:
        token = self._auth.access_token
        if not token:
            raise AuthError("Autenticação necessária.")
        return token

    async def list(self) -> List[StudentResponse]:
        """Élèves de l'utilisateur, plus récents d'abord. Liste vide possible."""
        response = await send(self._http, "GET", BASE_PATH, token=self._token())
        return [StudentResponse.model_validate(item) for item in response.json()]

    async def get_by_id(self, student_id: uuid.UUID) -> StudentResponse:
        response = await send(self._http, "GET", f"{BASE_PATH}/{student_id}", token=self._token())
        return StudentResponse.model_validate(response.json())

    async def insert(self, record: StudentRecord) -> StudentResponse:
        """Crée l'élève ; l'API attribue id, propriétaire et date. DuplicateKey si matrícula prise."""
        response = await send(self._http, "POST", BASE_PATH, token=self._token(),
                              json=record.model_dump())
        return StudentResponse.model_validate(response.json())

    async def update(self, student_id: uuid.UUID, record: StudentRecord) -> None:
        await send(self._http, "PUT", f"{BASE_PATH}/{student_id}", token=self._token(),
                   json=record.model_dump())

    async def delete(self, student_id: uuid.UUID) -> None:
        await send(self._http, "DELETE", f"{BASE_PATH}/{student_id}", token=self._token())
