"""
Accès HTTP commun aux clients du registre.

Un seul essai par appel, pas de retry : une panne réseau devient StoreError,
une réponse d'erreur est reconstruite à partir de son `code` structuré.
"""

import logging
from typing import Any, Optional

import httpx

from registry.config import settings
from registry.errors import (
    ERRORS_BY_CODE,
    AuthError,
    DuplicateKey,
    InvalidRecord,
    NotFound,
    RegistryError,
    StoreError,
)

logger = logging.getLogger(__name__)

# Repli quand le corps de la réponse ne contient pas de code exploitable
_ERRORS_BY_STATUS = {
    401: AuthError,
    403: AuthError,
    404: NotFound,
    409: DuplicateKey,
}


def create_http_client(base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Client httpx partagé par AuthClient et StudentStoreClient."""
    timeout = httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS, connect=10.0)
    return httpx.AsyncClient(
        base_url=base_url or settings.API_BASE_URL,
        timeout=timeout,
        transport=transport,
    )


def error_from_response(response: httpx.Response) -> RegistryError:
    """Construit l'erreur métier correspondant à une réponse HTTP en échec."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    detail = body.get("detail") if isinstance(body.get("detail"), str) else None
    error_cls = ERRORS_BY_CODE.get(body.get("code"))

    if error_cls is InvalidRecord or (error_cls is None and response.status_code == 422):
        errors = body.get("errors") if isinstance(body.get("errors"), dict) else {}
        return InvalidRecord(errors, detail)
    if error_cls is None:
        error_cls = _ERRORS_BY_STATUS.get(response.status_code, StoreError)
    return error_cls(detail)


async def send(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    token: Optional[str] = None,
    json: Any = None,
) -> httpx.Response:
    """Envoie une requête et lève l'erreur métier correspondante en cas d'échec."""
    headers = {"Authorization": f"Bearer {token}"} if token else None
    try:
        response = await http.request(method, url, json=json, headers=headers)
    except httpx.TimeoutException as e:
        logger.error("Timeout %s %s : %s", method, url, e)
        raise StoreError("Tempo de resposta do servidor esgotado.") from e
    except httpx.RequestError as e:
        logger.error("Erreur réseau %s %s : %s: %s", method, url, type(e).__name__, e)
        raise StoreError() from e

    if response.is_error:
        error = error_from_response(response)
        logger.warning("%s %s → HTTP %d (%s)", method, url, response.status_code, error.code)
        raise error
    return response
