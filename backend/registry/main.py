"""
Point d'entrée principal de l'API du registre d'élèves.
Démarrage : uvicorn registry.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from registry.config import settings
from registry.database import init_db
from registry.errors import InvalidRecord, RegistryError
from registry.routers import auth, students

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : crée les tables manquantes au démarrage."""
    init_db()
    logger.info("API démarrée (env=%s).", settings.ENV)
    yield


app = FastAPI(
    title="Student Registry API",
    description="API de cadastro de alunos : autenticação e CRUD por usuário",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(students.router)


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """Convertit une erreur métier en réponse JSON avec un `code` stable."""
    if exc.status_code >= 500:
        logger.error("%s %s → %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps ou paramètre mal formé : même format que les erreurs du validateur (un message par champ)."""
    errors = {}
    for err in exc.errors():
        # loc = ("body" | "path" | "query", champ, [membre d'union ...])
        loc = err.get("loc") or ("body",)
        field = str(loc[1]) if len(loc) > 1 else str(loc[0])
        errors.setdefault(field, err["msg"].removeprefix("Value error, "))
    return JSONResponse(status_code=422, content=InvalidRecord(errors).to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Ocorreu um erro interno.", "code": "internal_error"},
    )


@app.get("/api/health", tags=["Saúde"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Student Registry API", "version": "0.1.0"}
