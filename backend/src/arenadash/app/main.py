"""
Módulo principal da API do Dashboard da arena.

Responsabilidades:
- Instanciação do FastAPI
- Registro do router ``/dashboard``
- Endpoint global mínimo (/health)
- CORS para o frontend (Vite, porta 5173)
- Middleware de Correlation-Id (X-Correlation-Id) para rastreabilidade
- Limite de tamanho do corpo (413) segundo ARENA_MAX_BODY_MB
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from arenadash import __version__
from arenadash.app.logging_config import setup_logging
from arenadash.observability.correlacao import CorrelationIdMiddleware, install_logrecord_factory

from .routers import dashboard

log = logging.getLogger("arenadash")

app = FastAPI(title="Arena Dashboard API", version=os.getenv("API_VERSION", __version__))

# ---------------------------------------------------------------------------
# CORS
#   - ARENA_ALLOWED_ORIGINS (separadas por vírgula) tem prioridade
#   - Sem a variável, usa os defaults locais do Vite
# ---------------------------------------------------------------------------
_default_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
_raw_origins = os.getenv("ARENA_ALLOWED_ORIGINS")
ALLOWED_ORIGINS = (
    [o.strip() for o in _raw_origins.split(",") if o.strip()]
    if _raw_origins
    else _default_origins
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=600,
)

# ---------------------------------------------------------------------------
# Limite por Content-Length -> 413 Payload Too Large
#   POST /dashboard/analise recebe a tabela de presenças no corpo.
# ---------------------------------------------------------------------------
MAX_MB = int(os.getenv("ARENA_MAX_BODY_MB", "10"))
MAX_BYTES = MAX_MB * 1024 * 1024


class MaxSizeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        content_len = request.headers.get("content-length")
        try:
            if content_len is not None and int(content_len) > MAX_BYTES:
                return JSONResponse(
                    {"detail": f"Corpo da requisição grande demais (> {MAX_MB}MB)"},
                    status_code=413,
                )
        except ValueError:
            # Header inválido: segue o fluxo normal.
            pass
        return await call_next(request)


app.add_middleware(MaxSizeMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.on_event("startup")
def _startup_logging() -> None:
    """dictConfig com filtro cid + LogRecordFactory que injeta o correlation_id."""
    setup_logging()
    install_logrecord_factory()
    log.info("Arena Dashboard API %s pronta (origins=%s)", app.version, ALLOWED_ORIGINS)


@app.get("/health")
def health() -> dict:
    """Endpoint de saúde: indica se a API está no ar."""
    return {"status": "ok"}


app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
