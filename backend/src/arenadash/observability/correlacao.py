# backend/src/arenadash/observability/correlacao.py
"""Correlation-id por requisição, propagado até cada linha de log.

- O middleware lê (ou gera) ``X-Correlation-Id`` e o devolve na resposta.
- O valor fica num ``ContextVar`` durante a requisição.
- A LogRecordFactory e o filtro garantem ``%(correlation_id)s`` em todo registro.
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Correlation-Id"
_SEM_ID = "-"

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default=_SEM_ID)


def get_correlation_id() -> str:
    """Correlation-id da requisição atual ('-' fora de requisições)."""
    return correlation_id_var.get()


class CorrelationIdLogFilter(logging.Filter):
    """Garante o atributo ``correlation_id`` para o formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = correlation_id_var.get()
        return True


def install_logrecord_factory() -> None:
    """Instala uma LogRecordFactory que injeta o correlation-id do contexto.

    Um valor passado via ``extra=`` é preservado; só preenche quando falta ou
    quando é '-'.
    """
    previous = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = previous(*args, **kwargs)
        current = record.__dict__.get("correlation_id")
        if not current or current == _SEM_ID:
            record.__dict__["correlation_id"] = correlation_id_var.get() or _SEM_ID
        return record

    logging.setLogRecordFactory(record_factory)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Propaga ``X-Correlation-Id`` e o expõe em ``request.state.correlation_id``."""

    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get(HEADER) or str(uuid.uuid4())
        request.state.correlation_id = cid

        token = correlation_id_var.set(cid)
        try:
            response: Response = await call_next(request)
        finally:
            correlation_id_var.reset(token)

        response.headers[HEADER] = cid
        return response
