"""
Unit tests para a propagação do correlation-id nos logs.
"""

import logging

from arenadash.observability.correlacao import (
    CorrelationIdLogFilter,
    correlation_id_var,
    get_correlation_id,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("arenadash", logging.INFO, __file__, 1, "msg", None, None)


def test_fora_de_requisicao():
    assert get_correlation_id() == "-"


def test_filtro_injeta_id_do_contexto():
    token = correlation_id_var.set("abc")
    try:
        rec = _record()
        assert CorrelationIdLogFilter().filter(rec) is True
        assert rec.correlation_id == "abc"
    finally:
        correlation_id_var.reset(token)


def test_filtro_preserva_id_explicito():
    rec = _record()
    rec.correlation_id = "xyz"
    CorrelationIdLogFilter().filter(rec)
    assert rec.correlation_id == "xyz"


def test_middleware_gera_id_quando_ausente(client):
    r = client.get("/health")
    assert r.headers.get("X-Correlation-Id")


def test_logging_config_valido():
    import logging.config

    from arenadash.app.logging_config import build_logging_config

    cfg = build_logging_config("DEBUG")
    assert cfg["handlers"]["console"]["filters"] == ["cid"]
    logging.config.dictConfig(cfg)
    assert logging.getLogger().level == logging.DEBUG
