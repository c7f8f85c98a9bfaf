"""
Pacote de observabilidade: correlation-id em logs e respostas HTTP.
"""

from .correlacao import (
    HEADER,
    CorrelationIdLogFilter,
    CorrelationIdMiddleware,
    get_correlation_id,
    install_logrecord_factory,
)

__all__ = [
    "HEADER",
    "CorrelationIdLogFilter",
    "CorrelationIdMiddleware",
    "get_correlation_id",
    "install_logrecord_factory",
]
