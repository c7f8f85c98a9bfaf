"""arenadash.dashboard.config

Configuração do pipeline via variáveis de ambiente.

Variáveis
---------
- ``ARENA_PRESENCAS_PATH``: parquet/CSV com as presenças
  (padrão ``<repo>/dados/presencas.parquet``).
- ``ARENA_TIPOS_EXCLUIDOS``: tipos de aula fora dos indicadores, separados por
  vírgula (padrão ``Aulão``).
- ``ARENA_JANELA_RECENTE``: dias recentes usados na tendência (padrão 3).
- ``ARENA_TOLERANCIA_ESTAVEL``: faixa +/- considerada estável (padrão 0.5).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

logger = logging.getLogger(__name__)

DEFAULT_TIPOS_EXCLUIDOS: FrozenSet[str] = frozenset({"Aulão"})
DEFAULT_JANELA_RECENTE = 3
DEFAULT_TOLERANCIA_ESTAVEL = 0.5


def _repo_root() -> Path:
    """Raiz do repo (backend/src/arenadash/dashboard/config.py -> 4 níveis)."""
    return Path(__file__).resolve().parents[4]


def default_presencas_path() -> Path:
    return _repo_root() / "dados" / "presencas.parquet"


def parse_tipos(raw: Optional[str]) -> FrozenSet[str]:
    """Converte ``"Aulão, Evento"`` em ``{"Aulão", "Evento"}``."""
    if raw is None:
        return DEFAULT_TIPOS_EXCLUIDOS
    return frozenset(t.strip() for t in raw.split(",") if t.strip())


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s inválido (%r); usando %s", name, raw, default)
        return default
    if value < 1:
        logger.warning("%s deve ser >= 1 (%r); usando %s", name, raw, default)
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("%s inválido (%r); usando %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("%s deve ser >= 0 (%r); usando %s", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class AnaliseConfig:
    """Parâmetros do pipeline que não dependem da tela (filtros ficam fora)."""

    presencas_path: Path = field(default_factory=default_presencas_path)
    tipos_excluidos: FrozenSet[str] = DEFAULT_TIPOS_EXCLUIDOS
    janela_recente: int = DEFAULT_JANELA_RECENTE
    tolerancia_estavel: float = DEFAULT_TOLERANCIA_ESTAVEL

    @classmethod
    def from_env(cls) -> "AnaliseConfig":
        raw_path = os.getenv("ARENA_PRESENCAS_PATH")
        return cls(
            presencas_path=Path(raw_path) if raw_path else default_presencas_path(),
            tipos_excluidos=parse_tipos(os.getenv("ARENA_TIPOS_EXCLUIDOS")),
            janela_recente=_env_int("ARENA_JANELA_RECENTE", DEFAULT_JANELA_RECENTE),
            tolerancia_estavel=_env_float("ARENA_TOLERANCIA_ESTAVEL", DEFAULT_TOLERANCIA_ESTAVEL),
        )
