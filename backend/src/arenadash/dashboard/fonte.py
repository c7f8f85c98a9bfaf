"""arenadash.dashboard.fonte

Leitura da tabela de presenças (fonte externa, lida por inteiro).

A tabela tem uma linha por aluno por aula. O Dashboard trabalha com nomes de
coluna canônicos (em português, como na planilha original); nomes
alternativos conhecidos são convertidos aqui para que o resto do pipeline não
duplique heurísticas.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

PRESENCA_COLUMNS: Tuple[str, ...] = (
    "id",
    "data_aula",
    "horario",
    "arena",
    "tipo_aula",
    "professores",
    "aluno",
    "coordenador",
)

_COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("recordId", "record_id"),
    "data_aula": ("sessionDate", "session_date", "data"),
    "horario": ("timeLabel", "time_label", "hora"),
    "arena": ("location", "local"),
    "tipo_aula": ("classType", "class_type", "tipo"),
    "professores": ("instructorList", "instructor_list", "professor"),
    "aluno": ("studentName", "student_name", "nome_aluno"),
    "coordenador": ("coordinatorName", "coordinator_name"),
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Retorna uma cópia com as colunas canônicas de presença como texto.

    - Cria a coluna canônica a partir de um alias quando ela não existe.
    - Colunas ausentes viram texto vazio.
    - Valores nulos viram ``""`` (o pipeline trata vazio como "sem valor").
    """
    out = df.copy()
    for canonical, aliases in _COLUMN_ALIASES.items():
        if canonical in out.columns:
            continue
        for alias in aliases:
            if alias in out.columns:
                out[canonical] = out[alias]
                break

    for col in PRESENCA_COLUMNS:
        if col not in out.columns:
            out[col] = ""
        else:
            out[col] = out[col].astype(object).where(out[col].notna(), "").astype(str)
    return out


def presencas_from_records(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """Monta o DataFrame de presenças a partir de linhas já em memória."""
    rows = [dict(r) for r in records]
    df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=list(PRESENCA_COLUMNS))
    return normalize_columns(df)


def load_presencas(path: Optional[Path] = None) -> pd.DataFrame:
    """Carrega a tabela completa de presenças.

    Parameters
    ----------
    path:
        Parquet ou CSV. Se None, usa ``AnaliseConfig.from_env().presencas_path``.

    Raises
    ------
    FileNotFoundError
        Se o arquivo não existe.
    """
    if path is None:
        from arenadash.dashboard.config import AnaliseConfig

        path = AnaliseConfig.from_env().presencas_path
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Não existe {path.as_posix()} (exporte a tabela de presenças)")

    if path.suffix == ".parquet":
        df = pd.read_parquet(path)
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    logger.info("Presenças carregadas de %s: %d linhas", path.name, len(df))
    return normalize_columns(df)
