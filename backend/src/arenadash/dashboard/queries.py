"""arenadash.dashboard.queries

Filtros e agrupamento de presenças em aulas.

Este módulo concentra:

- o filtro de janela de datas (dia inteiro, limites inclusivos);
- os filtros de tipo de aula e de horário escolhidos na tela;
- a exclusão de tipos de aula configurados (p.ex. "Aulão");
- o agrupamento das presenças em :class:`Aula`.

Regras de negócio
-----------------
1) Linhas com ``data_aula`` inválida são descartadas em silêncio (problema de
   qualidade de dados, não erro do sistema).
2) A chave da aula é ``(data_aula, horario normalizado, arena, tipo_aula,
   professores)`` usando o texto **bruto** de professores: "Ana, Bruno" e
   "Ana e Bruno" geram aulas distintas.
3) Cada linha que sobrevive aos filtros conta em exatamente uma aula.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, FrozenSet, List, Optional, Tuple

import pandas as pd

from arenadash.dashboard.classificacao import classify_ratio, is_alert, is_vip
from arenadash.dashboard.config import DEFAULT_TIPOS_EXCLUIDOS
from arenadash.dashboard.fonte import normalize_columns
from arenadash.dashboard.normalizacao import (
    instructor_count,
    normalize_instructors,
    normalize_time,
)

logger = logging.getLogger(__name__)

DATA_FORMAT = "%d/%m/%Y"

SESSION_KEY: Tuple[str, ...] = (
    "data_aula",
    "horario_norm",
    "arena",
    "tipo_aula",
    "professores",
)

# Valor usado pelos seletores da tela para "sem filtro".
_TODOS = "all"


# ---------------------------------------------------------------------------
# Datas
# ---------------------------------------------------------------------------

def parse_data_aula(value: Any) -> Optional[date]:
    """Parseia ``dd/mm/aaaa``; retorna None se não for uma data válida."""
    if value is None:
        return None
    try:
        return datetime.strptime(str(value).strip(), DATA_FORMAT).date()
    except ValueError:
        return None


def _parse_data_series(series: pd.Series) -> pd.Series:
    return pd.to_datetime(series.astype(str).str.strip(), format=DATA_FORMAT, errors="coerce")


# ---------------------------------------------------------------------------
# Filtros do Dashboard
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DashboardFilters:
    """Filtros escolhidos na tela, passados explicitamente ao pipeline.

    ``data_inicio``/``data_fim`` formam uma janela inclusiva por dia (qualquer
    lado pode faltar). ``tipo_aula`` e ``horario`` aceitam None ou ``"all"``
    para não filtrar.
    """

    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    tipo_aula: Optional[str] = None
    horario: Optional[str] = None
    tipos_excluidos: FrozenSet[str] = DEFAULT_TIPOS_EXCLUIDOS


def _selected(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    if not s or s.lower() == _TODOS:
        return None
    return s


def apply_filters(df: pd.DataFrame, f: Optional[DashboardFilters] = None) -> pd.DataFrame:
    """Aplica os filtros do Dashboard sobre as presenças.

    Parameters
    ----------
    df:
        Presenças (colunas canônicas ou aliases; ver :mod:`arenadash.dashboard.fonte`).
    f:
        Filtros; None equivale a ``DashboardFilters()``.

    Returns
    -------
    pandas.DataFrame
        Cópia filtrada com duas colunas auxiliares: ``data_parsed``
        (datetime64) e ``horario_norm`` (rótulo ``HHh``). O DataFrame de
        entrada não é alterado.
    """
    f = f or DashboardFilters()
    out = normalize_columns(df)
    out["data_parsed"] = _parse_data_series(out["data_aula"])
    out["horario_norm"] = out["horario"].map(normalize_time)

    valid = out["data_parsed"].notna()
    dropped = int((~valid).sum())
    if dropped:
        logger.debug("Descartadas %d presenças com data_aula inválida", dropped)
    mask = valid

    if f.data_inicio is not None:
        mask &= out["data_parsed"].ge(pd.Timestamp(f.data_inicio))
    if f.data_fim is not None:
        # Fim inclusivo: até o último instante do dia.
        mask &= out["data_parsed"].lt(pd.Timestamp(f.data_fim) + pd.Timedelta(days=1))

    tipo_fold = out["tipo_aula"].str.strip().str.casefold()
    tipo = _selected(f.tipo_aula)
    if tipo is not None:
        mask &= tipo_fold.eq(tipo.casefold())

    if f.tipos_excluidos:
        excluidos = {str(t).strip().casefold() for t in f.tipos_excluidos}
        mask &= ~tipo_fold.isin(excluidos)

    horario = _selected(f.horario)
    if horario is not None:
        mask &= out["horario_norm"].eq(normalize_time(horario))

    return out.loc[mask]


# ---------------------------------------------------------------------------
# Aulas
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Aula:
    """Uma ocorrência de aula derivada de uma ou mais presenças."""

    data_aula: str
    fecha: date
    horario: str
    arena: str
    tipo_aula: str
    professores: str
    qtd_alunos: int
    lista_alunos: Tuple[str, ...]
    qtd_professores: int
    razao: float
    status: str
    cor: str
    coordenador: str

    @property
    def vip(self) -> bool:
        return is_vip(self.tipo_aula)

    @property
    def alerta(self) -> bool:
        return is_alert(self.razao, self.vip)

    @property
    def nomes_professores(self) -> List[str]:
        return normalize_instructors(self.professores)


def group_sessions(df: pd.DataFrame, filters: Optional[DashboardFilters] = None) -> List[Aula]:
    """Agrupa presenças em aulas e classifica cada uma.

    Parameters
    ----------
    df:
        Presenças brutas.
    filters:
        Janela de datas, tipo, horário e exclusões.

    Returns
    -------
    list[Aula]
        Aulas na ordem da primeira presença de cada uma. A ordenação para
        exibição (p.ex. por data desc) é responsabilidade de quem consome.
    """
    base = apply_filters(df, filters)
    if base.empty:
        return []

    aulas: List[Aula] = []
    for key, g in base.groupby(list(SESSION_KEY), sort=False, dropna=False):
        data_aula, horario, arena, tipo_aula, professores = key
        first = g.iloc[0]

        qtd_alunos = int(len(g))
        qtd_professores = instructor_count(professores)
        razao = round(qtd_alunos / qtd_professores, 2)
        classificacao = classify_ratio(razao, is_vip(tipo_aula))

        alunos = tuple(a.strip() for a in g["aluno"].tolist() if a.strip())
        aulas.append(
            Aula(
                data_aula=str(data_aula),
                fecha=first["data_parsed"].date(),
                horario=str(horario),
                arena=str(arena),
                tipo_aula=str(tipo_aula),
                professores=str(professores),
                qtd_alunos=qtd_alunos,
                lista_alunos=alunos,
                qtd_professores=qtd_professores,
                razao=razao,
                status=classificacao.status,
                cor=classificacao.cor,
                coordenador=str(first["coordenador"]),
            )
        )

    logger.debug("Agrupadas %d presenças em %d aulas", len(base), len(aulas))
    return aulas


# ---------------------------------------------------------------------------
# Catálogos para os seletores da tela
# ---------------------------------------------------------------------------

def compute_catalogos(df: pd.DataFrame) -> Tuple[List[str], List[str]]:
    """Horários normalizados e tipos de aula distintos (ordenados)."""
    out = normalize_columns(df)
    horarios = sorted({normalize_time(h) for h in out["horario"].tolist()} - {""})
    tipos = sorted({t.strip() for t in out["tipo_aula"].tolist() if t.strip()})
    return horarios, tipos
