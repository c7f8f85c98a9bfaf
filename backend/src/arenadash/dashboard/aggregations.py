"""arenadash.dashboard.aggregations

Agregações e rankings do Dashboard a partir das aulas já classificadas.

Este módulo recebe a lista de :class:`~arenadash.dashboard.queries.Aula`
produzida por :func:`~arenadash.dashboard.queries.group_sessions` e expõe:

- estatísticas por faixa de horário (gráfico de performance);
- ranking de professores por horas pagas;
- consolidação por dia, evolução mensal e tendência recente;
- KPIs, lista de alertas e histórico paginado.

Decisões de desenho
-------------------
- Agregar com pandas quando há agrupamento tabular (horários, dias).
- Nenhuma média divide por zero: coleções vazias retornam listas vazias,
  zeros ou None.
- Os limites de classificação vêm de :mod:`arenadash.dashboard.classificacao`.
"""

from __future__ import annotations

import calendar
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from arenadash.dashboard.classificacao import (
    STATUS_SUPER_LOTADA,
    classify_ratio,
    kpi_status,
)
from arenadash.dashboard.queries import Aula

HISTORICO_POR_PAGINA = 8

TENDENCIA_MELHORA = "melhora"
TENDENCIA_QUEDA = "queda"
TENDENCIA_ESTAVEL = "estavel"


# ---------------------------------------------------------------------------
# Tipos de saída
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HorarioStat:
    horario: str
    media: float
    alertas: int
    total_alunos: int
    qtd_aulas: int
    cor: str


@dataclass(frozen=True)
class ProfessorStat:
    nome: str
    horas: int
    total_alunos: int


@dataclass(frozen=True)
class DiaStat:
    data: str
    fecha: date
    qtd_aulas: int
    media: float
    alertas: int
    total_alunos: int
    total_horas: int


@dataclass(frozen=True)
class DiaEvolucao:
    """Ponto do gráfico de evolução diária (um por dia do mês)."""

    fecha: date
    total_alunos: int
    total_horas: int
    razao: float
    status: Optional[str]
    cor: Optional[str]


@dataclass(frozen=True)
class Tendencia:
    direcao: str
    media_recente: float
    media_geral: float
    delta: float
    janela: int


@dataclass(frozen=True)
class Kpis:
    total_presencas: int
    alunos_unicos: int
    total_aulas: int
    media_alunos_por_professor: float
    aulas_em_alerta: int
    status: str
    cor: Optional[str]


@dataclass(frozen=True)
class PaginaHistorico:
    itens: List[Aula]
    pagina: int
    por_pagina: int
    total: int
    total_paginas: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe_mean(values: Sequence[float]) -> Optional[float]:
    """Média simples; None se não houver valores."""
    if not values:
        return None
    return float(sum(values)) / len(values)


def _aulas_frame(aulas: Sequence[Aula]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "data_aula": [a.data_aula for a in aulas],
            "fecha": [a.fecha for a in aulas],
            "horario": [a.horario for a in aulas],
            "razao": [float(a.razao) for a in aulas],
            "qtd_alunos": [int(a.qtd_alunos) for a in aulas],
            "qtd_professores": [int(a.qtd_professores) for a in aulas],
            "alerta": [bool(a.alerta) for a in aulas],
        }
    )


def tier_vip(aulas: Sequence[Aula]) -> bool:
    """True quando o recorte só tem aulas VIP (média julgada pelo tier VIP)."""
    return bool(aulas) and all(a.vip for a in aulas)


def _ordem_recente(aula: Aula) -> Tuple[date, str]:
    return (aula.fecha, aula.horario)


# ---------------------------------------------------------------------------
# Horários
# ---------------------------------------------------------------------------

def horarios_stats(aulas: Sequence[Aula], vip: Optional[bool] = None) -> List[HorarioStat]:
    """Estatísticas por faixa de horário, ordenadas pelo rótulo (``05h`` < ``14h``).

    Parameters
    ----------
    aulas:
        Aulas classificadas.
    vip:
        Tier usado para colorir a média de cada faixa. Se None, deriva de
        :func:`tier_vip`.
    """
    if not aulas:
        return []
    if vip is None:
        vip = tier_vip(aulas)

    df = _aulas_frame(aulas)
    agg = df.groupby("horario", sort=True).agg(
        media=("razao", "mean"),
        alertas=("alerta", "sum"),
        total_alunos=("qtd_alunos", "sum"),
        qtd_aulas=("razao", "size"),
    )

    out: List[HorarioStat] = []
    for horario, row in agg.iterrows():
        media = round(float(row["media"]), 2)
        out.append(
            HorarioStat(
                horario=str(horario),
                media=media,
                alertas=int(row["alertas"]),
                total_alunos=int(row["total_alunos"]),
                qtd_aulas=int(row["qtd_aulas"]),
                cor=classify_ratio(media, vip).cor,
            )
        )
    return out


def best_horario(stats: Sequence[HorarioStat]) -> Optional[HorarioStat]:
    """Faixa com maior média (empate: a primeira da lista)."""
    if not stats:
        return None
    return max(stats, key=lambda s: s.media)


def critical_horario(stats: Sequence[HorarioStat]) -> Optional[HorarioStat]:
    """Faixa com mais alertas; empate decidido pela menor média.

    Retorna None se nenhuma faixa tem alertas.
    """
    com_alerta = [s for s in stats if s.alertas > 0]
    if not com_alerta:
        return None
    return min(com_alerta, key=lambda s: (-s.alertas, s.media))


# ---------------------------------------------------------------------------
# Professores
# ---------------------------------------------------------------------------

def professores_stats(aulas: Iterable[Aula], limit: Optional[int] = None) -> List[ProfessorStat]:
    """Ranking de professores por horas pagas (aulas ministradas).

    Cada aula soma 1 hora e ``qtd_alunos`` para cada professor normalizado.
    O ranking é por horas (mais ativo), não por alunos; empates mantêm a ordem
    em que o professor apareceu.
    """
    horas: Counter[str] = Counter()
    alunos: Counter[str] = Counter()
    for aula in aulas:
        for nome in aula.nomes_professores:
            horas[nome] += 1
            alunos[nome] += aula.qtd_alunos

    ranking = sorted(horas, key=lambda n: -horas[n])
    if limit is not None:
        ranking = ranking[: max(0, int(limit))]
    return [ProfessorStat(nome=n, horas=horas[n], total_alunos=alunos[n]) for n in ranking]


def top_professor(aulas: Iterable[Aula]) -> Optional[ProfessorStat]:
    ranking = professores_stats(aulas, limit=1)
    return ranking[0] if ranking else None


# ---------------------------------------------------------------------------
# Dias
# ---------------------------------------------------------------------------

def dias_stats(aulas: Sequence[Aula]) -> List[DiaStat]:
    """Consolidação por ``data_aula`` (texto bruto), em ordem cronológica."""
    if not aulas:
        return []

    df = _aulas_frame(aulas)
    agg = df.groupby("data_aula", sort=False).agg(
        fecha=("fecha", "first"),
        qtd_aulas=("razao", "size"),
        media=("razao", "mean"),
        alertas=("alerta", "sum"),
        total_alunos=("qtd_alunos", "sum"),
        total_horas=("qtd_professores", "sum"),
    )
    agg = agg.sort_values("fecha", kind="stable")

    return [
        DiaStat(
            data=str(data_aula),
            fecha=row["fecha"],
            qtd_aulas=int(row["qtd_aulas"]),
            media=round(float(row["media"]), 2),
            alertas=int(row["alertas"]),
            total_alunos=int(row["total_alunos"]),
            total_horas=int(row["total_horas"]),
        )
        for data_aula, row in agg.iterrows()
    ]


def tendencia(
    aulas: Sequence[Aula],
    janela: int = 3,
    tolerancia: float = 0.5,
) -> Optional[Tendencia]:
    """Compara a média dos últimos ``janela`` dias com a média geral.

    Returns
    -------
    Tendencia | None
        None quando há ``janela`` dias ou menos (não existe "recente" distinto
        do todo).
    """
    janela = max(1, int(janela))
    dias = sorted({a.fecha for a in aulas})
    if len(dias) <= janela:
        return None

    recentes = set(dias[-janela:])
    media_geral = _safe_mean([a.razao for a in aulas])
    media_recente = _safe_mean([a.razao for a in aulas if a.fecha in recentes])
    if media_geral is None or media_recente is None:
        return None

    delta = media_recente - media_geral
    if delta > tolerancia:
        direcao = TENDENCIA_MELHORA
    elif delta < -tolerancia:
        direcao = TENDENCIA_QUEDA
    else:
        direcao = TENDENCIA_ESTAVEL
    return Tendencia(
        direcao=direcao,
        media_recente=round(media_recente, 2),
        media_geral=round(media_geral, 2),
        delta=round(delta, 2),
        janela=janela,
    )


def evolucao_mensal(
    aulas: Iterable[Aula],
    ano: int,
    mes: int,
    vip: bool = False,
) -> List[DiaEvolucao]:
    """Alunos vs. horas pagas para cada dia do mês.

    Dias sem aulas aparecem com zeros e ``cor=None``. A razão do dia é
    ``total_alunos / total_horas`` (2 casas), classificada pelo tier ``vip``.

    Raises
    ------
    ValueError
        Se ``mes`` não estiver em 1..12.
    """
    if not 1 <= int(mes) <= 12:
        raise ValueError(f"mes inválido: {mes}")
    n_dias = calendar.monthrange(int(ano), int(mes))[1]

    alunos: Counter[date] = Counter()
    horas: Counter[date] = Counter()
    for aula in aulas:
        if aula.fecha.year == ano and aula.fecha.month == mes:
            alunos[aula.fecha] += aula.qtd_alunos
            horas[aula.fecha] += aula.qtd_professores

    out: List[DiaEvolucao] = []
    for dia in range(1, n_dias + 1):
        fecha = date(int(ano), int(mes), dia)
        total_horas = horas[fecha]
        if total_horas > 0:
            razao = round(alunos[fecha] / total_horas, 2)
            c = classify_ratio(razao, vip)
            status, cor = c.status, c.cor
        else:
            razao, status, cor = 0.0, None, None
        out.append(
            DiaEvolucao(
                fecha=fecha,
                total_alunos=alunos[fecha],
                total_horas=total_horas,
                razao=razao,
                status=status,
                cor=cor,
            )
        )
    return out


# ---------------------------------------------------------------------------
# KPIs, alertas e histórico
# ---------------------------------------------------------------------------

def total_presencas(aulas: Iterable[Aula]) -> int:
    """Volume: total de presenças (linhas) no recorte."""
    return sum(a.qtd_alunos for a in aulas)


def alunos_unicos(aulas: Iterable[Aula]) -> int:
    """Alcance: alunos distintos (por nome) no recorte."""
    return len({nome for a in aulas for nome in a.lista_alunos})


def media_geral(aulas: Sequence[Aula]) -> float:
    media = _safe_mean([a.razao for a in aulas])
    return round(media, 2) if media is not None else 0.0


def compute_kpis(aulas: Sequence[Aula], vip: Optional[bool] = None) -> Kpis:
    """KPIs do placar: presenças, alunos únicos, média alunos/prof e alertas."""
    if not aulas:
        return Kpis(
            total_presencas=0,
            alunos_unicos=0,
            total_aulas=0,
            media_alunos_por_professor=0.0,
            aulas_em_alerta=0,
            status="neutral",
            cor=None,
        )
    if vip is None:
        vip = tier_vip(aulas)

    media = media_geral(aulas)
    cor = classify_ratio(media, vip).cor
    return Kpis(
        total_presencas=total_presencas(aulas),
        alunos_unicos=alunos_unicos(aulas),
        total_aulas=len(aulas),
        media_alunos_por_professor=media,
        aulas_em_alerta=sum(1 for a in aulas if a.alerta),
        status=kpi_status(cor),
        cor=cor,
    )


def aulas_em_alerta(aulas: Iterable[Aula]) -> List[Aula]:
    """Aulas na faixa vermelha, mais recentes primeiro."""
    return sorted((a for a in aulas if a.alerta), key=_ordem_recente, reverse=True)


def contar_super_lotadas(aulas: Iterable[Aula]) -> int:
    return sum(1 for a in aulas if a.status == STATUS_SUPER_LOTADA)


def melhor_pior_aula(aulas: Sequence[Aula]) -> Tuple[Optional[Aula], Optional[Aula]]:
    """Aula com maior e com menor razão (empates: a primeira encontrada)."""
    if not aulas:
        return None, None
    ordenadas = sorted(aulas, key=lambda a: -a.razao)
    return ordenadas[0], ordenadas[-1]


def _match_busca(aula: Aula, termo: str) -> bool:
    return (
        termo in aula.professores.lower()
        or termo in aula.tipo_aula.lower()
        or termo in aula.horario.lower()
    )


def historico(
    aulas: Iterable[Aula],
    busca: Optional[str] = None,
    pagina: int = 1,
    por_pagina: int = HISTORICO_POR_PAGINA,
) -> PaginaHistorico:
    """Histórico completo do período, paginado e mais recente primeiro.

    Parameters
    ----------
    busca:
        Termo (sem diferenciar maiúsculas) procurado em professores, tipo de
        aula e horário.
    pagina:
        Página 1-based; valores fora do intervalo são ajustados ao limite.
    por_pagina:
        Itens por página (>= 1).

    Raises
    ------
    ValueError
        Se ``por_pagina`` < 1.
    """
    if por_pagina < 1:
        raise ValueError("por_pagina deve ser >= 1")

    ordenadas = sorted(aulas, key=_ordem_recente, reverse=True)
    termo = (busca or "").strip().lower()
    if termo:
        ordenadas = [a for a in ordenadas if _match_busca(a, termo)]

    total = len(ordenadas)
    total_paginas = math.ceil(total / por_pagina)
    pagina = min(max(1, int(pagina)), max(1, total_paginas))
    inicio = (pagina - 1) * por_pagina
    return PaginaHistorico(
        itens=ordenadas[inicio : inicio + por_pagina],
        pagina=pagina,
        por_pagina=por_pagina,
        total=total,
        total_paginas=total_paginas,
    )
