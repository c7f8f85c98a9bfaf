"""arenadash.dashboard.analise

Pipeline completo do Dashboard: filtro -> aulas -> agregações -> narrativa.

:func:`analisar` é determinística e sem efeitos colaterais; a mesma entrada
produz sempre a mesma saída, o que permite memoização na camada de
apresentação.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from arenadash.dashboard import aggregations as agg
from arenadash.dashboard.config import AnaliseConfig
from arenadash.dashboard.narrativa import Narrativa, gerar_narrativa
from arenadash.dashboard.queries import Aula, DashboardFilters, group_sessions


@dataclass(frozen=True)
class AnaliseDashboard:
    aulas: List[Aula]
    kpis: agg.Kpis
    horarios: List[agg.HorarioStat]
    melhor_horario: Optional[agg.HorarioStat]
    horario_critico: Optional[agg.HorarioStat]
    professores: List[agg.ProfessorStat]
    dias: List[agg.DiaStat]
    tendencia: Optional[agg.Tendencia]
    alertas: List[Aula]
    narrativa: Narrativa


def analisar(
    df: pd.DataFrame,
    filters: Optional[DashboardFilters] = None,
    config: Optional[AnaliseConfig] = None,
) -> AnaliseDashboard:
    """Executa o pipeline sobre as presenças já carregadas em memória.

    Parameters
    ----------
    df:
        Presenças (uma linha por aluno por aula).
    filters:
        Filtros da tela. Se None, usa ``DashboardFilters`` com as exclusões
        de ``config``.
    config:
        Janela/tolerância da tendência e tipos excluídos.
    """
    config = config or AnaliseConfig()
    if filters is None:
        filters = DashboardFilters(tipos_excluidos=config.tipos_excluidos)

    aulas = group_sessions(df, filters)
    vip = agg.tier_vip(aulas)

    kpis = agg.compute_kpis(aulas, vip)
    horarios = agg.horarios_stats(aulas, vip)
    professores = agg.professores_stats(aulas)
    tend = agg.tendencia(aulas, config.janela_recente, config.tolerancia_estavel)

    narrativa = gerar_narrativa(
        kpis=kpis,
        horarios=horarios,
        professores=professores,
        vip=vip,
        tendencia_recente=tend,
        super_lotadas=agg.contar_super_lotadas(aulas),
        pior_aula=agg.melhor_pior_aula(aulas)[1],
    )

    return AnaliseDashboard(
        aulas=aulas,
        kpis=kpis,
        horarios=horarios,
        melhor_horario=agg.best_horario(horarios),
        horario_critico=agg.critical_horario(horarios),
        professores=professores,
        dias=agg.dias_stats(aulas),
        tendencia=tend,
        alertas=agg.aulas_em_alerta(aulas),
        narrativa=narrativa,
    )
