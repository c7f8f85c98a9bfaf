# backend/src/arenadash/app/routers/dashboard.py
"""Router do Dashboard da arena.

Expõe a API ``/dashboard/*``. Por desenho:

- O router permanece fino (HTTP/serialização).
- A leitura da tabela de presenças vive em :mod:`arenadash.dashboard.fonte` e
  toda a lógica de aulas/indicadores em :mod:`arenadash.dashboard`.
- Cada requisição lê a tabela inteira e recalcula o pipeline; não há cache.

Respostas de erro
-----------------
- 404: tabela de presenças não encontrada (``ARENA_PRESENCAS_PATH``).
- 400: filtros inconsistentes (p.ex. ``data_inicio`` > ``data_fim``).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from arenadash.app.schemas.dashboard import (
    AnaliseRequest,
    AulaOut,
    DashboardAlertas,
    DashboardAnalise,
    DashboardCatalogos,
    DashboardDias,
    DashboardEvolucao,
    DashboardHistorico,
    DashboardHorarios,
    DashboardKPIs,
    DashboardNarrativa,
    DashboardProfessores,
    DiaEvolucaoOut,
    DiaStatOut,
    HorarioStatOut,
    ProfessorStatOut,
    TendenciaOut,
)
from arenadash.dashboard import aggregations as agg
from arenadash.dashboard.analise import analisar
from arenadash.dashboard.config import AnaliseConfig
from arenadash.dashboard.fonte import load_presencas, presencas_from_records
from arenadash.dashboard.narrativa import Narrativa, narrativa_de_aulas
from arenadash.dashboard.queries import (
    Aula,
    DashboardFilters,
    compute_catalogos,
    group_sessions,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _filters_from_query(
    data_inicio: Optional[date],
    data_fim: Optional[date],
    tipo_aula: Optional[str],
    horario: Optional[str],
    config: AnaliseConfig,
) -> DashboardFilters:
    """Constrói `DashboardFilters` a partir dos query params.

    Fica no router porque é parsing/contrato de entrada; a filtragem real vive
    em `arenadash.dashboard.queries`.
    """
    if data_inicio is not None and data_fim is not None and data_inicio > data_fim:
        raise HTTPException(status_code=400, detail="data_inicio deve ser <= data_fim")
    return DashboardFilters(
        data_inicio=data_inicio,
        data_fim=data_fim,
        tipo_aula=tipo_aula,
        horario=horario,
        tipos_excluidos=config.tipos_excluidos,
    )


def _load_df(config: AnaliseConfig):
    try:
        return load_presencas(config.presencas_path)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _load_aulas(
    data_inicio: Optional[date],
    data_fim: Optional[date],
    tipo_aula: Optional[str],
    horario: Optional[str],
) -> tuple[List[Aula], AnaliseConfig]:
    config = AnaliseConfig.from_env()
    filters = _filters_from_query(data_inicio, data_fim, tipo_aula, horario, config)
    aulas = group_sessions(_load_df(config), filters)
    return aulas, config


def _narrativa_out(n: Narrativa) -> DashboardNarrativa:
    return DashboardNarrativa(
        resumo=n.resumo,
        alertas=n.alertas,
        destaques=n.destaques,
        tendencia=n.tendencia,
        texto=n.texto,
        sem_dados=n.sem_dados,
    )


def _horarios_out(aulas: List[Aula]) -> DashboardHorarios:
    stats = agg.horarios_stats(aulas)
    melhor = agg.best_horario(stats)
    critico = agg.critical_horario(stats)
    return DashboardHorarios(
        items=[HorarioStatOut.model_validate(s) for s in stats],
        melhor=HorarioStatOut.model_validate(melhor) if melhor else None,
        critico=HorarioStatOut.model_validate(critico) if critico else None,
    )


def _dias_out(aulas: List[Aula], config: AnaliseConfig) -> DashboardDias:
    tend = agg.tendencia(aulas, config.janela_recente, config.tolerancia_estavel)
    return DashboardDias(
        items=[DiaStatOut.model_validate(d) for d in agg.dias_stats(aulas)],
        tendencia=TendenciaOut.model_validate(tend) if tend else None,
    )


@router.get("/kpis", response_model=DashboardKPIs)
def dashboard_kpis(
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardKPIs:
    """Placar do período: presenças, alunos únicos, média alunos/prof e alertas."""
    aulas, _ = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    return DashboardKPIs.model_validate(agg.compute_kpis(aulas))


@router.get("/aulas", response_model=DashboardHistorico)
def dashboard_aulas(
    busca: Optional[str] = Query(None, description="Busca em professores, tipo e horário."),  # noqa: B008
    pagina: int = Query(1, ge=1, description="Página (1-based)."),  # noqa: B008
    por_pagina: int = Query(agg.HISTORICO_POR_PAGINA, ge=1, le=200),  # noqa: B008
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardHistorico:
    """Histórico completo do período (mais recentes primeiro), paginado."""
    aulas, _ = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    pagina_hist = agg.historico(aulas, busca=busca, pagina=pagina, por_pagina=por_pagina)
    return DashboardHistorico.model_validate(pagina_hist)


@router.get("/alertas", response_model=DashboardAlertas)
def dashboard_alertas(
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardAlertas:
    """Aulas na faixa vermelha (mais recentes primeiro)."""
    aulas, _ = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    return DashboardAlertas(items=[AulaOut.model_validate(a) for a in agg.aulas_em_alerta(aulas)])


@router.get("/horarios", response_model=DashboardHorarios)
def dashboard_horarios(
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardHorarios:
    """Média alunos/prof por faixa de horário, com melhor e pior faixa."""
    aulas, _ = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    return _horarios_out(aulas)


@router.get("/professores", response_model=DashboardProfessores)
def dashboard_professores(
    limit: int = Query(10, ge=1, le=200, description="Top N por horas."),  # noqa: B008
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardProfessores:
    """Ranking de horas pagas por professor."""
    aulas, _ = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    ranking = agg.professores_stats(aulas, limit=limit)
    return DashboardProfessores(items=[ProfessorStatOut.model_validate(p) for p in ranking])


@router.get("/dias", response_model=DashboardDias)
def dashboard_dias(
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardDias:
    """Consolidação por dia e tendência dos dias recentes."""
    aulas, config = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    return _dias_out(aulas, config)


@router.get("/evolucao", response_model=DashboardEvolucao)
def dashboard_evolucao(
    ano: int = Query(..., ge=2000, le=2100),  # noqa: B008
    mes: int = Query(..., ge=1, le=12),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardEvolucao:
    """Evolução diária (alunos vs. horas pagas) para todos os dias do mês."""
    aulas, _ = _load_aulas(None, None, tipo_aula, horario)
    pontos = agg.evolucao_mensal(aulas, ano, mes, vip=agg.tier_vip(aulas))
    return DashboardEvolucao(
        ano=ano,
        mes=mes,
        items=[DiaEvolucaoOut.model_validate(p) for p in pontos],
    )


@router.get("/narrativa", response_model=DashboardNarrativa)
def dashboard_narrativa(
    data_inicio: Optional[date] = Query(None, description="Início da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    data_fim: Optional[date] = Query(None, description="Fim da janela (incl.), AAAA-MM-DD."),  # noqa: B008
    tipo_aula: Optional[str] = Query(None, description="Tipo de aula (p.ex. VIP, Geral) ou 'all'."),  # noqa: B008
    horario: Optional[str] = Query(None, description="Faixa de horário (p.ex. 05h) ou 'all'."),  # noqa: B008
) -> DashboardNarrativa:
    """Diagnóstico em texto do período selecionado."""
    aulas, config = _load_aulas(data_inicio, data_fim, tipo_aula, horario)
    narrativa = narrativa_de_aulas(aulas, config.janela_recente, config.tolerancia_estavel)
    return _narrativa_out(narrativa)


@router.get("/catalogos", response_model=DashboardCatalogos)
def dashboard_catalogos() -> DashboardCatalogos:
    """Opções dos seletores de horário e tipo de aula (tabela inteira)."""
    config = AnaliseConfig.from_env()
    horarios, tipos = compute_catalogos(_load_df(config))
    return DashboardCatalogos(horarios=horarios, tipos=tipos)


@router.post("/analise", response_model=DashboardAnalise)
def dashboard_analise(body: AnaliseRequest) -> DashboardAnalise:
    """Pipeline completo sobre presenças enviadas no corpo da requisição."""
    config = AnaliseConfig.from_env()
    f = body.filtros
    filters = _filters_from_query(f.data_inicio, f.data_fim, f.tipo_aula, f.horario, config)
    df = presencas_from_records(p.model_dump() for p in body.presencas)

    result = analisar(df, filters, config)
    logger.info(
        "Análise: %d presenças -> %d aulas (%d em alerta)",
        len(body.presencas),
        len(result.aulas),
        result.kpis.aulas_em_alerta,
    )

    melhor, critico = result.melhor_horario, result.horario_critico
    return DashboardAnalise(
        aulas=[AulaOut.model_validate(a) for a in result.aulas],
        kpis=DashboardKPIs.model_validate(result.kpis),
        horarios=DashboardHorarios(
            items=[HorarioStatOut.model_validate(s) for s in result.horarios],
            melhor=HorarioStatOut.model_validate(melhor) if melhor else None,
            critico=HorarioStatOut.model_validate(critico) if critico else None,
        ),
        professores=[ProfessorStatOut.model_validate(p) for p in result.professores],
        dias=DashboardDias(
            items=[DiaStatOut.model_validate(d) for d in result.dias],
            tendencia=TendenciaOut.model_validate(result.tendencia) if result.tendencia else None,
        ),
        alertas=[AulaOut.model_validate(a) for a in result.alertas],
        narrativa=_narrativa_out(result.narrativa),
    )
