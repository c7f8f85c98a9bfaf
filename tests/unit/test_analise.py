"""
Unit tests para o pipeline completo (filtro -> aulas -> agregações -> narrativa).
"""

from datetime import date

import pandas as pd

from arenadash.dashboard.analise import analisar
from arenadash.dashboard.config import AnaliseConfig
from arenadash.dashboard.queries import DashboardFilters


def test_pipeline_cenario(cenario_df):
    r = analisar(cenario_df)

    assert len(r.aulas) == 5
    assert r.kpis.total_presencas == 22
    assert r.melhor_horario.horario == "18h"
    assert r.horario_critico.horario == "05h"
    assert r.professores[0].nome == "Ana"
    assert len(r.dias) == 3
    assert r.tendencia is None
    assert [a.data_aula for a in r.alertas] == ["02/03/2024", "01/03/2024"]
    assert "saudável" in r.narrativa.resumo


def test_totais_reconciliam(cenario_df):
    r = analisar(cenario_df)

    total = sum(a.qtd_alunos for a in r.aulas)
    assert total == len(cenario_df)
    assert total == sum(h.total_alunos for h in r.horarios)
    assert total == sum(d.total_alunos for d in r.dias)
    assert sum(d.total_horas for d in r.dias) == sum(p.horas for p in r.professores)


def test_pipeline_idempotente(cenario_df):
    assert analisar(cenario_df) == analisar(cenario_df)


def test_aulao_excluido_por_padrao(cenario_df, presenca):
    extra = pd.DataFrame([presenca(tipo_aula="Aulão", aluno=f"x{i}") for i in range(30)])
    df = pd.concat([cenario_df, extra], ignore_index=True)

    assert analisar(df).kpis.total_presencas == 22

    config = AnaliseConfig(tipos_excluidos=frozenset())
    assert analisar(df, config=config).kpis.total_presencas == 52


def test_filtros_e_janela_de_config(cenario_df):
    config = AnaliseConfig(janela_recente=2)
    r = analisar(cenario_df, config=config)
    assert r.tendencia is not None
    assert r.tendencia.janela == 2

    f = DashboardFilters(data_inicio=date(2024, 3, 3), data_fim=date(2024, 3, 3))
    so_dia3 = analisar(cenario_df, filters=f)
    assert [a.data_aula for a in so_dia3.aulas] == ["03/03/2024"]
    assert so_dia3.horario_critico is None


def test_sem_dados(cenario_df):
    f = DashboardFilters(data_inicio=date(2025, 1, 1), data_fim=date(2025, 1, 31))
    r = analisar(cenario_df, filters=f)

    assert r.aulas == []
    assert r.kpis.total_aulas == 0
    assert r.narrativa.sem_dados
