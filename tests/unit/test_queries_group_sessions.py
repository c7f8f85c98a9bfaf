"""
Unit tests para filtros e agrupamento de presenças em aulas.

Cobre os invariantes do agrupamento: partição das presenças, contagem mínima
de professores, datas inválidas descartadas e janela de datas inclusiva.
"""

from datetime import date

import pandas as pd

from arenadash.dashboard.queries import (
    DashboardFilters,
    apply_filters,
    compute_catalogos,
    group_sessions,
    parse_data_aula,
)


def test_tres_alunos_um_professor_razao_tres_e_normal(presenca):
    df = pd.DataFrame([presenca(aluno=f"S{i}") for i in (1, 2, 3)])

    aulas = group_sessions(df)

    assert len(aulas) == 1
    aula = aulas[0]
    assert aula.qtd_alunos == 3
    assert aula.qtd_professores == 1
    assert aula.razao == 3.0
    assert (aula.status, aula.cor) == ("Normal", "yellow")
    assert aula.lista_alunos == ("S1", "S2", "S3")
    assert aula.fecha == date(2024, 3, 1)


def test_vip_dois_alunos_e_lucrativa(presenca):
    df = pd.DataFrame([presenca(tipo_aula="VIP", aluno=a) for a in ("S1", "S2")])

    (aula,) = group_sessions(df)

    assert aula.razao == 2.0
    assert (aula.status, aula.cor) == ("Lucrativa", "green")
    assert aula.vip
    assert not aula.alerta


def test_agrupamento_particiona_as_presencas(cenario_df):
    aulas = group_sessions(cenario_df)

    assert len(aulas) == 5
    assert sum(a.qtd_alunos for a in aulas) == len(cenario_df)
    assert all(a.qtd_alunos >= 1 and a.qtd_professores >= 1 for a in aulas)


def test_ordem_da_primeira_presenca(cenario_df):
    aulas = group_sessions(cenario_df)
    assert [(a.data_aula, a.horario) for a in aulas] == [
        ("01/03/2024", "05h"),
        ("01/03/2024", "07h"),
        ("02/03/2024", "05h"),
        ("02/03/2024", "18h"),
        ("03/03/2024", "18h"),
    ]


def test_horarios_equivalentes_caem_na_mesma_aula(presenca):
    df = pd.DataFrame([presenca(horario="5:00"), presenca(horario="05h", aluno="S2")])
    (aula,) = group_sessions(df)
    assert aula.horario == "05h"
    assert aula.qtd_alunos == 2


def test_chave_usa_texto_bruto_de_professores(presenca):
    df = pd.DataFrame(
        [
            presenca(professores="Ana, Bruno"),
            presenca(professores="Ana e Bruno", aluno="S2"),
        ]
    )
    aulas = group_sessions(df)
    assert len(aulas) == 2
    assert all(a.qtd_professores == 2 for a in aulas)


def test_datas_invalidas_sao_descartadas(presenca):
    df = pd.DataFrame(
        [
            presenca(),
            presenca(data_aula="32/13/2024", aluno="S2"),
            presenca(data_aula="", aluno="S3"),
            presenca(data_aula="ontem", aluno="S4"),
        ]
    )
    aulas = group_sessions(df)
    assert len(aulas) == 1
    assert aulas[0].qtd_alunos == 1


def test_janela_de_datas_inclusiva(presenca):
    df = pd.DataFrame(
        [
            presenca(data_aula="01/03/2024"),
            presenca(data_aula="02/03/2024"),
            presenca(data_aula="03/03/2024"),
            presenca(data_aula="04/03/2024"),
        ]
    )
    f = DashboardFilters(data_inicio=date(2024, 3, 2), data_fim=date(2024, 3, 3))
    aulas = group_sessions(df, f)
    assert sorted(a.data_aula for a in aulas) == ["02/03/2024", "03/03/2024"]

    so_inicio = group_sessions(df, DashboardFilters(data_inicio=date(2024, 3, 4)))
    assert [a.data_aula for a in so_inicio] == ["04/03/2024"]


def test_exclusao_padrao_de_aulao(presenca):
    df = pd.DataFrame(
        [
            presenca(tipo_aula="Aulão"),
            presenca(tipo_aula="aulão", aluno="S2"),
            presenca(tipo_aula="Geral", aluno="S3"),
        ]
    )
    aulas = group_sessions(df)
    assert [a.tipo_aula for a in aulas] == ["Geral"]

    sem_exclusao = group_sessions(df, DashboardFilters(tipos_excluidos=frozenset()))
    assert sum(a.qtd_alunos for a in sem_exclusao) == 3


def test_filtro_de_tipo_e_horario(presenca):
    df = pd.DataFrame(
        [
            presenca(tipo_aula="VIP", horario="05h"),
            presenca(tipo_aula="Geral", horario="5:00"),
            presenca(tipo_aula="Geral", horario="07h"),
        ]
    )
    assert len(group_sessions(df, DashboardFilters(tipo_aula="vip"))) == 1
    assert len(group_sessions(df, DashboardFilters(tipo_aula="all"))) == 3

    cinco = group_sessions(df, DashboardFilters(horario="5:00"))
    assert {a.tipo_aula for a in cinco} == {"VIP", "Geral"}
    assert len(group_sessions(df, DashboardFilters(horario="all"))) == 3


def test_nomes_vazios_nao_entram_na_lista_e_coordenador_da_primeira(presenca):
    df = pd.DataFrame(
        [
            presenca(aluno="S1", coordenador="Marta"),
            presenca(aluno="", coordenador="Outro"),
            presenca(aluno="S3", coordenador="Outro"),
        ]
    )
    (aula,) = group_sessions(df)
    assert aula.qtd_alunos == 3
    assert aula.lista_alunos == ("S1", "S3")
    assert aula.coordenador == "Marta"


def test_professores_vazio_conta_um(presenca):
    df = pd.DataFrame([presenca(professores=""), presenca(professores="", aluno="S2")])
    (aula,) = group_sessions(df)
    assert aula.qtd_professores == 1
    assert aula.razao == 2.0


def test_razao_arredondada_duas_casas(presenca):
    df = pd.DataFrame([presenca(professores="Ana, Bruno e Carla", aluno=f"S{i}") for i in range(4)])
    (aula,) = group_sessions(df)
    assert aula.razao == 1.33


def test_entrada_vazia_nao_quebra():
    assert group_sessions(pd.DataFrame()) == []
    assert group_sessions(pd.DataFrame(columns=["data_aula", "horario"])) == []


def test_nao_altera_o_dataframe_de_entrada(cenario_df):
    antes = cenario_df.copy()
    group_sessions(cenario_df, DashboardFilters(horario="05h"))
    pd.testing.assert_frame_equal(cenario_df, antes)


def test_aceita_nomes_de_coluna_em_ingles():
    df = pd.DataFrame(
        [
            {
                "sessionDate": "01/03/2024",
                "timeLabel": "6:00",
                "location": "Arena",
                "classType": "Geral",
                "instructorList": "Ana",
                "studentName": "S1",
            }
        ]
    )
    (aula,) = group_sessions(df)
    assert (aula.horario, aula.professores, aula.lista_alunos) == ("06h", "Ana", ("S1",))


def test_apply_filters_colunas_auxiliares(cenario_df):
    out = apply_filters(cenario_df)
    assert {"data_parsed", "horario_norm"}.issubset(out.columns)
    assert set(out["horario_norm"]) == {"05h", "07h", "18h"}


def test_parse_data_aula():
    assert parse_data_aula("08/01/2026") == date(2026, 1, 8)
    assert parse_data_aula(" 1/3/2024 ") == date(2024, 3, 1)
    assert parse_data_aula("2024-03-01") is None
    assert parse_data_aula(None) is None


def test_compute_catalogos(presenca):
    df = pd.DataFrame(
        [
            presenca(horario="18:00", tipo_aula="VIP"),
            presenca(horario="5h", tipo_aula="Geral"),
            presenca(horario="", tipo_aula="Aulão"),
        ]
    )
    horarios, tipos = compute_catalogos(df)
    assert horarios == ["05h", "18h"]
    assert tipos == ["Aulão", "Geral", "VIP"]
