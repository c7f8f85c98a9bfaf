"""
Unit tests para a leitura da tabela de presenças.
"""

import pandas as pd
import pytest

from arenadash.dashboard.fonte import (
    PRESENCA_COLUMNS,
    load_presencas,
    normalize_columns,
    presencas_from_records,
)


def test_normalize_columns_aliases_e_nulos():
    df = pd.DataFrame(
        {
            "recordId": [7, None],
            "sessionDate": ["01/03/2024", "02/03/2024"],
            "instructorList": ["Ana", None],
        }
    )
    out = normalize_columns(df)

    assert set(PRESENCA_COLUMNS) <= set(out.columns)
    assert out["data_aula"].tolist() == ["01/03/2024", "02/03/2024"]
    assert out["professores"].tolist() == ["Ana", ""]
    assert out["id"].iloc[1] == ""
    assert out["coordenador"].tolist() == ["", ""]
    assert "data_aula" not in df.columns


def test_presencas_from_records_vazio():
    df = presencas_from_records([])
    assert df.empty
    assert list(df.columns) == list(PRESENCA_COLUMNS)


def test_load_parquet(tmp_path, cenario_rows):
    path = tmp_path / "presencas.parquet"
    pd.DataFrame(cenario_rows).to_parquet(path)

    df = load_presencas(path)
    assert len(df) == 22
    assert df["horario"].iloc[0] == "05:00"


def test_load_csv_mantem_texto(tmp_path):
    path = tmp_path / "presencas.csv"
    path.write_text(
        "id,data_aula,horario,tipo_aula,professores,aluno\n"
        "001,01/03/2024,05h,Geral,Ana,NA\n",
        encoding="utf-8",
    )
    df = load_presencas(path)

    assert df["id"].iloc[0] == "001"
    assert df["aluno"].iloc[0] == "NA"
    assert df["arena"].iloc[0] == ""


def test_load_usa_ambiente(tmp_path, monkeypatch, cenario_rows):
    path = tmp_path / "outra.parquet"
    pd.DataFrame(cenario_rows[:3]).to_parquet(path)
    monkeypatch.setenv("ARENA_PRESENCAS_PATH", str(path))

    assert len(load_presencas()) == 3


def test_load_arquivo_ausente(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_presencas(tmp_path / "nao_existe.parquet")
