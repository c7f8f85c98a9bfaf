# tests/conftest.py
import os
from typing import Dict, List

import pandas as pd
import pytest
from fastapi.testclient import TestClient

# Garante que o código do backend esteja no path (pyproject também configura).
os.environ.setdefault("PYTHONPATH", "backend/src")

from arenadash.app.main import app  # noqa: E402


def _presenca(
    data_aula: str = "01/03/2024",
    horario: str = "05h",
    tipo_aula: str = "Geral",
    professores: str = "Ana",
    aluno: str = "S1",
    arena: str = "Arena Centro",
    coordenador: str = "Coord",
) -> Dict[str, str]:
    """Uma linha de presença com valores padrão."""
    return {
        "id": "",
        "data_aula": data_aula,
        "horario": horario,
        "arena": arena,
        "tipo_aula": tipo_aula,
        "professores": professores,
        "aluno": aluno,
        "coordenador": coordenador,
    }


def cenario_presencas() -> List[Dict[str, str]]:
    """Cenário de referência com 5 aulas e 22 presenças.

    | aula | data       | horário | professores  | alunos | razão | status       |
    |------|------------|---------|--------------|--------|-------|--------------|
    | S1   | 01/03/2024 | 05h     | Ana          | 1      | 1.0   | Prejuízo     |
    | S2   | 01/03/2024 | 07h     | Ana e Bruno  | 8      | 4.0   | Normal       |
    | S3   | 02/03/2024 | 05h     | Bruno        | 2      | 2.0   | Prejuízo     |
    | S4   | 02/03/2024 | 18h     | Carla        | 6      | 6.0   | Super Lotada |
    | S5   | 03/03/2024 | 18h     | Peu          | 5      | 5.0   | Super Lotada |
    """
    aulas = [
        ("01/03/2024", "05:00", "Ana", 1),
        ("01/03/2024", "7h", "Ana e Bruno", 8),
        ("02/03/2024", "05h", "Bruno", 2),
        ("02/03/2024", "18:00", "Carla", 6),
        ("03/03/2024", "18h", "Peu", 5),
    ]
    rows: List[Dict[str, str]] = []
    for data_aula, horario, professores, n in aulas:
        for k in range(n):
            rows.append(
                _presenca(
                    data_aula=data_aula,
                    horario=horario,
                    professores=professores,
                    aluno=f"aluno{k}",
                )
            )
    return rows


@pytest.fixture()
def cenario_df() -> pd.DataFrame:
    return pd.DataFrame(cenario_presencas())


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def presenca():
    """Fábrica de linhas de presença (ver ``_presenca``)."""
    return _presenca


@pytest.fixture()
def cenario_rows() -> List[Dict[str, str]]:
    return cenario_presencas()
