# backend/src/arenadash/app/schemas/dashboard.py
"""Esquemas (Pydantic) para a API do Dashboard.

Contratos de resposta **estáveis** para os endpoints ``/dashboard/*``. Os
modelos de saída leem diretamente os dataclasses de
:mod:`arenadash.dashboard` (``from_attributes=True``), de modo que o router só
faz a serialização.

Notas
-----
- ``PresencaIn`` aceita tanto os nomes de coluna da planilha (``data_aula``,
  ``professores``...) quanto os nomes em inglês (``sessionDate``,
  ``instructorList``...).
- Cores indicadoras: ``red`` | ``yellow`` | ``green``.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _FromAttrs(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Entrada
# ---------------------------------------------------------------------------

class PresencaIn(BaseModel):
    """Uma linha de presença (um aluno em uma aula)."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = Field(None, validation_alias=AliasChoices("id", "recordId"))
    data_aula: Optional[str] = Field(
        None,
        description="Data no formato dd/mm/aaaa.",
        validation_alias=AliasChoices("data_aula", "sessionDate"),
    )
    horario: Optional[str] = Field(None, validation_alias=AliasChoices("horario", "timeLabel"))
    arena: Optional[str] = Field(None, validation_alias=AliasChoices("arena", "location"))
    tipo_aula: Optional[str] = Field(None, validation_alias=AliasChoices("tipo_aula", "classType"))
    professores: Optional[str] = Field(
        None,
        description="Professores separados por vírgula ou ' e '.",
        validation_alias=AliasChoices("professores", "instructorList"),
    )
    aluno: Optional[str] = Field(None, validation_alias=AliasChoices("aluno", "studentName"))
    coordenador: Optional[str] = Field(
        None, validation_alias=AliasChoices("coordenador", "coordinatorName")
    )


class FiltrosIn(BaseModel):
    """Filtros da tela (todos opcionais)."""

    data_inicio: Optional[date] = Field(None, description="Início da janela (incl.).")
    data_fim: Optional[date] = Field(None, description="Fim da janela (incl.).")
    tipo_aula: Optional[str] = Field(None, description="Tipo de aula ou 'all'.")
    horario: Optional[str] = Field(None, description="Faixa de horário (p.ex. 05h) ou 'all'.")


class AnaliseRequest(BaseModel):
    """Contrato de entrada para ``POST /dashboard/analise``."""

    presencas: List[PresencaIn] = Field(default_factory=list)
    filtros: FiltrosIn = Field(default_factory=FiltrosIn)


# ---------------------------------------------------------------------------
# Saída
# ---------------------------------------------------------------------------

class AulaOut(_FromAttrs):
    """Uma aula agrupada e classificada."""

    data_aula: str
    fecha: date
    horario: str
    arena: str
    tipo_aula: str
    professores: str
    qtd_alunos: int
    lista_alunos: List[str] = Field(default_factory=list)
    qtd_professores: int
    razao: float = Field(..., description="Alunos por professor (2 casas).")
    status: str
    cor: str
    coordenador: str


class DashboardKPIs(_FromAttrs):
    """Contrato para ``GET /dashboard/kpis``."""

    total_presencas: int = Field(0, description="Presenças (volume).")
    alunos_unicos: int = Field(0, description="Alunos distintos (alcance).")
    total_aulas: int = 0
    media_alunos_por_professor: float = 0.0
    aulas_em_alerta: int = 0
    status: str = Field("neutral", description="danger | warning | success | neutral.")
    cor: Optional[str] = None


class HorarioStatOut(_FromAttrs):
    horario: str
    media: float
    alertas: int
    total_alunos: int
    qtd_aulas: int
    cor: str


class DashboardHorarios(_FromAttrs):
    """Contrato para ``GET /dashboard/horarios``."""

    items: List[HorarioStatOut] = Field(default_factory=list)
    melhor: Optional[HorarioStatOut] = None
    critico: Optional[HorarioStatOut] = None


class ProfessorStatOut(_FromAttrs):
    nome: str
    horas: int = Field(..., description="Aulas ministradas (horas pagas).")
    total_alunos: int


class DashboardProfessores(BaseModel):
    """Contrato para ``GET /dashboard/professores``."""

    items: List[ProfessorStatOut] = Field(default_factory=list)


class DiaStatOut(_FromAttrs):
    data: str
    fecha: date
    qtd_aulas: int
    media: float
    alertas: int
    total_alunos: int
    total_horas: int


class TendenciaOut(_FromAttrs):
    direcao: str = Field(..., description="melhora | queda | estavel.")
    media_recente: float
    media_geral: float
    delta: float
    janela: int


class DashboardDias(BaseModel):
    """Contrato para ``GET /dashboard/dias``."""

    items: List[DiaStatOut] = Field(default_factory=list)
    tendencia: Optional[TendenciaOut] = None


class DiaEvolucaoOut(_FromAttrs):
    fecha: date
    total_alunos: int
    total_horas: int
    razao: float
    status: Optional[str] = None
    cor: Optional[str] = None


class DashboardEvolucao(BaseModel):
    """Contrato para ``GET /dashboard/evolucao``."""

    ano: int
    mes: int
    items: List[DiaEvolucaoOut] = Field(default_factory=list)


class DashboardHistorico(_FromAttrs):
    """Contrato para ``GET /dashboard/aulas`` (histórico paginado)."""

    itens: List[AulaOut] = Field(default_factory=list)
    pagina: int = 1
    por_pagina: int = 8
    total: int = 0
    total_paginas: int = 0


class DashboardAlertas(BaseModel):
    """Contrato para ``GET /dashboard/alertas``."""

    items: List[AulaOut] = Field(default_factory=list)


class DashboardCatalogos(BaseModel):
    """Opções para os seletores de horário e tipo de aula."""

    horarios: List[str] = Field(default_factory=list)
    tipos: List[str] = Field(default_factory=list)


class DashboardNarrativa(BaseModel):
    """Contrato para ``GET /dashboard/narrativa``."""

    resumo: str
    alertas: Optional[str] = None
    destaques: Optional[str] = None
    tendencia: Optional[str] = None
    texto: str
    sem_dados: bool = False


class DashboardAnalise(BaseModel):
    """Contrato para ``POST /dashboard/analise`` (pipeline completo)."""

    aulas: List[AulaOut] = Field(default_factory=list)
    kpis: DashboardKPIs
    horarios: DashboardHorarios
    professores: List[ProfessorStatOut] = Field(default_factory=list)
    dias: DashboardDias
    alertas: List[AulaOut] = Field(default_factory=list)
    narrativa: DashboardNarrativa
