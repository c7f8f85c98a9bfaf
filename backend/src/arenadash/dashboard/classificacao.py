"""arenadash.dashboard.classificacao

Regras de classificação de rentabilidade por aula.

A razão de ocupação (alunos por professor) é classificada em faixas que
dependem do tier da aula:

- **VIP** (``tipo_aula`` contém "VIP", sem diferenciar maiúsculas):
  ``razao < 2`` -> Prejuízo (vermelho); ``razao >= 2`` -> Lucrativa (verde).
  Não existe faixa amarela para VIP.
- **Geral**: ``razao < 3`` -> Prejuízo (vermelho); ``3 <= razao < 5`` -> Normal
  (amarelo); ``razao >= 5`` -> Super Lotada (verde).

Um **alerta** é qualquer aula na faixa vermelha. Narrativa, KPIs e gráficos
usam :func:`is_alert` e :func:`classify_ratio` daqui, nunca cópias locais dos
limites.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

VIP_LIMITE_LUCRO: float = 2.0
GERAL_LIMITE_NORMAL: float = 3.0
GERAL_LIMITE_SUPER: float = 5.0

STATUS_PREJUIZO = "Prejuízo"
STATUS_LUCRATIVA = "Lucrativa"
STATUS_NORMAL = "Normal"
STATUS_SUPER_LOTADA = "Super Lotada"

COR_VERMELHA = "red"
COR_AMARELA = "yellow"
COR_VERDE = "green"

_KPI_STATUS = {
    COR_VERMELHA: "danger",
    COR_AMARELA: "warning",
    COR_VERDE: "success",
}


@dataclass(frozen=True)
class Classificacao:
    """Status e cor indicadora de uma razão de ocupação."""

    status: str
    cor: str


def is_vip(tipo_aula: Any) -> bool:
    """True se o tipo de aula pertence ao tier VIP."""
    if tipo_aula is None:
        return False
    return "vip" in str(tipo_aula).lower()


def classify_ratio(razao: float, vip: bool) -> Classificacao:
    """Classifica uma razão alunos/professor segundo o tier.

    Parameters
    ----------
    razao:
        Razão de ocupação (já arredondada ou não).
    vip:
        True para aplicar as regras VIP.

    Returns
    -------
    Classificacao
        Status textual e cor (``red``/``yellow``/``green``).
    """
    if vip:
        if razao < VIP_LIMITE_LUCRO:
            return Classificacao(STATUS_PREJUIZO, COR_VERMELHA)
        return Classificacao(STATUS_LUCRATIVA, COR_VERDE)

    if razao < GERAL_LIMITE_NORMAL:
        return Classificacao(STATUS_PREJUIZO, COR_VERMELHA)
    if razao < GERAL_LIMITE_SUPER:
        return Classificacao(STATUS_NORMAL, COR_AMARELA)
    return Classificacao(STATUS_SUPER_LOTADA, COR_VERDE)


def classify_session(aula: Any) -> Classificacao:
    """Classifica uma aula (qualquer objeto com ``razao`` e ``tipo_aula``)."""
    return classify_ratio(aula.razao, is_vip(aula.tipo_aula))


def is_alert(razao: float, vip: bool) -> bool:
    """True se a razão cai na faixa vermelha do tier."""
    return classify_ratio(razao, vip).cor == COR_VERMELHA


def kpi_status(cor: str) -> str:
    """Traduz a cor indicadora para o estado do card de KPI."""
    return _KPI_STATUS.get(cor, "neutral")
