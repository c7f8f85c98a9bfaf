"""arenadash.dashboard.narrativa

Diagnóstico em texto ("Análise IA") montado a partir das agregações.

Não há inferência de modelo: o texto é montado por condicionais sobre KPIs,
estatísticas por horário, ranking de professores e tendência. A média geral é
julgada com :func:`~arenadash.dashboard.classificacao.classify_ratio`, os
mesmos limites usados em cada aula.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from arenadash.dashboard.aggregations import (
    TENDENCIA_MELHORA,
    TENDENCIA_QUEDA,
    HorarioStat,
    Kpis,
    ProfessorStat,
    Tendencia,
    best_horario,
    compute_kpis,
    contar_super_lotadas,
    critical_horario,
    horarios_stats,
    melhor_pior_aula,
    professores_stats,
    tendencia,
    tier_vip,
)
from arenadash.dashboard.classificacao import COR_AMARELA, COR_VERMELHA, classify_ratio
from arenadash.dashboard.queries import Aula

SEM_DADOS = "Não há dados suficientes para gerar uma análise neste período."


@dataclass(frozen=True)
class Narrativa:
    """Blocos do diagnóstico. ``texto`` junta os blocos presentes."""

    resumo: str
    alertas: Optional[str] = None
    destaques: Optional[str] = None
    tendencia: Optional[str] = None
    sem_dados: bool = False

    @property
    def texto(self) -> str:
        blocos = [self.resumo, self.alertas, self.destaques, self.tendencia]
        return "\n\n".join(b for b in blocos if b)


def _bloco_resumo(kpis: Kpis, vip: bool) -> str:
    media = kpis.media_alunos_por_professor
    texto = (
        f"Analisei **{kpis.total_aulas} aulas** e **{kpis.total_presencas} presenças** "
        f"no período selecionado. "
    )
    cor = classify_ratio(media, vip).cor
    if cor == COR_VERMELHA:
        texto += (
            f"O cenário requer atenção imediata: a média geral é de **{media:.1f} alunos/prof**, "
            "o que indica ociosidade na grade."
        )
    elif cor == COR_AMARELA:
        texto += (
            f"A operação está saudável, com média de **{media:.1f} alunos/prof**, "
            "dentro da meta esperada."
        )
    else:
        texto += (
            f"Performance excelente! A média de **{media:.1f} alunos/prof** sugere alta demanda "
            "e possível necessidade de expansão."
        )
    return texto


def _bloco_alertas(kpis: Kpis, critico: Optional[HorarioStat]) -> str:
    if kpis.aulas_em_alerta == 0:
        return "✅ Nenhuma aula operando no vermelho neste recorte."

    pct = kpis.aulas_em_alerta / kpis.total_aulas * 100 if kpis.total_aulas else 0.0
    texto = (
        f"⚠️ **Atenção:** Detectei **{kpis.aulas_em_alerta} aulas** operando no vermelho. "
        f"Isso representa {pct:.0f}% da grade deste recorte."
    )
    if critico is not None:
        texto += (
            f" O horário mais crítico é o das **{critico.horario}**, com {critico.alertas} "
            f"alerta(s) e média de {critico.media:.1f} alunos/prof."
        )
    return texto


def _bloco_destaques(
    melhor: Optional[HorarioStat],
    top: Optional[ProfessorStat],
    super_lotadas: int,
    pior_aula: Optional[Aula],
) -> Optional[str]:
    partes: List[str] = []
    if melhor is not None:
        partes.append(
            f"O destaque positivo vai para o horário das **{melhor.horario}**, "
            f"com média de {melhor.media:.1f} alunos/prof."
        )
    if top is not None:
        partes.append(
            f"**{top.nome}** lidera o ranking de horas com {top.horas} aula(s) "
            f"e {top.total_alunos} presenças."
        )
    if super_lotadas > 0:
        partes.append(
            f"🚀 **Oportunidade:** Temos **{super_lotadas} turmas superlotadas**. "
            "Considere abrir horários paralelos."
        )
    if pior_aula is not None and pior_aula.alerta:
        partes.append(
            f"Sugiro revisar a estratégia para as **{pior_aula.horario}** "
            f"({pior_aula.tipo_aula}), que tiveram a menor adesão."
        )
    return " ".join(partes) or None


def _bloco_tendencia(t: Optional[Tendencia]) -> Optional[str]:
    if t is None:
        return None
    comparacao = f"({t.media_recente:.1f} vs {t.media_geral:.1f} alunos/prof)"
    if t.direcao == TENDENCIA_MELHORA:
        return f"📈 Os últimos {t.janela} dias estão acima da média do período {comparacao}."
    if t.direcao == TENDENCIA_QUEDA:
        return f"📉 Os últimos {t.janela} dias estão abaixo da média do período {comparacao}."
    return f"➡️ Os últimos {t.janela} dias seguem estáveis em relação à média do período {comparacao}."


def gerar_narrativa(
    *,
    kpis: Kpis,
    horarios: Sequence[HorarioStat],
    professores: Sequence[ProfessorStat],
    vip: bool = False,
    tendencia_recente: Optional[Tendencia] = None,
    super_lotadas: int = 0,
    pior_aula: Optional[Aula] = None,
) -> Narrativa:
    """Monta o diagnóstico a partir das saídas de agregação.

    Parameters
    ----------
    kpis:
        KPIs do recorte; ``total_aulas == 0`` produz o texto fixo de dados
        insuficientes.
    horarios:
        Estatísticas por horário (melhor e crítico).
    professores:
        Ranking de professores por horas (o primeiro é o destaque).
    vip:
        Tier usado para julgar a média geral.
    """
    if kpis.total_aulas == 0:
        return Narrativa(resumo=SEM_DADOS, sem_dados=True)

    return Narrativa(
        resumo=_bloco_resumo(kpis, vip),
        alertas=_bloco_alertas(kpis, critical_horario(horarios)),
        destaques=_bloco_destaques(
            best_horario(horarios),
            professores[0] if professores else None,
            super_lotadas,
            pior_aula,
        ),
        tendencia=_bloco_tendencia(tendencia_recente),
    )


def narrativa_de_aulas(
    aulas: Sequence[Aula],
    janela: int = 3,
    tolerancia: float = 0.5,
) -> Narrativa:
    """Atalho: calcula as agregações necessárias e gera a narrativa."""
    vip = tier_vip(aulas)
    return gerar_narrativa(
        kpis=compute_kpis(aulas, vip),
        horarios=horarios_stats(aulas, vip),
        professores=professores_stats(aulas),
        vip=vip,
        tendencia_recente=tendencia(aulas, janela, tolerancia),
        super_lotadas=contar_super_lotadas(aulas),
        pior_aula=melhor_pior_aula(aulas)[1],
    )
