"""arenadash.dashboard.normalizacao

Normalização de professores e horários.

Estas duas funções são a **única** fonte de verdade para comparar horários e
contar professores. Agrupamento, filtros e catálogos chamam sempre as mesmas
funções para não existirem regras divergentes entre telas.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

# Separadores: vírgula (com espaços opcionais) ou a conjunção " e ".
_SPLIT_RE = re.compile(r",\s*|\s+e\s+")

# Apelidos conhecidos na planilha de presenças.
_ALIASES: Dict[str, str] = {
    "Peu": "Peu Beck",
}


def _as_text(value: Any) -> str:
    """Converte uma célula em texto, tratando None/NaN como vazio."""
    if value is None:
        return ""
    if isinstance(value, float) and value != value:  # NaN
        return ""
    return str(value)


def normalize_instructors(value: Any) -> List[str]:
    """Divide o campo ``professores`` em nomes canônicos.

    Parameters
    ----------
    value:
        Texto livre, p.ex. ``"Ana, Bruno e Carla"``. Aceita None/NaN.

    Returns
    -------
    list[str]
        Nomes na ordem original, sem vazios e com apelidos resolvidos.
        Ex.: ``["Ana", "Bruno", "Carla"]``.
    """
    text = _as_text(value).strip()
    if not text:
        return []
    names: List[str] = []
    for token in _SPLIT_RE.split(text):
        name = token.strip()
        if not name:
            continue
        names.append(_ALIASES.get(name, name))
    return names


def instructor_count(value: Any) -> int:
    """Quantidade de professores da aula (mínimo 1)."""
    return max(1, len(normalize_instructors(value)))


def normalize_time(value: Any) -> str:
    """Normaliza um horário livre para o rótulo de faixa ``HHh``.

    ``"5:00"`` -> ``"05h"``, ``"05h"`` -> ``"05h"``, ``"14:30"`` -> ``"14h"``.
    A função é idempotente. Texto vazio retorna ``""``.
    """
    text = _as_text(value).replace("h", "").replace("H", "")
    hour = text.split(":", 1)[0].strip()
    if not hour:
        return ""
    return hour.zfill(2) + "h"
