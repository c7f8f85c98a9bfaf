"""arenadash

Motor de indicadores do dashboard da arena (aulas, ocupação e rentabilidade).
"""

__version__ = "0.1.0"
