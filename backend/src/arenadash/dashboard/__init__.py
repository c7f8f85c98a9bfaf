"""arenadash.dashboard

Pacote com a lógica de dados do Dashboard da arena.

Este pacote concentra o pipeline que transforma as presenças (uma linha por
aluno por aula) em aulas agrupadas, classificadas e agregadas. Os routers em
``arenadash.app`` permanecem finos (HTTP/serialização) e a lógica vive aqui.

Fluxo
-----
presenças -> filtro de datas/tipo/horário -> agrupamento em aulas ->
classificação -> agregações/rankings -> narrativa.

Todo o pipeline é puro: é recalculado por completo a cada mudança de filtro e
nunca lê estado global.
"""
