# src/atlas_transform/core/engine/planner.py
"""
Planejador de execução das regras de um módulo.

Este módulo valida o grafo de dependências declarado pelas regras e produz
uma ordem de execução topológica determinística.

Decisões arquiteturais:
    - Ordenação topológica de Kahn com fila de prioridade
    - Empates são resolvidos por ordem lexicográfica de `rule.id`
    - Erros estruturais são fatais e detectados antes da execução

Invariantes:
    - Nenhuma regra aparece antes de suas dependências
    - Cada regra aparece exatamente uma vez
    - O mesmo módulo produz sempre a mesma ordem

Limites explícitos:
    - Não executa regras
    - Não interage com o workspace
"""

from __future__ import annotations

import heapq
from typing import Dict, Iterable, List

from .rule import Rule


class UnknownDependencyError(ValueError):
    """Uma regra declarou em `depends_on` um id que não existe no módulo."""


class CycleDetectedError(ValueError):
    """
    O grafo de dependências entre regras contém um ciclo.

    Nenhuma ordem topológica válida pode ser produzida; ciclos não são
    quebrados automaticamente.
    """


def plan_execution(rules: Iterable[Rule]) -> List[Rule]:
    """
    Valida e ordena regras topologicamente de forma determinística.

    Args:
        rules: regras declaradas pelo módulo.

    Returns:
        List[Rule]: regras em ordem de execução.

    Raises:
        ValueError: id inválido ou duplicado.
        UnknownDependencyError: dependência inexistente.
        CycleDetectedError: ciclo no grafo de dependências.
    """
    by_id: Dict[str, Rule] = {}
    for rule in rules:
        rid = getattr(rule, "id", None)
        if not isinstance(rid, str) or not rid.strip():
            raise ValueError("rule.id must be a non-empty string")
        if rid in by_id:
            raise ValueError(f"Duplicate rule id: {rid}")
        by_id[rid] = rule

    pending: Dict[str, int] = {}
    dependents: Dict[str, List[str]] = {rid: [] for rid in by_id}
    for rid, rule in by_id.items():
        deps = list(getattr(rule, "depends_on", None) or [])
        for dep in deps:
            if dep not in by_id:
                raise UnknownDependencyError(f"Rule '{rid}' depends on unknown rule '{dep}'")
            dependents[dep].append(rid)
        pending[rid] = len(deps)

    ready = [rid for rid, count in pending.items() if count == 0]
    heapq.heapify(ready)
    order: List[str] = []
    while ready:
        rid = heapq.heappop(ready)
        order.append(rid)
        for child in dependents[rid]:
            pending[child] -= 1
            if pending[child] == 0:
                heapq.heappush(ready, child)

    if len(order) != len(by_id):
        stuck = sorted(rid for rid, count in pending.items() if count > 0)
        raise CycleDetectedError(f"Cycle detected in rule dependency graph: {stuck}")
    return [by_id[rid] for rid in order]
