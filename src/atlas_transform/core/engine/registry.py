"""
Registro estrutural de regras de um módulo.

Este módulo define o `RuleRegistry`, responsável por registrar as regras
declaradas por um módulo de transformação e validar a integridade
estrutural antes de qualquer planejamento ou execução.

O registry atua como uma camada de proteção antecipada, garantindo que:
    - cada regra possua um identificador válido
    - não existam identificadores duplicados
    - a ordem de declaração seja preservada explicitamente

Limites explícitos:
    - Não planeja execução (ver `core.engine.planner`)
    - Não executa regras
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .rule import Rule


class DuplicateRuleIdError(ValueError):
    """
    Exceção levantada quando um módulo declara duas regras com o mesmo `id`.

    A duplicidade é tratada como erro estrutural do módulo e é detectada no
    momento do registro, antes da execução.
    """


@dataclass
class RuleRegistry:
    """Registro canônico de regras, preservando a ordem de declaração."""

    _rules: Dict[str, Rule] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, rule: Rule) -> None:
        rule_id = getattr(rule, "id", None)
        if not isinstance(rule_id, str) or not rule_id.strip():
            raise ValueError("rule.id must be a non-empty string")
        if not callable(getattr(rule, "run", None)):
            raise ValueError(f"rule '{rule_id}' must define run(ctx)")
        if rule_id in self._rules:
            raise DuplicateRuleIdError(f"Duplicate rule id: {rule_id}")
        self._rules[rule_id] = rule
        self._order.append(rule_id)

    def get(self, rule_id: str) -> Rule:
        return self._rules[rule_id]

    def list(self) -> List[Rule]:
        return [self._rules[rid] for rid in self._order]

    def __len__(self) -> int:
        return len(self._order)
